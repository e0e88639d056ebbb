"""Pattern catalog: the data that decides what counts as proprietary.

Detection algorithms never hardcode platform markers. They receive a
PatternCatalog and query it, so widening coverage to a new platform means
editing data here (or shipping a TOML override), not code.

Example:
    >>> from portability_insight.catalog import DEFAULT_CATALOG
    >>> DEFAULT_CATALOG.package_prefixes()
    ('@lovable/', '@gptengineer/', 'lovable-tagger', 'supabase-management')
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .config import load_toml_file
from .exceptions import CatalogError
from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class StaplePackage:
    """A well-known UI/build package that is portable by construction."""

    name: str
    note: str
    exact: bool = True

    def matches(self, package: str) -> bool:
        if self.exact:
            return package == self.name
        return self.name in package


@dataclass(frozen=True)
class PlatformSignature:
    """Markers that attribute a project to an origin platform."""

    label: str
    markers: tuple[str, ...]


@dataclass(frozen=True)
class Remediation:
    """Advice emitted once for any issue pattern containing one of ``markers``."""

    markers: tuple[str, ...]
    text: str


@dataclass(frozen=True)
class AuditMarker:
    """Case-insensitive regex for a residual platform reference in cleaned code."""

    regex: str
    name: str


@dataclass(frozen=True)
class PatternCatalog:
    """Immutable signature tables shared by every analysis run.

    Attributes:
        Detection (archive analysis):
            packages: Substrings of proprietary package names
            imports: Substrings flagged in source lines, tested in order
            files: Substrings of proprietary file basenames

        Hook disambiguation:
            hook_names: Import patterns that are also common community hook names
            brand_prefixes: Platform import prefixes that make a hook proprietary
            local_hook_prefix: Path alias of project-local hooks

        Dependency classification:
            backend_markers: Substrings of backend-platform packages
            staples: Portable UI/build packages with confirming notes

        Attribution and advice:
            platforms: Ordered (label, markers); the first match wins
            remediations: Pattern-driven advice, in lookup order
            remove_packages_advice: Emitted when any dependency is incompatible
            backend_advice: Emitted when any dependency carries a backend marker
            generic_advice: Fixed tail appended to every recommendation list

        Pre-rewrite checks and auditing:
            removable_files: File basenames deleted before the rewrite
            import_regexes: Regexes for proprietary imports anywhere in a file
            telemetry_domains: Hosts receiving platform telemetry
            suspicious_packages: Exact package names stripped from manifests
            script_markers: Substrings of package.json scripts invoking platform tools
            asset_cdns: Hosts serving platform-owned assets
            env_var_markers: Substrings of platform-owned environment variables
            audit_markers: Residual platform references in cleaned output
    """

    packages: tuple[str, ...] = (
        "@lovable/",
        "@gptengineer/",
        "lovable-tagger",
        "supabase-management",
    )
    imports: tuple[str, ...] = (
        "use-mobile",
        "use-toast",
        "@/hooks/use-mobile",
        "@/hooks/use-toast",
        "@lovable/",
        "@gptengineer/",
    )
    files: tuple[str, ...] = (
        ".lovable",
        ".gptengineer",
        "lovable.config",
        ".bolt",
    )

    hook_names: tuple[str, ...] = ("use-mobile", "use-toast")
    brand_prefixes: tuple[str, ...] = ("@lovable", "@gptengineer")
    local_hook_prefix: str = "@/hooks/"

    backend_markers: tuple[str, ...] = ("supabase",)
    staples: tuple[StaplePackage, ...] = (
        StaplePackage("react", "React - works in any environment"),
        StaplePackage("react-dom", "React - works in any environment"),
        StaplePackage("tailwind", "Tailwind CSS - portable configuration", exact=False),
        StaplePackage("vite", "Vite - standard bundler"),
    )

    platforms: tuple[PlatformSignature, ...] = (
        PlatformSignature("Lovable", ("lovable", "gptengineer")),
        PlatformSignature("Bolt", ("bolt",)),
        PlatformSignature("v0", ("v0",)),
    )
    remediations: tuple[Remediation, ...] = (
        Remediation(
            ("use-mobile",),
            "Replace use-mobile with a standard implementation "
            "(e.g. react-responsive or a custom hook built on window.matchMedia)",
        ),
        Remediation(
            ("use-toast",),
            "Replace use-toast with a standard notification library "
            "(e.g. react-hot-toast, sonner)",
        ),
        Remediation(
            ("@lovable", "@gptengineer"),
            "Remove @lovable/ and @gptengineer/ imports and replace them "
            "with open-source alternatives",
        ),
    )
    remove_packages_advice: str = "Remove proprietary packages from package.json"
    backend_advice: str = "Adapt the Supabase configuration or migrate to your own backend"
    generic_advice: tuple[str, ...] = (
        "Configure the path aliases (@/) in your bundler (Vite/Webpack)",
        "Update environment variables for your hosting provider",
        "Test the application locally with npm run dev before deploying",
    )

    removable_files: tuple[str, ...] = (
        ".bolt",
        ".lovable",
        ".gptengineer",
        ".gpteng",
        "lovable.config",
        "gptengineer.config",
        ".lovable.json",
        ".gptengineer.json",
        "bolt.config",
        ".bolt.json",
        ".v0",
        "v0.config",
        ".v0.json",
        "v0-manifest.json",
        ".cursor",
        ".cursorrc",
        "cursor.config",
        ".cursor.json",
        ".replit",
        "replit.nix",
        ".replit.json",
    )
    import_regexes: tuple[str, ...] = (
        r"@lovable/",
        r"@gptengineer/",
        r"from ['\"]@?lovable",
        r"from ['\"]@?gptengineer",
        r"lovable-tagger",
        r"componentTagger",
        r"lovable-core",
        r"gpt-engineer",
        r"@bolt/",
        r"from ['\"]@?bolt",
        r"@v0/",
        r"from ['\"]@?v0",
        r"v0-tagger",
        r"v0-runtime",
        r"@cursor/",
        r"from ['\"]@?cursor",
        r"cursor-sdk",
        r"@replit/",
        r"from ['\"]replit",
        r"replit-runtime",
    )
    telemetry_domains: tuple[str, ...] = (
        "lovable.app",
        "lovable.dev",
        "events.lovable",
        "telemetry.lovable",
        "gptengineer.app",
        "analytics.lovable",
        "tracking.lovable",
        "v0.dev",
        "bolt.new",
    )
    suspicious_packages: tuple[str, ...] = (
        "lovable-tagger",
        "@lovable/core",
        "@lovable/cli",
        "@lovable/runtime",
        "@lovable/plugin-react",
        "@gptengineer/core",
        "@gptengineer/cli",
        "gpt-engineer",
        "lovable-analytics",
        "gpt-engineer-tracker",
        "bolt-core",
        "@bolt/core",
        "@bolt/cli",
        "@bolt/runtime",
        "@v0/core",
        "@v0/cli",
        "@v0/runtime",
        "@v0/ui",
        "v0-tagger",
        "v0-sdk",
        "@cursor/core",
        "@cursor/sdk",
        "cursor-runtime",
        "@replit/core",
        "@replit/extensions",
        "replit-sdk",
    )
    script_markers: tuple[str, ...] = ("lovable", "gpteng", "bolt", "v0", "cursor")
    asset_cdns: tuple[str, ...] = (
        "cdn.lovable.app",
        "cdn.lovable.dev",
        "bolt-assets",
        "assets.bolt.new",
        "cdn.bolt.new",
        "assets.gptengineer.app",
        "cdn.gptengineer.app",
        "storage.lovable.app",
        "storage.lovable.dev",
    )
    env_var_markers: tuple[str, ...] = ("LOVABLE", "GPT")
    audit_markers: tuple[AuditMarker, ...] = (
        AuditMarker(r"lovable", "Lovable"),
        AuditMarker(r"gptengineer", "GPT Engineer"),
        AuditMarker(r"bolt\.new", "Bolt"),
        AuditMarker(r"v0\.dev", "v0"),
        AuditMarker(r"cursor", "Cursor"),
        AuditMarker(r"codeium", "Codeium"),
        AuditMarker(r"windsurf", "Windsurf"),
    )

    # ── Query surfaces ─────────────────────────────────────────

    def package_prefixes(self) -> tuple[str, ...]:
        return self.packages

    def import_or_file_substrings(self) -> tuple[str, ...]:
        return self.imports

    def proprietary_filename_substrings(self) -> tuple[str, ...]:
        return self.files

    def is_hook_pattern(self, pattern: str) -> bool:
        """True for patterns that may name an ordinary local hook."""
        return any(hook in pattern for hook in self.hook_names)

    def is_backend_package(self, name: str) -> bool:
        return any(marker in name for marker in self.backend_markers)

    def staple_for(self, package: str) -> Optional[StaplePackage]:
        for staple in self.staples:
            if staple.matches(package):
                return staple
        return None


DEFAULT_CATALOG = PatternCatalog()


# Fields holding plain string tuples, overridable from TOML as arrays.
_STRING_TUPLE_FIELDS = frozenset(
    {
        "packages",
        "imports",
        "files",
        "hook_names",
        "brand_prefixes",
        "backend_markers",
        "generic_advice",
        "removable_files",
        "import_regexes",
        "telemetry_domains",
        "suspicious_packages",
        "script_markers",
        "asset_cdns",
        "env_var_markers",
    }
)
_STRING_FIELDS = frozenset(
    {"local_hook_prefix", "remove_packages_advice", "backend_advice"}
)


def load_catalog(path: Path, base: PatternCatalog = DEFAULT_CATALOG) -> PatternCatalog:
    """Load a catalog override from a TOML file.

    Top-level keys replace the matching field of ``base``; absent keys keep
    the base value. Structured entries use arrays of tables::

        files = [".lovable", ".bolt", ".windsurf"]

        [[platforms]]
        label = "Lovable"
        markers = ["lovable", "gptengineer"]

        [[staples]]
        name = "tailwind"
        note = "Tailwind CSS - portable configuration"
        exact = false

    Raises:
        CatalogError: If the file is missing, is not valid TOML, or holds
            values of the wrong shape.
    """
    if not path.exists():
        raise CatalogError(path, "file not found")

    try:
        data = load_toml_file(path)
    except Exception as e:
        raise CatalogError(path, f"cannot parse TOML: {e}")

    catalog = catalog_from_dict(data, base=base, source=str(path))
    logger.debug(f"Loaded pattern catalog from {path}")
    return catalog


def catalog_from_dict(
    data: dict[str, Any],
    base: PatternCatalog = DEFAULT_CATALOG,
    source: str = "<dict>",
) -> PatternCatalog:
    """Build a catalog from a plain mapping layered over ``base``."""
    changes: dict[str, Any] = {}

    for key, value in data.items():
        if key in _STRING_TUPLE_FIELDS:
            changes[key] = _string_tuple(value, key, source)
        elif key in _STRING_FIELDS:
            if not isinstance(value, str):
                raise CatalogError(source, f"'{key}' must be a string")
            changes[key] = value
        elif key == "staples":
            changes[key] = tuple(
                StaplePackage(
                    name=_required_str(entry, "name", key, source),
                    note=_required_str(entry, "note", key, source),
                    exact=bool(entry.get("exact", True)),
                )
                for entry in _table_list(value, key, source)
            )
        elif key == "platforms":
            changes[key] = tuple(
                PlatformSignature(
                    label=_required_str(entry, "label", key, source),
                    markers=_string_tuple(entry.get("markers"), f"{key}.markers", source),
                )
                for entry in _table_list(value, key, source)
            )
        elif key == "remediations":
            changes[key] = tuple(
                Remediation(
                    markers=_string_tuple(entry.get("markers"), f"{key}.markers", source),
                    text=_required_str(entry, "text", key, source),
                )
                for entry in _table_list(value, key, source)
            )
        elif key == "audit_markers":
            changes[key] = tuple(
                AuditMarker(
                    regex=_required_str(entry, "regex", key, source),
                    name=_required_str(entry, "name", key, source),
                )
                for entry in _table_list(value, key, source)
            )
        else:
            raise CatalogError(source, f"unknown catalog key '{key}'")

    return dataclasses.replace(base, **changes)


def _string_tuple(value: Any, key: str, source: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise CatalogError(source, f"'{key}' must be a list of strings")
    return tuple(value)


def _table_list(value: Any, key: str, source: str) -> list[dict[str, Any]]:
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise CatalogError(source, f"'{key}' must be an array of tables")
    return value


def _required_str(entry: dict[str, Any], field_name: str, key: str, source: str) -> str:
    value = entry.get(field_name)
    if not isinstance(value, str):
        raise CatalogError(source, f"'{key}' entries need a string '{field_name}'")
    return value

