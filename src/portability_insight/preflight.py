"""Catalog-driven checks run on an extracted project before the rewrite step.

The rewrite itself happens elsewhere. These helpers decide which files to
drop outright, which need rewriting, which standard hooks must be
polyfilled once platform imports are gone, and what environment variables
the cleaned project expects.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .catalog import DEFAULT_CATALOG, PatternCatalog
from .config import AnalysisConfig, path_segments
from .logging_config import get_logger
from .scanning.manifest import find_manifest

logger = get_logger(__name__)

POLYFILL_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")

# Hook -> usage regex; polyfilled only in files that also reference a platform.
HOOK_USAGE = {
    "use-mobile": re.compile(r"useIsMobile|use-mobile|useMobile", re.IGNORECASE),
    "use-toast": re.compile(r"useToast|use-toast", re.IGNORECASE),
    "use-sidebar": re.compile(r"useSidebar|use-sidebar", re.IGNORECASE),
}

ENV_REFERENCE = re.compile(
    r"(?:import\.meta\.env\.|process\.env\.)(VITE_[A-Z_]+|REACT_APP_[A-Z_]+)"
)

EMPTY_ENV_EXAMPLE = """# Environment variables
# Add your variables here
# VITE_API_URL=https://api.example.com
"""


@dataclass
class CleanedText:
    """Rewritten text plus a human-readable log of what changed."""

    cleaned: str
    changes: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.changes)


def should_remove_file(path: str, catalog: PatternCatalog = DEFAULT_CATALOG) -> bool:
    """True when ``path`` is a platform file that has no place in the cleaned project."""
    name = path_segments(path)[-1]
    for pattern in catalog.removable_files:
        if name == pattern or f"/{pattern}" in path or path.endswith(pattern):
            return True
    return False


def needs_cleaning(content: str, catalog: PatternCatalog = DEFAULT_CATALOG) -> bool:
    """True when ``content`` still references a platform import, host or package."""
    for pattern in catalog.import_regexes:
        if re.search(pattern, content):
            return True

    if any(domain in content for domain in catalog.telemetry_domains):
        return True

    if '"dependencies"' in content or '"devDependencies"' in content:
        return any(f'"{pkg}"' in content for pkg in catalog.suspicious_packages)

    return False


def find_proprietary_cdn_urls(
    content: str, catalog: PatternCatalog = DEFAULT_CATALOG
) -> list[str]:
    """Every URL in ``content`` that points at a platform-owned asset CDN."""
    urls: list[str] = []
    for cdn in catalog.asset_cdns:
        regex = re.compile(rf"https?://[^'\"\s]*{re.escape(cdn)}[^'\"\s]*", re.IGNORECASE)
        urls.extend(regex.findall(content))
    return urls


def detect_needed_polyfills(
    files: Mapping[str, str], catalog: PatternCatalog = DEFAULT_CATALOG
) -> list[str]:
    """Hooks that must be regenerated once platform imports are stripped."""
    brand_terms = list(catalog.brand_prefixes)
    brand_terms.extend(f"{p.lstrip('@')}-" for p in catalog.brand_prefixes)
    brand_reference = re.compile("|".join(re.escape(t) for t in brand_terms), re.IGNORECASE)

    needed: list[str] = []
    for hook, usage in HOOK_USAGE.items():
        for path, content in files.items():
            if not path.endswith(POLYFILL_EXTENSIONS):
                continue
            if usage.search(content) and brand_reference.search(content):
                needed.append(hook)
                break
    return needed


def generate_env_example(
    files: Mapping[str, str], catalog: PatternCatalog = DEFAULT_CATALOG
) -> str:
    """Render a ``.env.example`` listing the variables the code reads."""
    variables: dict[str, None] = {}
    for content in files.values():
        for match in ENV_REFERENCE.finditer(content):
            name = match.group(1)
            if any(marker in name for marker in catalog.env_var_markers):
                continue
            variables[name] = None

    if not variables:
        return EMPTY_ENV_EXAMPLE

    lines = [
        "# Environment variables detected in the project",
        "# Fill in the values for your infrastructure",
        "",
    ]
    lines.extend(f"{name}=" for name in variables)
    return "\n".join(lines) + "\n"


def clean_package_json(
    content: str, catalog: PatternCatalog = DEFAULT_CATALOG
) -> CleanedText:
    """Drop platform packages and platform-invoking scripts from a manifest.

    Invalid JSON is returned untouched with no changes.
    """
    try:
        pkg = json.loads(content)
    except ValueError as e:
        logger.warning(f"Cannot clean package.json: {e}")
        return CleanedText(content)
    if not isinstance(pkg, dict):
        return CleanedText(content)

    changes: list[str] = []

    for section, label in (("dependencies", "Dependency"), ("devDependencies", "Dev dependency")):
        declared = pkg.get(section)
        if not isinstance(declared, dict):
            continue
        for name in catalog.suspicious_packages:
            if name in declared:
                del declared[name]
                changes.append(f"{label} removed: {name}")

    scripts = pkg.get("scripts")
    if isinstance(scripts, dict):
        for key, value in list(scripts.items()):
            if isinstance(value, str) and any(m in value for m in catalog.script_markers):
                del scripts[key]
                changes.append(f"Script removed: {key}")

    return CleanedText(json.dumps(pkg, indent=2, ensure_ascii=False), changes)


@dataclass
class PreflightReport:
    """What cleaning an extracted project would do, without doing it."""

    removable_files: list[str] = field(default_factory=list)
    files_to_clean: list[str] = field(default_factory=list)
    cdn_urls: dict[str, list[str]] = field(default_factory=dict)
    polyfills: list[str] = field(default_factory=list)
    env_example: str = EMPTY_ENV_EXAMPLE
    manifest_path: Optional[str] = None
    manifest: Optional[CleanedText] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "removableFiles": self.removable_files,
            "filesToClean": self.files_to_clean,
            "cdnUrls": self.cdn_urls,
            "polyfills": self.polyfills,
            "envExample": self.env_example,
            "manifest": self.manifest_path,
            "manifestChanges": self.manifest.changes if self.manifest else [],
        }


def preflight_files(
    files: Mapping[str, str],
    catalog: PatternCatalog = DEFAULT_CATALOG,
    config: Optional[AnalysisConfig] = None,
) -> PreflightReport:
    """Run every preflight check over an extracted file table.

    Excluded directories are skipped. Polyfills and the ``.env.example``
    are derived from the files that survive removal.
    """
    config = config or AnalysisConfig()
    report = PreflightReport()
    kept: dict[str, str] = {}

    for path, content in files.items():
        if config.is_excluded(path):
            continue
        if should_remove_file(path, catalog):
            report.removable_files.append(path)
            continue
        kept[path] = content
        if needs_cleaning(content, catalog):
            report.files_to_clean.append(path)
        urls = find_proprietary_cdn_urls(content, catalog)
        if urls:
            report.cdn_urls[path] = urls

    report.polyfills = detect_needed_polyfills(kept, catalog)
    report.env_example = generate_env_example(kept, catalog)

    report.manifest_path = find_manifest(kept, config.manifest_name, config.excluded_dirs)
    if report.manifest_path is not None:
        report.manifest = clean_package_json(kept[report.manifest_path], catalog)

    logger.debug(
        f"Preflight: {len(report.removable_files)} removable, "
        f"{len(report.files_to_clean)} to clean, {len(report.polyfills)} polyfills"
    )
    return report
