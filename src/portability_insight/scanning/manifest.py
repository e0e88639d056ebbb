"""Dependency classifier for the project manifest (package.json).

Parsing returns a tagged result instead of raising: a corrupt manifest
must not block analysis of the rest of the archive, and callers (and tests)
can still tell "no manifest" apart from "unreadable manifest".
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..catalog import DEFAULT_CATALOG, PatternCatalog
from ..config import path_segments
from ..models import Dependency, DependencyStatus, FileTable

PROPRIETARY_NOTE = "Proprietary package - must be removed"
BACKEND_NOTE = "Backend dependency - adapt to your infrastructure"
STANDARD_NOTE = "Standard library"

# Manifest sections, in classification order.
SECTIONS = ("dependencies", "devDependencies")


class ManifestStatus(Enum):
    PARSED = "parsed"
    MISSING = "missing"
    INVALID = "invalid"


@dataclass(frozen=True)
class ManifestParse:
    """Outcome of decoding a manifest.

    ``entries`` keeps (name, version) pairs in section order; a package
    declared in both sections appears twice.
    """

    status: ManifestStatus
    entries: tuple[tuple[str, str], ...] = field(default_factory=tuple)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is ManifestStatus.PARSED


def find_manifest(
    files: FileTable,
    manifest_name: str = "package.json",
    excluded_dirs: tuple[str, ...] = ("node_modules",),
) -> Optional[str]:
    """Return the path of the first manifest outside excluded directories."""
    for path in files:
        segments = path_segments(path)
        if segments[-1] != manifest_name:
            continue
        if any(d in segments for d in excluded_dirs):
            continue
        return path
    return None


def parse_manifest(text: Optional[str]) -> ManifestParse:
    """Decode manifest text; never raises."""
    if text is None:
        return ManifestParse(ManifestStatus.MISSING)

    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        return ManifestParse(ManifestStatus.INVALID, error=str(e))

    if not isinstance(data, dict):
        return ManifestParse(
            ManifestStatus.INVALID,
            error=f"expected a JSON object, got {type(data).__name__}",
        )

    entries: list[tuple[str, str]] = []
    for section in SECTIONS:
        declared = data.get(section)
        if not isinstance(declared, dict):
            continue
        for name, version in declared.items():
            entries.append((name, version if isinstance(version, str) else json.dumps(version)))

    return ManifestParse(ManifestStatus.PARSED, entries=tuple(entries))


def classify_dependency(
    name: str, version: str, catalog: PatternCatalog = DEFAULT_CATALOG
) -> Dependency:
    """Classify one declared package.

    The proprietary check wins over every other rule.
    """
    label = f"{name}@{version}"

    if any(prefix in name for prefix in catalog.package_prefixes()):
        return Dependency(label, DependencyStatus.INCOMPATIBLE, PROPRIETARY_NOTE)

    if catalog.is_backend_package(name):
        return Dependency(label, DependencyStatus.WARNING, BACKEND_NOTE)

    staple = catalog.staple_for(name)
    if staple is not None:
        return Dependency(label, DependencyStatus.COMPATIBLE, staple.note)

    return Dependency(label, DependencyStatus.COMPATIBLE, STANDARD_NOTE)


def classify_dependencies(
    parsed: ManifestParse, catalog: PatternCatalog = DEFAULT_CATALOG
) -> list[Dependency]:
    """Classify every entry of a parsed manifest; empty unless PARSED."""
    if not parsed.ok:
        return []
    return [classify_dependency(name, version, catalog) for name, version in parsed.entries]
