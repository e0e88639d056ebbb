"""Archive loading, manifest classification and source scanning."""

from .archive import LoadedArchive, load_archive
from .manifest import (
    ManifestParse,
    ManifestStatus,
    classify_dependencies,
    classify_dependency,
    find_manifest,
    parse_manifest,
)
from .sources import scan_proprietary_files, scan_source_text, select_source_files

__all__ = [
    "LoadedArchive",
    "load_archive",
    "ManifestParse",
    "ManifestStatus",
    "classify_dependencies",
    "classify_dependency",
    "find_manifest",
    "parse_manifest",
    "scan_proprietary_files",
    "scan_source_text",
    "select_source_files",
]
