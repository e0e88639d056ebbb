"""Source scanner: line-level detection of proprietary imports.

Two passes share the catalog:

* ``scan_source_text`` walks one source file line by line against the
  import substrings.
* ``scan_proprietary_files`` checks every file's basename against the
  proprietary filename substrings, whatever its extension.
"""

from __future__ import annotations

from ..catalog import DEFAULT_CATALOG, PatternCatalog
from ..config import AnalysisConfig, path_segments
from ..models import FileTable, Issue, Severity

PLATFORM_HOOK_DESCRIPTION = "Proprietary Lovable/GPT Engineer hook"
LOCAL_HOOK_DESCRIPTION = "Local hook - verify whether it uses proprietary APIs"
CONFIG_FILE_DESCRIPTION = "Proprietary configuration file"


def select_source_files(files: FileTable, config: AnalysisConfig) -> list[str]:
    """Paths to scan line by line, in table order."""
    return [path for path in files if config.is_source_file(path)]


def scan_source_text(
    path: str, content: str, catalog: PatternCatalog = DEFAULT_CATALOG
) -> list[Issue]:
    """Report every proprietary import substring found in ``content``.

    When several matches on one line nest inside each other (``use-toast``
    inside ``@/hooks/use-toast``), only the longest is reported.
    """
    issues: list[Issue] = []
    patterns = catalog.import_or_file_substrings()

    # Split on \n only, so numbering matches what editors show
    for index, line in enumerate(content.split("\n")):
        matched = [p for p in patterns if p in line]
        if not matched:
            continue

        for pattern in _most_specific(matched):
            severity, description = _classify_match(pattern, line, catalog)
            issues.append(
                Issue(
                    file=path,
                    line=index + 1,
                    pattern=pattern,
                    severity=severity,
                    description=description,
                )
            )

    return issues


def scan_proprietary_files(
    files: FileTable, catalog: PatternCatalog = DEFAULT_CATALOG
) -> list[Issue]:
    """Flag platform config files by basename; one issue per matching signature."""
    issues: list[Issue] = []
    for path in files:
        name = path_segments(path)[-1]
        if not name:
            continue
        for signature in catalog.proprietary_filename_substrings():
            if signature in name:
                issues.append(
                    Issue(
                        file=path,
                        pattern=name,
                        severity=Severity.CRITICAL,
                        description=CONFIG_FILE_DESCRIPTION,
                    )
                )
    return issues


def _most_specific(matched: list[str]) -> list[str]:
    return [p for p in matched if not any(p != other and p in other for other in matched)]


def _classify_match(
    pattern: str, line: str, catalog: PatternCatalog
) -> tuple[Severity, str]:
    """Severity and description for one match.

    Hook names double as ordinary community hooks, so they are only
    critical next to a platform import prefix; behind the local alias they
    are downgraded to a warning.
    """
    if catalog.is_hook_pattern(pattern):
        if any(prefix in line for prefix in catalog.brand_prefixes):
            return Severity.CRITICAL, PLATFORM_HOOK_DESCRIPTION
        if catalog.local_hook_prefix in line:
            return Severity.WARNING, LOCAL_HOOK_DESCRIPTION

    return Severity.CRITICAL, f"Proprietary import detected: {pattern}"
