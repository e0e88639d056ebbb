"""
Portability Insight - Platform Lock-in Detection for Generated Projects

Unpacks a project archive produced by an AI coding platform (Lovable,
GPT Engineer, Bolt, v0), finds the markers that tie it to its origin,
classifies its dependencies and scores how portable it is, with concrete
remediation steps.
"""

__version__ = "0.1.0"

from .api import analyze, analyze_async
from .catalog import DEFAULT_CATALOG, PatternCatalog
from .exceptions import ArchiveCorruptError
from .models import AnalysisResult, Dependency, DependencyStatus, Issue, Severity
from .preflight import (
    PreflightReport,
    clean_package_json,
    detect_needed_polyfills,
    find_proprietary_cdn_urls,
    generate_env_example,
    needs_cleaning,
    preflight_files,
    should_remove_file,
)

__all__ = [
    "analyze",  # Main entry point
    "analyze_async",
    "AnalysisResult",
    "Issue",
    "Dependency",
    "Severity",
    "DependencyStatus",
    "PatternCatalog",
    "DEFAULT_CATALOG",
    "ArchiveCorruptError",
    "preflight_files",
    "PreflightReport",
    "should_remove_file",
    "needs_cleaning",
    "find_proprietary_cdn_urls",
    "detect_needed_polyfills",
    "generate_env_example",
    "clean_package_json",
]
