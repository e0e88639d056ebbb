"""Public API for Portability Insight.

Example:
    >>> from portability_insight import analyze
    >>>
    >>> with open("project.zip", "rb") as f:
    ...     result = analyze(f.read(), lambda pct, msg: print(pct, msg))
    >>> result.score, result.platform
    (75, 'Lovable')
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

from .catalog import DEFAULT_CATALOG, PatternCatalog, load_catalog
from .config import AnalysisConfig
from .logging_config import get_logger
from .models import AnalysisResult
from .pipeline import AnalysisRun, Blob
from .progress import ProgressCallback

logger = get_logger(__name__)


def resolve_catalog(
    catalog: Optional[PatternCatalog], config: AnalysisConfig
) -> PatternCatalog:
    """Explicit catalog, else the config's catalog file, else the defaults."""
    if catalog is not None:
        return catalog
    if config.catalog_file:
        return load_catalog(Path(config.catalog_file))
    return DEFAULT_CATALOG


def analyze(
    blob: Blob,
    on_progress: Optional[ProgressCallback] = None,
    *,
    catalog: Optional[PatternCatalog] = None,
    config: Optional[AnalysisConfig] = None,
) -> AnalysisResult:
    """Analyze a zipped project and score its portability.

    Args:
        blob: Raw bytes of a zip archive
        on_progress: Optional ``(percent, message)`` callback, called
            synchronously at each checkpoint. Exceptions it raises abort
            the analysis.
        catalog: Pattern catalog (default: DEFAULT_CATALOG, or the
            config's catalog_file when set)
        config: Analysis configuration (default: AnalysisConfig())

    Returns:
        AnalysisResult with score, platform, issues, dependencies,
        recommendations and the extracted file table.

    Raises:
        ArchiveCorruptError: If the blob is not a readable zip archive
        CatalogError: If config.catalog_file cannot be loaded
    """
    config = config or AnalysisConfig()
    run = AnalysisRun(blob, on_progress, resolve_catalog(catalog, config), config)

    logger.info(f"Starting analysis of {len(blob)} byte archive")
    for _stage in run.steps():
        pass

    return _finish(run)


async def analyze_async(
    blob: Blob,
    on_progress: Optional[ProgressCallback] = None,
    *,
    catalog: Optional[PatternCatalog] = None,
    config: Optional[AnalysisConfig] = None,
) -> AnalysisResult:
    """Same as analyze(), yielding to the event loop between stages.

    Runs on the calling loop's thread; nothing executes in parallel.
    Callbacks are still delivered synchronously.
    """
    config = config or AnalysisConfig()
    run = AnalysisRun(blob, on_progress, resolve_catalog(catalog, config), config)

    logger.info(f"Starting analysis of {len(blob)} byte archive")
    for _stage in run.steps():
        await asyncio.sleep(0)

    return _finish(run)


def _finish(run: AnalysisRun) -> AnalysisResult:
    result = run.result
    assert result is not None
    logger.info(
        f"Analysis complete: score={result.score}, platform={result.platform}, "
        f"{len(result.issues)} issues, {result.analyzed_files}/{result.total_files} files analyzed"
    )
    return result
