"""The analysis pipeline as a sequence of resumable steps.

Stages run strictly in order:

    extract -> manifest -> config files -> sources -> score -> recommend

``AnalysisRun.steps()`` yields after each stage (and after every batch of
source files) without doing anything else at those points. A synchronous
driver just exhausts the generator; an async driver hands control back to
the event loop at each yield so progress can render between stages.
"""

from __future__ import annotations

from typing import Iterator, Optional, Union

from . import progress as checkpoints
from .catalog import DEFAULT_CATALOG, PatternCatalog
from .config import AnalysisConfig
from .logging_config import get_logger
from .models import AnalysisResult, Issue
from .progress import ProgressCallback, ProgressReporter
from .recommendations import generate_recommendations
from .scanning import (
    ManifestStatus,
    classify_dependencies,
    find_manifest,
    load_archive,
    parse_manifest,
    scan_proprietary_files,
    scan_source_text,
    select_source_files,
)
from .scoring import calculate_score, detect_platform

logger = get_logger(__name__)

Blob = Union[bytes, bytearray, memoryview]


class AnalysisRun:
    """One analysis invocation. Not reusable; create one per archive."""

    def __init__(
        self,
        blob: Blob,
        on_progress: Optional[ProgressCallback] = None,
        catalog: PatternCatalog = DEFAULT_CATALOG,
        config: Optional[AnalysisConfig] = None,
    ):
        self.blob = blob
        self.catalog = catalog
        self.config = config or AnalysisConfig()
        self.progress = ProgressReporter(on_progress, every=self.config.progress_every)
        self.result: Optional[AnalysisResult] = None

    def steps(self) -> Iterator[str]:
        """Run the pipeline, yielding the name of each completed stage.

        ``self.result`` is set once the generator is exhausted.

        Raises:
            ArchiveCorruptError: If the archive cannot be decoded.
        """
        if self.result is not None:
            raise RuntimeError("AnalysisRun has already completed")

        config = self.config
        catalog = self.catalog
        report = self.progress.report

        # ── Extract ────────────────────────────────────────────
        report(checkpoints.EXTRACTING, "Extracting archive...")
        archive = load_archive(self.blob)
        files = archive.files
        report(checkpoints.ARCHIVE_LOADED, f"Archive extracted ({archive.total_files} files)")
        yield "extract"

        # ── Manifest ───────────────────────────────────────────
        report(checkpoints.MANIFEST_LOOKUP, f"Looking for {config.manifest_name}...")
        manifest_path = find_manifest(files, config.manifest_name, config.excluded_dirs)
        parsed = parse_manifest(files[manifest_path] if manifest_path is not None else None)
        if parsed.status is ManifestStatus.INVALID:
            logger.warning(f"Ignoring unreadable manifest {manifest_path}: {parsed.error}")
        dependencies = classify_dependencies(parsed, catalog)
        if manifest_path is not None:
            report(
                checkpoints.MANIFEST_PARSED,
                f"{config.manifest_name} analyzed ({len(dependencies)} dependencies)",
            )
        yield "manifest"

        # ── Proprietary config files ───────────────────────────
        report(checkpoints.CONFIG_FILE_SCAN, "Looking for configuration files...")
        issues: list[Issue] = scan_proprietary_files(files, catalog)
        yield "config_files"

        # ── Source files ───────────────────────────────────────
        sources = select_source_files(files, config)
        total = len(sources)
        report(checkpoints.SOURCE_SCAN_START, f"Scanning source files (0/{total})...")

        analyzed_files = 0
        for index, path in enumerate(sources):
            issues.extend(scan_source_text(path, files[path], catalog))
            analyzed_files += 1
            self.progress.source_file(index, total)
            if (index + 1) % config.progress_every == 0:
                yield "sources"
        logger.debug(f"Scanned {analyzed_files} source files, {len(issues)} issues so far")
        yield "sources"

        # ── Score ──────────────────────────────────────────────
        report(checkpoints.SCORING, "Computing portability score...")
        score = calculate_score(issues, dependencies, archive.total_files, config.weights)
        yield "score"

        # ── Recommendations and attribution ────────────────────
        report(checkpoints.RECOMMENDING, "Generating recommendations...")
        recommendations = generate_recommendations(issues, dependencies, catalog)
        platform = detect_platform(issues, dependencies, catalog)

        report(checkpoints.DONE, "Analysis complete!")

        self.result = AnalysisResult(
            score=score,
            platform=platform,
            total_files=archive.total_files,
            analyzed_files=analyzed_files,
            issues=issues,
            dependencies=dependencies,
            recommendations=recommendations,
            extracted_files=files,
        )
        yield "recommend"
