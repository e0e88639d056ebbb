"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import AnalysisConfig, load_config
from ..models import FileTable

console = Console()


def resolve_config(
    config: Optional[Path] = None,
    catalog: Optional[Path] = None,
    verbose: bool = False,
) -> AnalysisConfig:
    """Build analysis config from CLI options."""
    overrides = {}
    if catalog is not None:
        overrides["catalog_file"] = str(catalog)
    if verbose:
        overrides["verbose"] = True
    return load_config(config_file=config, **overrides)


def score_color(score: int) -> str:
    if score >= 85:
        return "green"
    if score >= 60:
        return "yellow"
    return "red"


def read_directory(root: Path, settings: AnalysisConfig) -> FileTable:
    """Read a project directory into a file table keyed by POSIX relative path."""
    files: FileTable = {}
    for path in sorted(root.rglob("*")):
        if not path.is_file():
            continue
        relative = path.relative_to(root).as_posix()
        if settings.is_excluded(relative):
            continue
        files[relative] = path.read_text(encoding="utf-8", errors="replace")
    return files
