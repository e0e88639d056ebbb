"""Exception hierarchy for Portability Insight."""

from .analysis import AnalysisError, ArchiveCorruptError
from .base import PortabilityInsightError
from .config import CatalogError, ConfigurationError, InvalidConfigError

__all__ = [
    "PortabilityInsightError",
    "AnalysisError",
    "ArchiveCorruptError",
    "ConfigurationError",
    "InvalidConfigError",
    "CatalogError",
]
