"""Configuration exceptions: settings and pattern catalogs."""

from pathlib import Path
from typing import Any, Union

from .base import PortabilityInsightError


class ConfigurationError(PortabilityInsightError):
    """Base class for configuration-related errors."""

    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class CatalogError(ConfigurationError):
    """Raised when a pattern catalog file cannot be loaded."""

    def __init__(self, source: Union[str, Path], reason: str):
        super().__init__(
            f"Invalid pattern catalog: {source}",
            details={"source": str(source), "reason": reason},
        )
        self.source = source
        self.reason = reason
