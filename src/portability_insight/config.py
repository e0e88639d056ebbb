"""Configuration loading and management for Portability Insight.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.portability-insight.toml)
    3. Project config (./portability-insight.toml)
    4. Explicit config file
    5. Environment variables (PORTABILITY_* prefix)
    6. Overrides passed as kwargs (CLI flags)

Example:
    >>> config = load_config(verbose=True, progress_every=10)
    >>> config.verbosity
    'verbose'
    >>> config.progress_every
    10
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Literal, Optional, Union, get_args, get_origin, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "PORTABILITY_"
GLOBAL_CONFIG_NAME = ".portability-insight.toml"
PROJECT_CONFIG_NAME = "portability-insight.toml"


@dataclass(frozen=True)
class ScoreWeights:
    """Point values of the portability score.

    The defaults are the published formula:
    100 - 15 per critical issue - 5 per warning issue
        - 10 per incompatible dependency - 3 per warning dependency,
    +5 when there is no critical issue and no incompatible dependency,
    clamped to [0, 100]. Info issues carry no penalty.
    """

    critical_issue: int = 15
    warning_issue: int = 5
    info_issue: int = 0
    incompatible_dependency: int = 10
    warning_dependency: int = 3
    clean_bonus: int = 5

    def __post_init__(self) -> None:
        for name in self.__dataclass_fields__:
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")


DEFAULT_WEIGHTS = ScoreWeights()


def path_segments(path: str) -> list[str]:
    """Split an archive entry name on either separator."""
    return path.replace("\\", "/").split("/")


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for analysis execution.

    Attributes:
        File selection:
            source_extensions: Extensions scanned line by line for imports
            excluded_dirs: Path segments whose files are never scanned
            manifest_name: Basename of the dependency manifest

        Progress:
            progress_every: Report source-scan progress every N files

        Output control:
            verbosity: Logging verbosity level

        Pattern data:
            catalog_file: Optional TOML catalog layered over the defaults
            weights: Portability score weights
    """

    source_extensions: tuple[str, ...] = (".tsx", ".ts", ".jsx", ".js")
    excluded_dirs: tuple[str, ...] = ("node_modules",)
    manifest_name: str = "package.json"

    progress_every: int = 5

    verbosity: Verbosity = "normal"

    catalog_file: Optional[str] = None
    weights: ScoreWeights = field(default_factory=ScoreWeights)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.source_extensions:
            raise ValueError("source_extensions must not be empty")
        for ext in self.source_extensions:
            if not ext.startswith("."):
                raise ValueError(f"source extension '{ext}' must start with '.'")
        if not self.manifest_name:
            raise ValueError("manifest_name must not be empty")
        if self.progress_every < 1:
            raise ValueError("progress_every must be at least 1")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be quiet, normal or verbose")
        if not isinstance(self.weights, ScoreWeights):
            raise ValueError("weights must be a table of score weights")

    def is_source_file(self, path: str) -> bool:
        return path.endswith(self.source_extensions) and not self.is_excluded(path)

    def is_excluded(self, path: str) -> bool:
        segments = path_segments(path)
        return any(d in segments for d in self.excluded_dirs)


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Build an AnalysisConfig from every configuration source.

    Args:
        config_file: Explicit TOML file, applied after the discovered ones
        **overrides: Field values from the caller (CLI flags). ``verbose``
            and ``quiet`` booleans are accepted in place of ``verbosity``.

    Raises:
        ConfigurationError: If a file is missing or unreadable, or the merged
            values do not validate
    """
    merged: dict[str, Any] = {}

    for path in _config_files(config_file):
        try:
            merged.update(load_toml_file(path))
        except Exception as e:
            raise ConfigurationError(f"Invalid config file '{path}': {e}")

    merged.update(_load_env_vars())
    merged.update(_verbosity_flags(overrides))

    for key in ("source_extensions", "excluded_dirs"):
        if isinstance(merged.get(key), list):
            merged[key] = tuple(merged[key])

    weights = merged.get("weights")
    if isinstance(weights, dict):
        try:
            merged["weights"] = ScoreWeights(**weights)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid [weights] config: {e}")

    try:
        return AnalysisConfig(**merged)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _config_files(explicit: Optional[Path]) -> list[Path]:
    """Existing config files in ascending priority."""
    found = [
        path
        for path in (Path.home() / GLOBAL_CONFIG_NAME, Path.cwd() / PROJECT_CONFIG_NAME)
        if path.exists()
    ]
    if explicit is not None:
        if not explicit.exists():
            raise ConfigurationError(f"Config file not found: {explicit}")
        found.append(explicit)
    return found


def _verbosity_flags(overrides: dict[str, Any]) -> dict[str, Any]:
    result = dict(overrides)
    verbose = result.pop("verbose", False)
    quiet = result.pop("quiet", False)
    if quiet:
        result["verbosity"] = "quiet"
    elif verbose:
        result["verbosity"] = "verbose"
    return result


def _load_env_vars() -> dict[str, Any]:
    """Read scalar fields from ``PORTABILITY_<FIELD>`` environment variables.

    PORTABILITY_MANIFEST_NAME, PORTABILITY_PROGRESS_EVERY,
    PORTABILITY_VERBOSITY and PORTABILITY_CATALOG_FILE are recognised.
    Tuple fields and weights come from TOML only.
    """
    hints = get_type_hints(AnalysisConfig)
    result: dict[str, Any] = {}

    for name in AnalysisConfig.__dataclass_fields__:
        env_key = ENV_PREFIX + name.upper()
        raw = os.environ.get(env_key)
        if raw is None:
            continue
        convert = _env_converter(hints[name])
        if convert is None:
            continue
        try:
            result[name] = convert(raw)
        except ValueError as e:
            raise InvalidConfigError(env_key, raw, str(e))

    return result


def _env_converter(hint: Any) -> Optional[Callable[[str], Any]]:
    """String converter for a field type, or None if it is not env-settable."""
    args = get_args(hint)
    if get_origin(hint) is Union and type(None) in args:
        hint = next(a for a in args if a is not type(None))

    if hint is int:
        return int
    if hint is str or get_origin(hint) is Literal:
        return str
    return None


def load_toml_file(path: Path) -> dict:
    """Parse a TOML file.

    Raises:
        Exception: Whatever the TOML parser raises on malformed input
    """
    try:
        import tomllib
    except ModuleNotFoundError:
        # Python < 3.11
        import tomli as tomllib  # type: ignore

    with open(path, "rb") as f:
        return tomllib.load(f)
