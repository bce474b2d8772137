"""Configuration loading and management for loco.

This module provides configuration discovery and validation. Configuration
sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.loco.toml)
    3. Project config (./loco.toml)
    4. Explicit config file
    5. Environment variables (LOCO_*)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(workers=4, group_by_dir=True)
    >>> config.workers
    4
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import LocoError

Verbosity = Literal["quiet", "normal", "verbose"]


@dataclass(frozen=True)
class ThresholdConfig:
    """Hotspot and quality heuristics.

    Every constant here is a policy choice. Line, complexity and TODO density
    limits are percentiles of the analyzed population; the rest are absolute.

    Attributes:
        Hotspot detection:
            hotspot_percentile: Percentile (0-100) of lines, complexity and
                TODO density above which a file counts as an outlier
            hotspot_cutoff: Minimum indicator score for a file to be retained
            hotspot_top_n: Number of hotspots kept after re-ranking

        Indicator weights (cutoff score):
            weight_lines, weight_complexity, weight_todo_density,
            weight_size, weight_maintainability, weight_debt, weight_cyclomatic

        Absolute limits:
            large_file_bytes: Raw size above which a file is "large"
            low_maintainability: Maintainability index considered low
            high_debt_ratio: Technical debt ratio (%) considered high
            high_cyclomatic: Approximate cyclomatic complexity considered high

        Rank score weights:
            rank_size_divisor: Bytes per rank point
            rank_todo_divisor: TODO/FIXME markers per rank point
            rank_maintainability_divisor: Maintainability points per rank point
            rank_cyclomatic_divisor: Cyclomatic complexity per rank point

        Quality estimates:
            test_coverage_scale: Multiplier applied to the test-file share
            doc_file_bonus: Documentation ratio bonus per doc-style file
            doc_file_bonus_cap: Upper bound of the doc-file bonus
            duplication_cv_threshold: Coefficient of variation below which a
                bucket of similar files is treated as look-alike
            duplication_cap: Upper bound of the duplication estimate
    """

    # === Hotspot detection ===
    hotspot_percentile: float = 90.0
    hotspot_cutoff: float = 3.0
    hotspot_top_n: int = 15

    # === Indicator weights ===
    weight_lines: float = 2.0
    weight_complexity: float = 3.0
    weight_todo_density: float = 2.0
    weight_size: float = 1.0
    weight_maintainability: float = 2.0
    weight_debt: float = 1.0
    weight_cyclomatic: float = 1.0

    # === Absolute limits ===
    large_file_bytes: int = 100 * 1024
    low_maintainability: float = 20.0
    high_debt_ratio: float = 5.0
    high_cyclomatic: float = 10.0

    # === Rank score ===
    rank_size_divisor: float = 1000.0
    rank_todo_divisor: float = 10.0
    rank_maintainability_divisor: float = 10.0
    rank_cyclomatic_divisor: float = 10.0

    # === Quality estimates ===
    test_coverage_scale: float = 2.0
    doc_file_bonus: float = 2.0
    doc_file_bonus_cap: float = 10.0
    duplication_cv_threshold: float = 0.05
    duplication_cap: float = 30.0

    def __post_init__(self) -> None:
        """Validate threshold configuration."""
        if not 0.0 <= self.hotspot_percentile <= 100.0:
            raise ValueError("hotspot_percentile must be between 0 and 100")
        if self.hotspot_cutoff < 0:
            raise ValueError("hotspot_cutoff must be non-negative")
        if self.hotspot_top_n < 1:
            raise ValueError("hotspot_top_n must be at least 1")

        weight_fields = [
            "weight_lines",
            "weight_complexity",
            "weight_todo_density",
            "weight_size",
            "weight_maintainability",
            "weight_debt",
            "weight_cyclomatic",
        ]
        for field_name in weight_fields:
            if getattr(self, field_name) < 0:
                raise ValueError(f"{field_name} must be non-negative")

        divisor_fields = [
            "rank_size_divisor",
            "rank_todo_divisor",
            "rank_maintainability_divisor",
            "rank_cyclomatic_divisor",
        ]
        for field_name in divisor_fields:
            if getattr(self, field_name) <= 0:
                raise ValueError(f"{field_name} must be positive")

        if self.large_file_bytes < 1:
            raise ValueError("large_file_bytes must be at least 1")
        if not 0.0 <= self.low_maintainability <= 100.0:
            raise ValueError("low_maintainability must be between 0 and 100")
        if self.test_coverage_scale <= 0:
            raise ValueError("test_coverage_scale must be positive")
        if self.duplication_cv_threshold < 0:
            raise ValueError("duplication_cv_threshold must be non-negative")


DEFAULT_THRESHOLDS = ThresholdConfig()


DEFAULT_EXCLUDES = (
    "target",
    "node_modules",
    ".git",
    "build",
    "dist",
    "__pycache__",
    ".cargo",
    ".next",
    ".nuxt",
    "vendor",
    "coverage",
    ".pytest_cache",
    ".vscode",
    ".idea",
    "bin",
    "obj",
    ".vs",
    "packages",
    ".svn",
    ".hg",
    "deps",
    "tmp",
    "temp",
    "cache",
    ".cache",
    "logs",
    ".terraform",
    "venv",
    "env",
    ".env",
    ".venv",
    "bower_components",
    ".gradle",
    ".loco-cache",
)


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for analysis execution.

    Attributes:
        Performance tuning:
            workers: Number of classification workers (None = logical cores)

        File filtering:
            max_file_size_mb: Files larger than this are never read
            include_extensions: Only analyze these extensions (None = every
                extension that has a language rule)
            exclude_pattern: Regular expression matched against full paths
            default_excludes: Directory names pruned during traversal

        Caching:
            cache_enabled: Reuse FileMetrics for unchanged content
            cache_dir: Directory for cache storage
            cache_ttl_hours: Cache time-to-live in hours

        Reporting:
            group_by_dir: Also aggregate per parent directory
            detect_encoding: Sniff the encoding of every analyzed file
            verbosity: Terminal logging level (quiet, normal, verbose)
            log_file: Also append DEBUG-level logs to this file
    """

    # Performance tuning
    workers: Optional[int] = None

    # File filtering
    max_file_size_mb: float = 100.0
    include_extensions: Optional[list[str]] = None
    exclude_pattern: Optional[str] = None
    default_excludes: tuple[str, ...] = DEFAULT_EXCLUDES

    # Caching
    cache_enabled: bool = False
    cache_dir: str = ".loco-cache"
    cache_ttl_hours: int = 24

    # Reporting
    group_by_dir: bool = False
    detect_encoding: bool = False
    verbosity: Verbosity = "normal"
    log_file: Optional[str] = None

    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.max_file_size_mb <= 0:
            raise ValueError("max_file_size_mb must be positive")
        if self.cache_ttl_hours < 0:
            raise ValueError("cache_ttl_hours must be non-negative")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of: quiet, normal, verbose")

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)

    @property
    def worker_count(self) -> int:
        """Resolved pool size: explicit override or the host's logical cores."""
        return self.workers or os.cpu_count() or 1


default_config = AnalysisConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Configuration sources are merged in priority order (lowest to highest):
        1. Defaults (AnalysisConfig field defaults)
        2. Global config (~/.loco.toml)
        3. Project config (./loco.toml)
        4. Explicit config file (if config_file provided)
        5. Environment variables (LOCO_* prefix)
        6. CLI overrides (kwargs)

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep lower-priority values.

    Returns:
        Validated AnalysisConfig instance

    Raises:
        LocoError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".loco.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except Exception as e:
            raise LocoError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "loco.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise LocoError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise LocoError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise LocoError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    # TOML arrays arrive as lists
    if isinstance(merged.get("default_excludes"), list):
        merged["default_excludes"] = tuple(merged["default_excludes"])

    thresholds_dict = merged.pop("thresholds", None)
    if thresholds_dict is not None:
        if isinstance(thresholds_dict, dict):
            try:
                merged["thresholds"] = ThresholdConfig(**thresholds_dict)
            except (TypeError, ValueError) as e:
                raise LocoError(f"Invalid [thresholds] config: {e}")
        elif isinstance(thresholds_dict, ThresholdConfig):
            merged["thresholds"] = thresholds_dict

    try:
        return AnalysisConfig(**merged)
    except (TypeError, ValueError) as e:
        raise LocoError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from LOCO_* environment variables.

    Supported environment variables:
        LOCO_WORKERS: int
        LOCO_MAX_FILE_SIZE_MB: float
        LOCO_EXCLUDE_PATTERN: str
        LOCO_CACHE_ENABLED: bool (true/false/1/0)
        LOCO_CACHE_DIR: str
        LOCO_CACHE_TTL_HOURS: int
        LOCO_GROUP_BY_DIR: bool
        LOCO_DETECT_ENCODING: bool
        LOCO_VERBOSITY: quiet/normal/verbose
        LOCO_LOG_FILE: str

    Returns:
        Dict of field_name -> parsed_value for any LOCO_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"LOCO_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise LocoError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Args:
        value: Raw string from environment
        type_hint: Type annotation from dataclass

    Returns:
        Parsed value or None if the field cannot be set from the environment

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    # Collections are too awkward for env vars
    if origin in (list, tuple) or type_hint in (list, tuple):
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    with open(path, "rb") as f:
        return tomllib.load(f)
