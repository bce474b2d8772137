"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..cache import AnalysisCache
from ..config import AnalysisConfig, load_config

console = Console()
err_console = Console(stderr=True)


def parse_extensions(value: Optional[str]) -> Optional[list[str]]:
    """Split a comma-separated extension list; ``None`` or blank means all."""
    if not value:
        return None
    extensions = [ext.strip().lstrip(".") for ext in value.split(",")]
    return [ext for ext in extensions if ext] or None


def resolve_config(
    config: Optional[Path] = None,
    threads: Optional[int] = None,
    max_size: Optional[float] = None,
    include: Optional[str] = None,
    exclude: Optional[str] = None,
    cache: Optional[bool] = None,
    group_by_dir: bool = False,
    encoding: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Path] = None,
) -> AnalysisConfig:
    """Build an AnalysisConfig from CLI options."""
    overrides = {
        "workers": threads,
        "max_file_size_mb": max_size,
        "include_extensions": parse_extensions(include),
        "exclude_pattern": exclude,
        "cache_enabled": cache,
        "verbose": verbose,
        "quiet": quiet,
        "log_file": str(log_file) if log_file is not None else None,
    }
    # Flags only switch these on; leaving them off keeps config-file values
    if group_by_dir:
        overrides["group_by_dir"] = True
    if encoding:
        overrides["detect_encoding"] = True
    return load_config(config_file=config, **overrides)


def open_cache(config: AnalysisConfig, enabled: Optional[bool] = None) -> AnalysisCache:
    return AnalysisCache(
        cache_dir=config.cache_dir,
        ttl_hours=config.cache_ttl_hours,
        enabled=config.cache_enabled if enabled is None else enabled,
    )
