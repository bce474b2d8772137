"""Exception hierarchy for loco."""

from .analysis import AnalysisError, UnreadableFileError
from .base import LocoError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
    MalformedRuleError,
)

__all__ = [
    "LocoError",
    "AnalysisError",
    "UnreadableFileError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "MalformedRuleError",
]
