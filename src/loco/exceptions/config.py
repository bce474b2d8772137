"""Configuration exceptions: paths, settings, language rules."""

from pathlib import Path
from typing import Any, Optional, Tuple

from .base import LocoError


class ConfigurationError(LocoError):
    """Base class for configuration-related errors."""

    pass


class InvalidPathError(ConfigurationError):
    """Raised when the analysis root is missing or inaccessible."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path: {path}", path=path, reason=reason)
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(f"Invalid configuration for {key}: {value}", key=key, value=value, reason=reason)
        self.key = key
        self.value = value
        self.reason = reason


class MalformedRuleError(ConfigurationError):
    """Raised when a language rule carries an unusable comment delimiter.

    Raised while the rule is being built, so no line scan ever runs with a
    delimiter that could corrupt the multi-line carry state.
    """

    def __init__(self, rule: str, reason: str, pair: Optional[Tuple[str, str]] = None):
        super().__init__(
            f"Malformed language rule: {rule}",
            rule=rule,
            reason=reason,
            pair=f"{pair[0]!r}..{pair[1]!r}" if pair is not None else None,
        )
        self.rule = rule
        self.reason = reason
        self.pair = pair
