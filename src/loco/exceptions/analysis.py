"""Analysis-related exceptions: unreadable input files."""

from pathlib import Path

from .base import LocoError


class AnalysisError(LocoError):
    """Base class for analysis-related errors."""
    pass


class UnreadableFileError(AnalysisError):
    """Raised when a file cannot be read or decoded.

    The engine recovers from this locally: the file is skipped for the run
    and never contributes to any statistic.
    """

    def __init__(self, filepath: Path, reason: str):
        super().__init__(f"Cannot read file: {filepath}", filepath=filepath, reason=reason)
        self.filepath = filepath
        self.reason = reason
