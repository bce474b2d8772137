"""Shared runtime helpers."""

from .progress import ProgressReporter, SilentReporter

__all__ = ["ProgressReporter", "SilentReporter"]
