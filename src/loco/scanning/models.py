"""Data models for the scanning layer."""

from __future__ import annotations

from dataclasses import dataclass


def _percent(part: int, whole: int) -> float:
    return part / whole * 100.0 if whole > 0 else 0.0


@dataclass(frozen=True)
class FileMetric:
    """Line classification and heuristic signals for a single file.

    Built once by the classifier and shared read-only afterwards.
    ``code_lines + comment_lines + blank_lines == total_lines`` always holds.
    """

    path: str
    language: str

    # Line classification
    total_lines: int = 0
    code_lines: int = 0
    comment_lines: int = 0
    blank_lines: int = 0

    # Size
    size_bytes: int = 0
    max_line_length: int = 0
    avg_line_length: float = 0.0

    # Keyword signals
    functions: int = 0
    classes: int = 0
    imports: int = 0
    todos: int = 0
    fixmes: int = 0
    test_indicators: int = 0
    doc_indicators: int = 0

    # Derived scores
    complexity_score: float = 0.0
    cyclomatic_complexity: float = 0.0
    maintainability_index: float = 0.0
    technical_debt_ratio: float = 0.0

    @property
    def code_percentage(self) -> float:
        return _percent(self.code_lines, self.total_lines)

    @property
    def comment_percentage(self) -> float:
        return _percent(self.comment_lines, self.total_lines)

    @property
    def blank_percentage(self) -> float:
        return _percent(self.blank_lines, self.total_lines)

    @property
    def todo_density(self) -> float:
        """TODO and FIXME markers per line."""
        if self.total_lines == 0:
            return 0.0
        return (self.todos + self.fixmes) / self.total_lines
