"""Corpus-wide quality estimates.

Every number here is a coarse heuristic derived from line counts and keyword
hits. None of them measures what its name suggests precisely: test coverage is
inferred from file naming, duplication from how alike files look in aggregate.
"""

from __future__ import annotations

import re
from collections import defaultdict
from dataclasses import dataclass
from pathlib import PurePath
from typing import Mapping, Optional, Sequence

import numpy as np

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..scanning.models import FileMetric
from .aggregator import LanguageAggregate, lines_weighted_mean

# File names that follow common test conventions
_TEST_NAME_PATTERNS = [
    re.compile(r"^test_"),
    re.compile(r"_test\.[^.]+$"),
    re.compile(r"\.(test|spec)\.[^.]+$"),
    re.compile(r"^test\.[^.]+$"),
    re.compile(r"(Test|Tests|Spec)\.[^.]+$"),
]
_TEST_DIRS = frozenset({"test", "tests", "spec", "specs", "__tests__", "testing"})

_DOC_DIRS = frozenset({"doc", "docs", "documentation"})
_DOC_NAME_PATTERN = re.compile(r"readme|doc", re.IGNORECASE)

# Doc keyword bonus: points per percent of lines carrying a doc keyword
_DOC_KEYWORD_SCALE = 0.1
_DOC_KEYWORD_CAP = 5.0

_DUPLICATION_SCALE = 0.5


@dataclass(frozen=True)
class QualityMetrics:
    """Corpus-wide quality estimates, all on a 0-100 scale."""

    overall_maintainability: float = 0.0
    technical_debt_ratio: float = 0.0
    test_coverage_estimate: float = 0.0
    documentation_ratio: float = 0.0
    code_duplication_ratio: float = 0.0


def is_test_path(path: str) -> bool:
    """Whether a path looks like a test file by name or directory."""
    pure = PurePath(path)
    if any(part.lower() in _TEST_DIRS for part in pure.parts[:-1]):
        return True
    return any(pattern.search(pure.name) for pattern in _TEST_NAME_PATTERNS)


def is_doc_path(path: str) -> bool:
    """Whether a path looks like documentation (docs/ tree, README, *doc* names)."""
    pure = PurePath(path)
    if any(part.lower() in _DOC_DIRS for part in pure.parts[:-1]):
        return True
    return bool(_DOC_NAME_PATTERN.search(pure.stem))


class QualityComputer:
    """Derives QualityMetrics from the final aggregates and file list."""

    def __init__(self, thresholds: Optional[ThresholdConfig] = None):
        self.thresholds = thresholds or DEFAULT_THRESHOLDS

    def compute(
        self,
        languages: Mapping[str, LanguageAggregate],
        files: Sequence[FileMetric],
    ) -> QualityMetrics:
        total_files = len(files)
        total_lines = sum(a.total_lines for a in languages.values())
        if total_files == 0 or total_lines == 0:
            return QualityMetrics()

        return QualityMetrics(
            overall_maintainability=self.maintainability(languages),
            technical_debt_ratio=self.debt_ratio(languages),
            test_coverage_estimate=self.test_coverage(files),
            documentation_ratio=self.documentation_ratio(languages, files),
            code_duplication_ratio=self.duplication_ratio(files),
        )

    def maintainability(self, languages: Mapping[str, LanguageAggregate]) -> float:
        """Lines-weighted mean of per-language maintainability."""
        aggregates = list(languages.values())
        if sum(a.total_lines for a in aggregates) == 0:
            return 0.0
        return lines_weighted_mean(
            [a.maintainability_index for a in aggregates],
            [a.total_lines for a in aggregates],
        )

    def debt_ratio(self, languages: Mapping[str, LanguageAggregate]) -> float:
        """TODO and FIXME markers per 100 code lines."""
        code_lines = sum(a.code_lines for a in languages.values())
        if code_lines == 0:
            return 0.0
        markers = sum(a.todos + a.fixmes for a in languages.values())
        return markers / code_lines * 100.0

    def test_coverage(self, files: Sequence[FileMetric]) -> float:
        """Scaled share of test-named files, capped at 100."""
        if not files:
            return 0.0
        test_files = sum(1 for f in files if is_test_path(f.path))
        share = test_files / len(files) * 100.0
        return min(100.0, share * self.thresholds.test_coverage_scale)

    def documentation_ratio(
        self,
        languages: Mapping[str, LanguageAggregate],
        files: Sequence[FileMetric],
    ) -> float:
        """Comment share of all lines plus small documentation bonuses."""
        total_lines = sum(a.total_lines for a in languages.values())
        if total_lines == 0:
            return 0.0

        comment_lines = sum(a.comment_lines for a in languages.values())
        ratio = comment_lines / total_lines * 100.0

        doc_files = sum(1 for f in files if is_doc_path(f.path))
        ratio += min(self.thresholds.doc_file_bonus_cap, doc_files * self.thresholds.doc_file_bonus)

        doc_hits = sum(a.doc_indicators for a in languages.values())
        ratio += min(_DOC_KEYWORD_CAP, doc_hits / total_lines * 100.0 * _DOC_KEYWORD_SCALE)

        return min(100.0, ratio)

    def duplication_ratio(self, files: Sequence[FileMetric]) -> float:
        """Rough look-alike estimate; not clone detection.

        Files are bucketed by order of magnitude of size and by complexity.
        Within a bucket of two or more files, a near-zero spread of average
        line length marks the whole bucket as look-alike.
        """
        if not files:
            return 0.0

        buckets: dict[tuple[int, int], list[float]] = defaultdict(list)
        for f in files:
            if f.total_lines == 0:
                continue
            key = (f.total_lines.bit_length(), round(f.complexity_score * 10))
            buckets[key].append(f.avg_line_length)

        look_alike = 0
        for lengths in buckets.values():
            if len(lengths) < 2:
                continue
            values = np.array(lengths, dtype=float)
            mean = float(values.mean())
            if mean == 0:
                continue
            cv = float(values.std()) / mean
            if cv < self.thresholds.duplication_cv_threshold:
                look_alike += len(lengths)

        ratio = look_alike / len(files) * 100.0 * _DUPLICATION_SCALE
        return min(self.thresholds.duplication_cap, ratio)
