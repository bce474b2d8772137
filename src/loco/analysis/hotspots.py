"""Hotspot detection and file rankings.

Flags files that stand out from the rest of the corpus. Thresholds are
percentiles of the analyzed population, so a file is only "large" or "complex"
relative to its neighbours.

Runs after every file has been classified; it needs the complete list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

import numpy as np

from ..config import DEFAULT_THRESHOLDS, ThresholdConfig
from ..logging_config import get_logger
from ..scanning.models import FileMetric

logger = get_logger(__name__)


@dataclass(frozen=True)
class HotspotThresholds:
    """Population-relative limits for one corpus."""

    lines: float
    complexity: float
    todo_density: float


@dataclass
class Hotspot:
    """A file flagged as high-risk."""

    metric: FileMetric
    risk_score: float  # indicator score that passed the cutoff
    rank_score: float  # composite used for ordering
    rank: int = 0  # 1-indexed
    reasons: List[str] = field(default_factory=list)

    @property
    def path(self) -> str:
        return self.metric.path


def compute_thresholds(metrics: Sequence[FileMetric], percentile: float = 90.0) -> HotspotThresholds:
    """Percentile of line count, complexity and TODO density across ``metrics``."""
    if not metrics:
        return HotspotThresholds(lines=0.0, complexity=0.0, todo_density=0.0)

    lines = np.array([m.total_lines for m in metrics], dtype=float)
    complexity = np.array([m.complexity_score for m in metrics], dtype=float)
    density = np.array([m.todo_density for m in metrics], dtype=float)

    return HotspotThresholds(
        lines=float(np.percentile(lines, percentile)),
        complexity=float(np.percentile(complexity, percentile)),
        todo_density=float(np.percentile(density, percentile)),
    )


def risk_indicators(
    metric: FileMetric,
    limits: HotspotThresholds,
    thresholds: ThresholdConfig = DEFAULT_THRESHOLDS,
) -> tuple[float, List[str]]:
    """Weighted indicator score for one file and the reasons that fired."""
    score = 0.0
    reasons: List[str] = []

    if metric.total_lines > limits.lines:
        score += thresholds.weight_lines
        reasons.append(f"{metric.total_lines} lines (p{thresholds.hotspot_percentile:g}: {limits.lines:.0f})")
    if metric.complexity_score > limits.complexity:
        score += thresholds.weight_complexity
        reasons.append(f"complexity {metric.complexity_score:.3f} (p{thresholds.hotspot_percentile:g}: {limits.complexity:.3f})")
    if metric.todo_density > limits.todo_density:
        score += thresholds.weight_todo_density
        reasons.append(f"{metric.todos + metric.fixmes} TODO/FIXME markers")
    if metric.size_bytes > thresholds.large_file_bytes:
        score += thresholds.weight_size
        reasons.append(f"{metric.size_bytes / 1024:.1f} KB on disk")
    if metric.code_lines > 0 and metric.maintainability_index < thresholds.low_maintainability:
        score += thresholds.weight_maintainability
        reasons.append(f"maintainability {metric.maintainability_index:.1f}")
    if metric.technical_debt_ratio > thresholds.high_debt_ratio:
        score += thresholds.weight_debt
        reasons.append(f"technical debt {metric.technical_debt_ratio:.2f}%")
    if metric.cyclomatic_complexity > thresholds.high_cyclomatic:
        score += thresholds.weight_cyclomatic
        reasons.append(f"cyclomatic complexity {metric.cyclomatic_complexity:.1f}")

    return score, reasons


def rank_score(metric: FileMetric, thresholds: ThresholdConfig = DEFAULT_THRESHOLDS) -> float:
    """Composite used to order retained hotspots; higher is riskier."""
    return (
        metric.complexity_score
        + metric.size_bytes / thresholds.rank_size_divisor
        + (metric.todos + metric.fixmes) / thresholds.rank_todo_divisor
        - metric.maintainability_index / thresholds.rank_maintainability_divisor
        + metric.technical_debt_ratio
        + metric.cyclomatic_complexity / thresholds.rank_cyclomatic_divisor
    )


class HotspotRanker:
    """Scores files against population thresholds and ranks the outliers."""

    def __init__(self, thresholds: Optional[ThresholdConfig] = None):
        self.thresholds = thresholds or DEFAULT_THRESHOLDS

    def rank(self, metrics: Sequence[FileMetric]) -> List[Hotspot]:
        """Top-N hotspots among ``metrics``.

        Args:
            metrics: Every FileMetric of the run, in discovery order

        Returns:
            Hotspots ordered by rank score; ties keep discovery order.
        """
        if not metrics:
            return []

        cfg = self.thresholds
        limits = compute_thresholds(metrics, cfg.hotspot_percentile)

        candidates: List[Hotspot] = []
        for metric in metrics:
            score, reasons = risk_indicators(metric, limits, cfg)
            if score >= cfg.hotspot_cutoff:
                candidates.append(
                    Hotspot(
                        metric=metric,
                        risk_score=score,
                        rank_score=rank_score(metric, cfg),
                        reasons=reasons,
                    )
                )

        # list.sort is stable, so equal scores stay in discovery order
        candidates.sort(key=lambda h: -h.rank_score)
        hotspots = candidates[: cfg.hotspot_top_n]
        for i, hotspot in enumerate(hotspots, start=1):
            hotspot.rank = i

        logger.info(f"{len(candidates)} files passed the hotspot cutoff, keeping {len(hotspots)}")
        return hotspots


TOP_FILE_METRICS: dict[str, tuple[Callable[[FileMetric], float], bool]] = {
    "lines": (lambda m: m.total_lines, True),
    "complexity": (lambda m: m.complexity_score, True),
    "todos": (lambda m: m.todos, True),
    "size": (lambda m: m.size_bytes, True),
    "maintainability": (lambda m: m.maintainability_index, False),
    "debt": (lambda m: m.technical_debt_ratio, True),
}


def top_files(metrics: Sequence[FileMetric], by: str, n: int = 10) -> List[FileMetric]:
    """The ``n`` most extreme files for one metric.

    Maintainability ranks lowest-first; everything else highest-first.

    Raises:
        ValueError: If ``by`` is not a known metric
    """
    if by not in TOP_FILE_METRICS:
        raise ValueError(
            f"Unknown metric: {by!r}. Choose from: {', '.join(sorted(TOP_FILE_METRICS))}"
        )
    key, descending = TOP_FILE_METRICS[by]
    ordered = sorted(metrics, key=lambda m: -key(m) if descending else key(m))
    return ordered[:n]
