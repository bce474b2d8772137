"""Aggregation, hotspot ranking and quality estimates over classified files."""

from .aggregator import (
    AggregateStore,
    LanguageAggregate,
    MetricsAggregator,
    ShardedLockStore,
    lines_weighted_mean,
)
from .engine import AnalysisEngine, AnalysisResult, PerformanceMetrics
from .hotspots import Hotspot, HotspotRanker, HotspotThresholds, compute_thresholds, top_files
from .quality import QualityComputer, QualityMetrics

__all__ = [
    "AggregateStore",
    "AnalysisEngine",
    "AnalysisResult",
    "Hotspot",
    "HotspotRanker",
    "HotspotThresholds",
    "LanguageAggregate",
    "MetricsAggregator",
    "PerformanceMetrics",
    "QualityComputer",
    "QualityMetrics",
    "ShardedLockStore",
    "compute_thresholds",
    "lines_weighted_mean",
    "top_files",
]
