"""
Loco - Lines of Code Insight

Counts code, comment and blank lines across a source tree, aggregates them per
language, flags hotspot files and estimates overall code quality.
"""

__version__ = "0.4.0"
__author__ = "Naman Agarwal"

from .analysis import AnalysisEngine, AnalysisResult, LanguageAggregate, QualityMetrics
from .config import AnalysisConfig, load_config
from .scanning import FileMetric, LanguageRule, classify, classify_line

__all__ = [
    "AnalysisEngine",  # Main entry point
    "AnalysisResult",
    "AnalysisConfig",
    "load_config",
    "FileMetric",
    "LanguageAggregate",
    "QualityMetrics",
    "LanguageRule",
    "classify",
    "classify_line",
]
