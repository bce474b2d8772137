"""Language rules and line classification."""

from .classifier import (
    NORMAL,
    InsideComment,
    LineKind,
    LineResult,
    LineState,
    Normal,
    classify,
    classify_line,
)
from .languages import (
    LANGUAGE_LABELS,
    RULES,
    LanguageRule,
    RuleRegistry,
    default_registry,
    get_rule,
    language_label,
)
from .models import FileMetric

__all__ = [
    # Rules
    "LanguageRule",
    "RuleRegistry",
    "RULES",
    "LANGUAGE_LABELS",
    "default_registry",
    "get_rule",
    "language_label",
    # Classification
    "LineKind",
    "LineResult",
    "LineState",
    "Normal",
    "InsideComment",
    "NORMAL",
    "classify_line",
    "classify",
    "FileMetric",
]
