"""Lexical line classifier.

Classifies every line of a file as code, comment or blank with a small state
machine and derives heuristic metrics from keyword hits along the way.

The only state carried across line boundaries is whether the scan is inside an
unterminated multi-line comment, modelled explicitly as ``Normal`` or
``InsideComment(terminator)``. ``classify_line`` is the pure per-line step;
``classify`` folds it over a whole file.

Keyword matching is plain substring search. A keyword inside a string
literal still counts: these are approximations, not a parse.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .languages import LanguageRule
from .models import FileMetric

# Complexity bonus per code line while brace depth is positive
NESTING_BONUS = 0.1

# Maintainability index constants
MI_BASE = 171.0
MI_VOLUME_WEIGHT = 5.2
MI_COMPLEXITY_WEIGHT = 0.23
MI_COMMENT_WEIGHT = 16.2
MI_TEST_BONUS = 2.0
MI_DOC_BONUS_CAP = 5.0
MI_DOC_BONUS_SCALE = 10.0


class LineKind(Enum):
    BLANK = "blank"
    CODE = "code"
    COMMENT = "comment"


@dataclass(frozen=True)
class Normal:
    """Not inside a multi-line comment."""


@dataclass(frozen=True)
class InsideComment:
    """Inside a multi-line comment that ends at ``terminator``."""

    terminator: str


LineState = Union[Normal, InsideComment]

NORMAL = Normal()


@dataclass(frozen=True)
class LineResult:
    """Outcome of classifying one line.

    ``code`` holds the text outside comment markers on code lines and is the
    text keyword and brace scanning runs on; it is ``None`` otherwise.
    """

    kind: LineKind
    state: LineState
    code: Optional[str] = None


def classify_line(line: str, state: LineState, rule: LanguageRule) -> LineResult:
    """Classify a single line given the carry state from the previous line."""
    trimmed = line.strip()
    if not trimmed:
        return LineResult(LineKind.BLANK, state)

    if isinstance(state, InsideComment):
        pos = trimmed.find(state.terminator)
        if pos < 0:
            return LineResult(LineKind.COMMENT, state)
        remainder = trimmed[pos + len(state.terminator):].strip()
        if not remainder:
            return LineResult(LineKind.COMMENT, NORMAL)
        return _classify_normal(remainder, rule)

    return _classify_normal(trimmed, rule)


def _classify_normal(text: str, rule: LanguageRule) -> LineResult:
    for start, end in rule.multi_line_comments:
        pos = text.find(start)
        if pos < 0:
            continue

        before = text[:pos].strip()
        tail = text[pos + len(start):]
        end_pos = tail.find(end)

        if end_pos < 0:
            next_state = InsideComment(end)
            if before:
                return LineResult(LineKind.CODE, next_state, before)
            return LineResult(LineKind.COMMENT, next_state)

        after = tail[end_pos + len(end):].strip()
        code = " ".join(part for part in (before, after) if part)
        if code:
            return LineResult(LineKind.CODE, NORMAL, code)
        return LineResult(LineKind.COMMENT, NORMAL)

    for marker in rule.single_line_comments:
        pos = text.find(marker)
        if pos < 0:
            continue
        before = text[:pos].strip()
        if before:
            return LineResult(LineKind.CODE, NORMAL, before)
        return LineResult(LineKind.COMMENT, NORMAL)

    return LineResult(LineKind.CODE, NORMAL, text)


def _first_match(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)


def split_lines(content: str) -> list[str]:
    """Split on ``\\n``; a trailing newline adds no line and ``\\r`` is dropped."""
    if not content:
        return []
    lines = content.split("\n")
    if content.endswith("\n"):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


@dataclass
class _Tally:
    """Running counters for one file scan."""

    code: int = 0
    comment: int = 0
    blank: int = 0
    chars: int = 0
    max_length: int = 0
    functions: int = 0
    classes: int = 0
    imports: int = 0
    todos: int = 0
    fixmes: int = 0
    tests: int = 0
    docs: int = 0
    complexity_hits: int = 0
    nesting_bonus: float = 0.0
    depth: int = 0

    def scan_code(self, code: str, rule: LanguageRule) -> None:
        if _first_match(code, rule.complexity_keywords):
            self.complexity_hits += 1
        if _first_match(code, rule.function_keywords):
            self.functions += 1
        if _first_match(code, rule.class_keywords):
            self.classes += 1
        if _first_match(code, rule.import_keywords):
            self.imports += 1

        self.depth += code.count("{") - code.count("}")
        if self.depth > 0:
            self.nesting_bonus += NESTING_BONUS

    def scan_markers(self, trimmed: str, rule: LanguageRule) -> None:
        upper = trimmed.upper()
        if "TODO" in upper:
            self.todos += 1
        if "FIXME" in upper:
            self.fixmes += 1
        if _first_match(trimmed, rule.test_keywords):
            self.tests += 1
        if _first_match(trimmed, rule.doc_keywords):
            self.docs += 1


def maintainability_index(
    total_lines: int,
    code_lines: int,
    comment_lines: int,
    cyclomatic: float,
    test_indicators: int = 0,
    doc_indicators: int = 0,
) -> float:
    """Heuristic 0-100 maintainability score.

    Combines log size, log approximate cyclomatic complexity and the comment
    ratio, rescales to 0-100, adds small test/doc bonuses and clamps.
    Files without code score 0.
    """
    if code_lines <= 0 or total_lines <= 0:
        return 0.0

    volume = math.log(total_lines) * 2.0
    complexity_factor = math.log(cyclomatic) if cyclomatic > 0 else 0.0
    comment_ratio = comment_lines / total_lines

    raw = (
        MI_BASE
        - MI_VOLUME_WEIGHT * volume
        - MI_COMPLEXITY_WEIGHT * complexity_factor
        - MI_COMMENT_WEIGHT * math.log(1.0 - comment_ratio)
    )
    score = raw * 100.0 / MI_BASE

    if test_indicators > 0:
        score += MI_TEST_BONUS
    score += min(MI_DOC_BONUS_CAP, MI_DOC_BONUS_SCALE * doc_indicators / total_lines)

    return max(0.0, min(100.0, score))


def classify(content: str, rule: LanguageRule, path: str = "", language: str = "") -> FileMetric:
    """Classify every line of ``content`` and build its FileMetric.

    Pure: identical content and rule always produce an equal FileMetric.

    Args:
        content: Decoded file text
        rule: Lexical rule for the file's language
        path: Path recorded on the metric
        language: Language label recorded on the metric (defaults to rule name)

    Returns:
        FileMetric for the file; all-zero for empty content
    """
    language = language or rule.name
    lines = split_lines(content)
    if not lines:
        return FileMetric(path=path, language=language)

    tally = _Tally()
    state: LineState = NORMAL

    for line in lines:
        length = len(line)
        tally.chars += length
        tally.max_length = max(tally.max_length, length)

        result = classify_line(line, state, rule)
        state = result.state

        if result.kind is LineKind.BLANK:
            tally.blank += 1
            continue

        tally.scan_markers(line.strip(), rule)

        if result.kind is LineKind.COMMENT:
            tally.comment += 1
        else:
            tally.code += 1
            tally.scan_code(result.code or "", rule)

    total = len(lines)
    code = tally.code

    complexity_score = (tally.complexity_hits + tally.nesting_bonus) / code if code else 0.0
    if tally.functions > 0:
        cyclomatic = (tally.complexity_hits + tally.functions) / tally.functions
    else:
        cyclomatic = 1.0

    return FileMetric(
        path=path,
        language=language,
        total_lines=total,
        code_lines=code,
        comment_lines=tally.comment,
        blank_lines=tally.blank,
        size_bytes=len(content.encode("utf-8")),
        max_line_length=tally.max_length,
        avg_line_length=tally.chars / total,
        functions=tally.functions,
        classes=tally.classes,
        imports=tally.imports,
        todos=tally.todos,
        fixmes=tally.fixmes,
        test_indicators=tally.tests,
        doc_indicators=tally.docs,
        complexity_score=complexity_score,
        cyclomatic_complexity=cyclomatic,
        maintainability_index=maintainability_index(
            total, code, tally.comment, cyclomatic, tally.tests, tally.docs
        ),
        technical_debt_ratio=(tally.todos + tally.fixmes) / total * 100.0,
    )
