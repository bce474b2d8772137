"""Tests for the per-line step function and the whole-file classifier."""

import pytest

from loco.scanning.classifier import (
    NORMAL,
    InsideComment,
    LineKind,
    classify,
    classify_line,
    maintainability_index,
    split_lines,
)


def _invariant(metric):
    return metric.code_lines + metric.comment_lines + metric.blank_lines == metric.total_lines


class TestClassifyLine:
    """Test the pure per-line transition."""

    def test_blank_keeps_state(self, c_rule):
        inside = InsideComment("*/")
        assert classify_line("   \t", NORMAL, c_rule).state == NORMAL
        result = classify_line("", inside, c_rule)
        assert result.kind is LineKind.BLANK
        assert result.state == inside

    def test_plain_code(self, c_rule):
        result = classify_line("  x = 1;  ", NORMAL, c_rule)
        assert result.kind is LineKind.CODE
        assert result.state == NORMAL
        assert result.code == "x = 1;"

    def test_single_line_comment(self, c_rule):
        result = classify_line("// note", NORMAL, c_rule)
        assert result.kind is LineKind.COMMENT
        assert result.code is None

    def test_trailing_comment_is_code(self, c_rule):
        result = classify_line("x = 1; // note", NORMAL, c_rule)
        assert result.kind is LineKind.CODE
        assert result.code == "x = 1;"

    def test_block_opens(self, c_rule):
        result = classify_line("/* start", NORMAL, c_rule)
        assert result.kind is LineKind.COMMENT
        assert result.state == InsideComment("*/")

    def test_code_before_unterminated_block(self, c_rule):
        result = classify_line("x = 1; /* start", NORMAL, c_rule)
        assert result.kind is LineKind.CODE
        assert result.state == InsideComment("*/")
        assert result.code == "x = 1;"

    def test_self_contained_block(self, c_rule):
        result = classify_line("/* all here */", NORMAL, c_rule)
        assert result.kind is LineKind.COMMENT
        assert result.state == NORMAL

    def test_code_after_self_contained_block(self, c_rule):
        result = classify_line("/* a */ y = 2;", NORMAL, c_rule)
        assert result.kind is LineKind.CODE
        assert result.state == NORMAL
        assert result.code == "y = 2;"

    def test_inside_without_terminator(self, c_rule):
        state = InsideComment("*/")
        result = classify_line("still // inside", state, c_rule)
        assert result.kind is LineKind.COMMENT
        assert result.state == state

    def test_terminator_closes(self, c_rule):
        result = classify_line("end */", InsideComment("*/"), c_rule)
        assert result.kind is LineKind.COMMENT
        assert result.state == NORMAL

    def test_remainder_after_terminator_is_code(self, c_rule):
        result = classify_line("end */ z = 3;", InsideComment("*/"), c_rule)
        assert result.kind is LineKind.CODE
        assert result.state == NORMAL
        assert result.code == "z = 3;"

    def test_remainder_after_terminator_can_be_comment(self, c_rule):
        result = classify_line("end */ // more", InsideComment("*/"), c_rule)
        assert result.kind is LineKind.COMMENT
        assert result.state == NORMAL

    def test_configured_order_beats_position(self, python_rule):
        """Multi-line markers are tried before single-line ones."""
        result = classify_line('# x """', NORMAL, python_rule)
        assert result.kind is LineKind.CODE
        assert result.state == InsideComment('"""')
        assert result.code == "# x"

    def test_block_opener_inside_line_comment(self, rust_rule):
        """A "/*" after "//" still opens a block that swallows later lines."""
        metric = classify("// files under src/*\nfn main() {\n    run();\n}\n", rust_rule)
        assert metric.code_lines == 1
        assert metric.comment_lines == 3

    def test_python_docstring_one_line(self, python_rule):
        result = classify_line('"""Docstring."""', NORMAL, python_rule)
        assert result.kind is LineKind.COMMENT
        assert result.state == NORMAL


class TestClassify:
    """Test whole-file classification."""

    def test_hash_example(self, hash_rule):
        metric = classify("# comment\n\nx = 1  # trailing\n", hash_rule)
        assert metric.total_lines == 3
        assert metric.blank_lines == 1
        assert metric.comment_lines == 1
        assert metric.code_lines == 1

    def test_all_blank(self, hash_rule):
        metric = classify("\n   \n\t\n\n", hash_rule)
        assert metric.total_lines == 4
        assert metric.blank_lines == 4
        assert metric.code_lines == 0
        assert metric.comment_lines == 0

    def test_fully_enclosed_block(self, c_rule):
        content = "/* first\n * second\n * third\nlast */\n"
        metric = classify(content, c_rule)
        assert metric.total_lines == 4
        assert metric.comment_lines == 4
        assert metric.code_lines == 0

    def test_unterminated_block_runs_to_eof(self, c_rule):
        metric = classify("x = 1;\n/* open\nmore\n", c_rule)
        assert metric.code_lines == 1
        assert metric.comment_lines == 2

    def test_empty_content(self, c_rule):
        metric = classify("", c_rule, path="empty.c")
        assert metric.path == "empty.c"
        assert metric.total_lines == 0
        assert metric.cyclomatic_complexity == 0.0
        assert metric.maintainability_index == 0.0
        assert metric.avg_line_length == 0.0

    def test_idempotent(self, rust_rule):
        content = (
            "//! crate docs\n"
            "use std::io;\n"
            "\n"
            "/// Adds.\n"
            "fn add(a: i32, b: i32) -> i32 {\n"
            "    if a > b { a } else { b } // TODO tidy\n"
            "}\n"
            "/* block\n"
            "   FIXME */\n"
        )
        first = classify(content, rust_rule, path="lib.rs", language="Rust")
        second = classify(content, rust_rule, path="lib.rs", language="Rust")
        assert first == second
        assert _invariant(first)

    def test_mixed_counts(self, rust_rule):
        content = (
            "use std::io;\n"
            "// helper\n"
            "fn helper() {\n"
            "    if true { loop {} }\n"
            "}\n"
            "\n"
            "struct Point;\n"
        )
        metric = classify(content, rust_rule)
        assert metric.total_lines == 7
        assert metric.code_lines == 5
        assert metric.comment_lines == 1
        assert metric.blank_lines == 1
        assert metric.imports == 1
        assert metric.functions == 1
        assert metric.classes == 1
        assert _invariant(metric)

    def test_keyword_counted_once_per_line(self, c_rule):
        metric = classify("if a if b while c\n", c_rule)
        assert metric.code_lines == 1
        # One complexity hit per line, regardless of how many keywords occur
        assert metric.complexity_score == pytest.approx(1.0)

    def test_keywords_ignore_comment_text(self, c_rule):
        metric = classify("// if while fn\nx = 1;\n", c_rule)
        assert metric.functions == 0
        assert metric.complexity_score == 0.0

    def test_todo_counted_in_comments(self, hash_rule):
        metric = classify("# todo: later\n# FixMe now\nx = 1\n", hash_rule)
        assert metric.todos == 1
        assert metric.fixmes == 1
        assert metric.technical_debt_ratio == pytest.approx(2 / 3 * 100)

    def test_nesting_bonus(self, c_rule):
        metric = classify("fn a() {\n    x;\n}\n", c_rule)
        # Depth is positive after lines 1 and 2
        assert metric.complexity_score == pytest.approx(0.2 / 3)

    def test_crlf_and_no_trailing_newline(self, hash_rule):
        metric = classify("a = 1\r\n# c\r\nb = 2", hash_rule)
        assert metric.total_lines == 3
        assert metric.code_lines == 2
        assert metric.max_line_length == 5

    def test_language_defaults_to_rule_name(self, hash_rule):
        assert classify("x\n", hash_rule).language == "hash"
        assert classify("x\n", hash_rule, language="Hash").language == "Hash"

    def test_size_and_line_lengths(self, hash_rule):
        metric = classify("ab\nabcd\n", hash_rule)
        assert metric.size_bytes == 8
        assert metric.max_line_length == 4
        assert metric.avg_line_length == pytest.approx(3.0)


class TestSplitLines:
    def test_trailing_newline_adds_no_line(self):
        assert split_lines("a\nb\n") == ["a", "b"]

    def test_empty(self):
        assert split_lines("") == []

    def test_lone_newline(self):
        assert split_lines("\n") == [""]


class TestMaintainabilityIndex:
    def test_no_code_is_zero(self):
        assert maintainability_index(10, 0, 10, 1.0) == 0.0

    def test_bounded(self):
        for total in (1, 10, 1000, 100000):
            score = maintainability_index(total, total, 0, 50.0, 3, total)
            assert 0.0 <= score <= 100.0

    def test_bigger_is_worse(self):
        small = maintainability_index(10, 10, 0, 1.0)
        large = maintainability_index(10000, 10000, 0, 1.0)
        assert small > large

    def test_test_bonus(self):
        base = maintainability_index(100, 80, 10, 2.0)
        assert maintainability_index(100, 80, 10, 2.0, test_indicators=1) == pytest.approx(base + 2.0)
