"""Tests for corpus-wide quality estimates."""

import pytest

from loco.analysis.aggregator import MetricsAggregator
from loco.analysis.quality import QualityComputer, QualityMetrics, is_doc_path, is_test_path


def _compute(files):
    aggregator = MetricsAggregator()
    aggregator.merge_all(files)
    return QualityComputer().compute(aggregator.results(), files)


class TestPathHeuristics:
    @pytest.mark.parametrize(
        "path",
        ["tests/helpers.py", "src/test_api.py", "pkg/api_test.go", "web/app.spec.ts", "src/FooTest.java"],
    )
    def test_test_paths(self, path):
        assert is_test_path(path)

    @pytest.mark.parametrize("path", ["src/main.py", "src/contest.py", "lib/utils.rs"])
    def test_non_test_paths(self, path):
        assert not is_test_path(path)

    def test_doc_paths(self):
        assert is_doc_path("docs/build.py")
        assert is_doc_path("README.md")
        assert not is_doc_path("src/main.py")


class TestQualityComputer:
    """Test the individual estimates and the empty-input guard."""

    def test_empty_input(self):
        assert QualityComputer().compute({}, []) == QualityMetrics()

    def test_only_empty_files(self, metric_factory):
        empty = metric_factory(total_lines=0, code_lines=0, comment_lines=0, blank_lines=0)
        assert _compute([empty, empty]) == QualityMetrics()

    def test_debt_ratio_per_code_line(self, metric_factory):
        files = [
            metric_factory(path="src/a.py", todos=3, fixmes=1),
            metric_factory(path="src/b.py"),
        ]
        assert _compute(files).technical_debt_ratio == pytest.approx(4 / 140 * 100)

    def test_test_coverage_estimate(self, metric_factory):
        files = [metric_factory(path=f"src/m{i}.py") for i in range(8)]
        files += [metric_factory(path="tests/test_a.py"), metric_factory(path="src/b_test.go")]
        assert _compute(files).test_coverage_estimate == pytest.approx(40.0)

    def test_test_coverage_capped(self, metric_factory):
        files = [metric_factory(path=f"tests/test_{i}.py") for i in range(3)]
        assert _compute(files).test_coverage_estimate == 100.0

    def test_documentation_ratio(self, metric_factory):
        assert _compute([metric_factory(path="src/a.py")]).documentation_ratio == pytest.approx(20.0)
        with_doc_file = [metric_factory(path="src/a.py"), metric_factory(path="docs/conf.py")]
        assert _compute(with_doc_file).documentation_ratio == pytest.approx(22.0)

    def test_maintainability_is_lines_weighted(self, metric_factory):
        files = [
            metric_factory(path="a.py", language="Python", maintainability_index=60.0),
            metric_factory(
                path="b.rs",
                language="Rust",
                total_lines=300,
                code_lines=210,
                comment_lines=60,
                blank_lines=30,
                maintainability_index=30.0,
            ),
        ]
        assert _compute(files).overall_maintainability == pytest.approx(37.5)

    def test_duplication_capped(self, metric_factory):
        files = [metric_factory(path=f"src/copy{i}.py") for i in range(4)]
        assert _compute(files).code_duplication_ratio == pytest.approx(30.0)

    def test_no_duplication_for_distinct_files(self, metric_factory):
        files = [
            metric_factory(path=f"src/f{n}.py", total_lines=n, code_lines=n, comment_lines=0, blank_lines=0)
            for n in (3, 40, 500, 6000)
        ]
        assert _compute(files).code_duplication_ratio == 0.0
