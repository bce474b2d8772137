"""Tests for the formatters package."""

import csv
import io
import json

import pytest

from loco.analysis.engine import AnalysisEngine
from loco.config import AnalysisConfig
from loco.formatters import (
    CsvFormatter,
    JsonFormatter,
    ReportOptions,
    RichFormatter,
    get_formatter,
    order_languages,
)
from loco.scanning.languages import RULES


@pytest.fixture
def result():
    big = "fn main() {\n" + "    if x { y(); } // TODO\n" * 200 + "}\n"
    sources = [
        ("src/app.py", "import os\n# note\n\ndef main():\n    return 1\n", RULES["python"]),
        ("src/util.py", "x = 1\n", RULES["python"]),
        ("src/main.rs", big, RULES["rust"]),
        ("web/index.js", "// c\nconst a = 1;\n", RULES["javascript"]),
    ]
    sources += [(f"src/m{i}.rs", "fn f() {}\n", RULES["rust"]) for i in range(9)]
    return AnalysisEngine(AnalysisConfig(group_by_dir=True)).analyze_sources(sources)


class TestGetFormatter:
    def test_known_formatters(self):
        assert isinstance(get_formatter("rich"), RichFormatter)
        assert isinstance(get_formatter("json"), JsonFormatter)
        assert isinstance(get_formatter("csv"), CsvFormatter)

    def test_unknown_formatter(self):
        with pytest.raises(ValueError, match="Unknown formatter"):
            get_formatter("xml")


class TestReportOptions:
    def test_invalid_sort(self):
        with pytest.raises(ValueError):
            ReportOptions(sort_by="colour")

    def test_invalid_top(self):
        with pytest.raises(ValueError):
            ReportOptions(top=0)


class TestOrderLanguages:
    def test_by_lines(self, result):
        names = [name for name, _ in order_languages(result, ReportOptions())]
        assert names == ["Rust", "Python", "JavaScript"]

    def test_by_files(self, result):
        names = [name for name, _ in order_languages(result, ReportOptions(sort_by="files"))]
        assert names[0] == "Rust"

    def test_by_name(self, result):
        names = [name for name, _ in order_languages(result, ReportOptions(sort_by="name"))]
        assert names == ["JavaScript", "Python", "Rust"]

    def test_top_then_min_lines(self, result):
        assert len(order_languages(result, ReportOptions(top=2))) == 2
        names = [name for name, _ in order_languages(result, ReportOptions(min_lines=5))]
        assert "JavaScript" not in names


class TestJsonFormatter:
    def test_structure(self, result):
        data = json.loads(JsonFormatter().format(result, ReportOptions()))
        assert data["summary"]["total_files"] == result.total_files
        assert data["summary"]["total_lines"] == result.total_lines
        assert set(data["languages"]) == {"Python", "Rust", "JavaScript"}
        assert "overall_maintainability" in data["quality"]
        assert "hotspots" not in data

    def test_optional_sections(self, result):
        options = ReportOptions(show_hotspots=True, top_files="lines", group_by_dir=True)
        data = json.loads(JsonFormatter().format(result, options))
        assert data["hotspots"][0]["path"] == "src/main.rs"
        assert data["top_files"]["files"][0]["path"] == "src/main.rs"
        assert set(data["directories"]) == {"src", "web"}


class TestCsvFormatter:
    def test_rows(self, result):
        rows = list(csv.reader(io.StringIO(CsvFormatter().format(result, ReportOptions()))))
        assert rows[0][0] == "language"
        assert [row[0] for row in rows[1:]] == ["Rust", "Python", "JavaScript"]
        python = dict(zip(rows[0], rows[2]))
        assert python["files"] == "2"
        assert python["comment_lines"] == "1"


class TestRichFormatter:
    def test_format_contains_sections(self, result):
        options = ReportOptions(show_hotspots=True, top_files="complexity", group_by_dir=True, verbose=True)
        text = RichFormatter().format(result, options)
        assert "Project Overview" in text
        assert "Quality Assessment" in text
        assert "Python" in text
        assert "Code Hotspots" in text
        assert "src/main.rs" in text
        assert "Directories" in text

    def test_render_to_console(self, result):
        from rich.console import Console

        console = Console(file=io.StringIO(), width=120)
        RichFormatter(console=console).render(result, ReportOptions())
        assert "Languages" in console.file.getvalue()

    def test_bracketed_paths_survive(self):
        big = "fn main() {\n" + "    if x { y(); } // TODO\n" * 200 + "}\n"
        sources = [("pages/[slug]/[id].rs", big, RULES["rust"])]
        sources += [(f"pages/[slug]/p{i}.rs", "fn f() {}\n", RULES["rust"]) for i in range(9)]
        bracketed = AnalysisEngine(AnalysisConfig(group_by_dir=True)).analyze_sources(sources)
        assert bracketed.hotspots[0].path == "pages/[slug]/[id].rs"

        for options in (
            ReportOptions(top_files="lines"),
            ReportOptions(show_hotspots=True),
            ReportOptions(group_by_dir=True),
        ):
            text = RichFormatter().format(bracketed, options)
            assert "pages/[slug]" in text

        text = RichFormatter().format(bracketed, ReportOptions(top_files="lines", show_hotspots=True))
        assert text.count("pages/[slug]/[id].rs") == 2
