"""Shared test fixtures for loco tests."""

import pytest

from loco.scanning.languages import RULES, LanguageRule
from loco.scanning.models import FileMetric


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def hash_rule():
    """Single-line ``#`` comments, no block comments, no keywords."""
    return LanguageRule(name="hash", extensions=("hash",), single_line_comments=("#",))


@pytest.fixture
def c_rule():
    """C-style ``//`` and ``/* */`` comments."""
    return LanguageRule(
        name="clike",
        extensions=("clike",),
        single_line_comments=("//",),
        multi_line_comments=(("/*", "*/"),),
        function_keywords=("fn ",),
        complexity_keywords=("if ", "while "),
    )


@pytest.fixture
def python_rule():
    return RULES["python"]


@pytest.fixture
def rust_rule():
    return RULES["rust"]


def make_metric(path="src/a.py", language="Python", **overrides) -> FileMetric:
    """FileMetric with consistent line counts; override any field."""
    fields = dict(
        total_lines=100,
        code_lines=70,
        comment_lines=20,
        blank_lines=10,
        size_bytes=3000,
        max_line_length=80,
        avg_line_length=30.0,
        functions=5,
        classes=1,
        imports=3,
        complexity_score=0.2,
        cyclomatic_complexity=2.0,
        maintainability_index=60.0,
    )
    fields.update(overrides)
    return FileMetric(path=path, language=language, **fields)


@pytest.fixture
def metric_factory():
    return make_metric
