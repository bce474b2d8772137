"""Tests for progress reporting and logger naming."""

import io
import logging

import pytest
from rich.console import Console

from loco.core.progress import ProgressReporter, SilentReporter
from loco.logging_config import get_logger, setup_logging


class TestReporters:
    def test_silent_passes_no_callback(self):
        assert SilentReporter().run(lambda on_progress: on_progress) is None

    def test_rich_reporter_forwards_updates(self):
        console = Console(file=io.StringIO(), width=100)
        calls = []

        def work(on_progress):
            for done in range(1, 4):
                on_progress(done, 3)
                calls.append(done)
            return "ok"

        assert ProgressReporter(console).run(work) == "ok"
        assert calls == [1, 2, 3]


class TestLogging:
    def test_logger_namespace(self):
        assert get_logger().name == "loco"
        assert get_logger("loco.analysis").name == "loco.analysis"
        assert get_logger("helpers").name == "loco.helpers"

    @pytest.mark.parametrize(
        "verbosity, level",
        [("quiet", logging.ERROR), ("normal", logging.WARNING), ("verbose", logging.DEBUG)],
    )
    def test_levels(self, verbosity, level):
        logger = setup_logging(verbosity)
        assert logger.level == level
        assert [h.level for h in logger.handlers] == [level]

    def test_unknown_verbosity(self):
        with pytest.raises(ValueError):
            setup_logging("loud")

    def test_log_file_gets_debug_records(self, tmp_path):
        log = tmp_path / "run.log"
        logger = setup_logging("quiet", log_file=str(log))
        assert logger.level == logging.DEBUG
        get_logger("analysis.engine").debug("scanned src/[slug].py")
        for handler in logger.handlers:
            handler.flush()
        assert "scanned src/[slug].py" in log.read_text()

    def test_repeated_setup_replaces_handlers(self, tmp_path):
        setup_logging("normal", log_file=str(tmp_path / "a.log"))
        logger = setup_logging("normal")
        assert len(logger.handlers) == 1
        assert not logger.propagate
