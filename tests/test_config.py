"""Tests for configuration loading and validation."""

import os

import pytest

from loco.config import AnalysisConfig, ThresholdConfig, load_config
from loco.exceptions import LocoError


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """No global or project config and no LOCO_* variables."""
    home = tmp_path / "home"
    home.mkdir()
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    for key in list(os.environ):
        if key.startswith("LOCO_"):
            monkeypatch.delenv(key)
    return work


class TestAnalysisConfig:
    def test_defaults(self):
        config = AnalysisConfig()
        assert config.workers is None
        assert config.worker_count >= 1
        assert config.max_file_size_bytes == 100 * 1024 * 1024
        assert "node_modules" in config.default_excludes
        assert config.thresholds.hotspot_top_n == 15

    @pytest.mark.parametrize(
        "kwargs",
        [{"workers": 0}, {"max_file_size_mb": 0}, {"cache_ttl_hours": -1}, {"verbosity": "loud"}],
    )
    def test_validation(self, kwargs):
        with pytest.raises(ValueError):
            AnalysisConfig(**kwargs)

    def test_threshold_validation(self):
        with pytest.raises(ValueError):
            ThresholdConfig(hotspot_percentile=120)
        with pytest.raises(ValueError):
            ThresholdConfig(hotspot_top_n=0)


class TestLoadConfig:
    def test_defaults(self, isolated):
        assert load_config() == AnalysisConfig()

    def test_overrides_ignore_none(self, isolated):
        config = load_config(workers=3, exclude_pattern=None)
        assert config.workers == 3
        assert config.exclude_pattern is None

    def test_verbose_and_quiet(self, isolated):
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=True).verbosity == "quiet"
        assert load_config(verbose=False, quiet=False).verbosity == "normal"

    def test_project_file(self, isolated):
        (isolated / "loco.toml").write_text(
            'workers = 2\ndefault_excludes = ["build"]\n\n[thresholds]\nhotspot_top_n = 5\n'
        )
        config = load_config()
        assert config.workers == 2
        assert config.default_excludes == ("build",)
        assert config.thresholds.hotspot_top_n == 5

    def test_priority(self, isolated, monkeypatch, tmp_path):
        (isolated / "loco.toml").write_text("workers = 2\ncache_ttl_hours = 5\n")
        explicit = tmp_path / "explicit.toml"
        explicit.write_text("workers = 4\n")
        monkeypatch.setenv("LOCO_CACHE_TTL_HOURS", "9")

        config = load_config(config_file=explicit)
        assert config.workers == 4
        assert config.cache_ttl_hours == 9
        assert load_config(config_file=explicit, workers=6).workers == 6

    def test_env_bool(self, isolated, monkeypatch):
        monkeypatch.setenv("LOCO_CACHE_ENABLED", "yes")
        assert load_config().cache_enabled is True
        monkeypatch.setenv("LOCO_CACHE_ENABLED", "maybe")
        with pytest.raises(LocoError):
            load_config()

    def test_env_logging(self, isolated, monkeypatch, tmp_path):
        monkeypatch.setenv("LOCO_VERBOSITY", "verbose")
        monkeypatch.setenv("LOCO_LOG_FILE", str(tmp_path / "loco.log"))
        config = load_config()
        assert config.verbosity == "verbose"
        assert config.log_file == str(tmp_path / "loco.log")
        assert load_config(quiet=True).verbosity == "quiet"

    def test_missing_explicit_file(self, isolated, tmp_path):
        with pytest.raises(LocoError, match="not found"):
            load_config(config_file=tmp_path / "nope.toml")

    def test_invalid_toml(self, isolated):
        (isolated / "loco.toml").write_text("workers = [\n")
        with pytest.raises(LocoError):
            load_config()

    def test_invalid_value(self, isolated):
        with pytest.raises(LocoError):
            load_config(workers=0)

    def test_unknown_threshold(self, isolated):
        (isolated / "loco.toml").write_text("[thresholds]\nmystery = 1\n")
        with pytest.raises(LocoError):
            load_config()
