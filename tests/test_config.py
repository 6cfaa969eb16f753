"""Tests for environment-driven settings."""

import pytest

from cachebench.config import DEFAULT_ORIGIN_URL, Settings


class TestSettingsDefaults:
    """Test defaults with a clean environment."""

    def test_defaults(self, monkeypatch):
        """Unset variables fall back to local-dev defaults."""
        for name in (
            "CACHEBENCH_ORIGIN_URL",
            "CACHEBENCH_TIMEOUT_S",
            "CACHEBENCH_SOURCE",
            "CACHEBENCH_RECENT_LIMIT",
            "CACHEBENCH_HIT_THRESHOLD_MS",
            "CACHEBENCH_LOG_LEVEL",
            "CACHEBENCH_CORS_ORIGINS",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env()

        assert settings.origin_url == DEFAULT_ORIGIN_URL
        assert settings.timeout_s == 10.0
        assert settings.source == "http"
        assert settings.recent_limit == 10
        assert settings.hit_threshold_ms == 100.0
        assert settings.log_level == "INFO"
        assert settings.cors_origins == ["http://localhost:3000", "http://127.0.0.1:3000"]


class TestSettingsFromEnv:
    """Test parsing of environment overrides."""

    def test_overrides(self, monkeypatch):
        """Environment values override defaults."""
        monkeypatch.setenv("CACHEBENCH_ORIGIN_URL", "http://origin:9090")
        monkeypatch.setenv("CACHEBENCH_TIMEOUT_S", "2.5")
        monkeypatch.setenv("CACHEBENCH_SOURCE", "MOCK")
        monkeypatch.setenv("CACHEBENCH_RECENT_LIMIT", "25")
        monkeypatch.setenv("CACHEBENCH_HIT_THRESHOLD_MS", "40")
        monkeypatch.setenv("CACHEBENCH_LOG_LEVEL", "debug")
        monkeypatch.setenv("CACHEBENCH_CORS_ORIGINS", "http://a.test, http://b.test,")

        settings = Settings.from_env()

        assert settings.origin_url == "http://origin:9090"
        assert settings.timeout_s == 2.5
        assert settings.source == "mock"
        assert settings.recent_limit == 25
        assert settings.hit_threshold_ms == 40.0
        assert settings.log_level == "DEBUG"
        assert settings.cors_origins == ["http://a.test", "http://b.test"]

    def test_bad_number_names_variable(self, monkeypatch):
        """Malformed numbers raise ValueError naming the variable."""
        monkeypatch.setenv("CACHEBENCH_TIMEOUT_S", "fast")

        with pytest.raises(ValueError, match="CACHEBENCH_TIMEOUT_S"):
            Settings.from_env()

    def test_bad_integer_names_variable(self, monkeypatch):
        """Malformed integers raise ValueError naming the variable."""
        monkeypatch.setenv("CACHEBENCH_RECENT_LIMIT", "1.5")

        with pytest.raises(ValueError, match="CACHEBENCH_RECENT_LIMIT"):
            Settings.from_env()

    def test_bad_source(self, monkeypatch):
        """Only http and mock sources exist."""
        monkeypatch.setenv("CACHEBENCH_SOURCE", "redis")

        with pytest.raises(ValueError, match="CACHEBENCH_SOURCE"):
            Settings.from_env()

    def test_empty_number_uses_default(self, monkeypatch):
        """An empty value counts as unset."""
        monkeypatch.setenv("CACHEBENCH_TIMEOUT_S", "")
        monkeypatch.delenv("CACHEBENCH_SOURCE", raising=False)

        assert Settings.from_env().timeout_s == 10.0
