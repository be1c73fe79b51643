"""Tests for settings."""

from feedcanon.config import Settings
from feedcanon.core.defaults import DEFAULT_STRIPPED_PARAMS


def test_default_settings():
    """Test defaults without environment overrides."""
    settings = Settings()

    assert settings.fetch_timeout == 15.0
    assert settings.default_scheme == "https"
    assert settings.user_agent.startswith("feedcanon/")
    assert settings.stripped_params == list(DEFAULT_STRIPPED_PARAMS)


def test_extra_stripped_params(monkeypatch):
    """Test extra tracking parameters come from the environment."""
    monkeypatch.setenv("FEEDCANON_STRIPPED_PARAMS", "ref, Source,utm_source")
    settings = Settings()

    assert settings.extra_stripped_params_list == ["ref", "Source", "utm_source"]
    assert settings.stripped_params[-2:] == ["ref", "source"]
    assert settings.stripped_params.count("utm_source") == 1
