"""Tests for environment overrides in backend settings."""

import importlib

import pytest

import backend.settings as settings_module


@pytest.fixture
def reload_settings(monkeypatch):
    """Reload backend.settings under a patched environment, restoring it afterwards."""

    def _reload(**env):
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        return importlib.reload(settings_module)

    yield _reload
    monkeypatch.undo()
    importlib.reload(settings_module)


def test_negative_max_concurrent_fetches_means_unbounded(reload_settings):
    settings = reload_settings(HNTUI_MAX_CONCURRENT_FETCHES="-4")
    assert settings.MAX_CONCURRENT_FETCHES == 0


def test_max_concurrent_fetches_from_env(reload_settings):
    settings = reload_settings(HNTUI_MAX_CONCURRENT_FETCHES="8")
    assert settings.MAX_CONCURRENT_FETCHES == 8


def test_request_timeout_from_env(reload_settings):
    settings = reload_settings(HNTUI_REQUEST_TIMEOUT="2.5")
    assert settings.REQUEST_TIMEOUT == 2.5
