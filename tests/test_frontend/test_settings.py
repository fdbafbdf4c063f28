"""Tests for frontend settings - theme file handling.

IMPORTANT: All tests MUST use tmp_path or mocks. Never touch the real THEME_FILE.
"""

from unittest.mock import patch

from frontend.settings import DEFAULT_THEME
import frontend.settings as settings_module


class TestGetTheme:
    def test_returns_theme_from_file(self, tmp_path):
        theme_file = tmp_path / "theme.txt"
        theme_file.write_text("nord")

        with patch.object(settings_module, "THEME_FILE", theme_file):
            assert settings_module.get_theme() == "nord"

    def test_file_not_found_returns_default(self, tmp_path):
        with patch.object(settings_module, "THEME_FILE", tmp_path / "missing" / "theme.txt"):
            assert settings_module.get_theme() == DEFAULT_THEME

    def test_whitespace_only_returns_default(self, tmp_path):
        theme_file = tmp_path / "theme.txt"
        theme_file.write_text("   \n\t  \n  ")

        with patch.object(settings_module, "THEME_FILE", theme_file):
            assert settings_module.get_theme() == DEFAULT_THEME

    def test_strips_whitespace(self, tmp_path):
        theme_file = tmp_path / "theme.txt"
        theme_file.write_text("  gruvbox  \n")

        with patch.object(settings_module, "THEME_FILE", theme_file):
            assert settings_module.get_theme() == "gruvbox"

    def test_binary_garbage_returns_default(self, tmp_path):
        theme_file = tmp_path / "theme.txt"
        theme_file.write_bytes(b"\x80\x81\x82\xff\xfe")

        with patch.object(settings_module, "THEME_FILE", theme_file):
            assert settings_module.get_theme() == DEFAULT_THEME


class TestSetTheme:
    def test_creates_parent_directory(self, tmp_path):
        theme_file = tmp_path / "nested" / "dir" / "theme.txt"

        with patch.object(settings_module, "THEME_FILE", theme_file):
            settings_module.set_theme("dracula")

        assert theme_file.read_text() == "dracula"

    def test_overwrites_existing_file(self, tmp_path):
        theme_file = tmp_path / "theme.txt"
        theme_file.write_text("old-theme")

        with patch.object(settings_module, "THEME_FILE", theme_file):
            settings_module.set_theme("new-theme")

        assert theme_file.read_text() == "new-theme"

    def test_write_failure_does_not_raise(self, tmp_path):
        theme_file = tmp_path / "theme.txt"
        theme_file.mkdir()

        with patch.object(settings_module, "THEME_FILE", theme_file):
            settings_module.set_theme("whatever")


def test_theme_file_lives_beside_config(test_home):
    assert settings_module.THEME_FILE == test_home / "theme.txt"
