"""Tests for the INI configuration.

IMPORTANT: All tests MUST use tmp_path. Never touch the real config file.
"""

import configparser

import pytest

from backend.config import (
    Config,
    ConfigError,
    default_config_path,
    parse_key,
    parse_shortcuts,
    validate_max_items,
    validate_view,
)


def write_config(path, text: str):
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaults:
    def test_default_values(self):
        config = Config()
        assert config.max_items == 30
        assert config.default_view == "top"
        assert config.scroll_past_list is False
        assert config.wrap_past_end is True
        assert config.compact is False
        assert config.keybindings["down"] == ("j", "down")
        assert config.keybindings["quit"] == ("q", "escape")

    def test_keymap_uses_binding_ids(self):
        keymap = Config().keymap()
        assert keymap["hntui.down"] == "j,down"
        assert keymap["hntui.open_article"] == "enter"
        assert set(keymap) == {
            "hntui.view_comments",
            "hntui.quit",
            "hntui.down",
            "hntui.up",
            "hntui.left",
            "hntui.right",
            "hntui.open_article",
            "hntui.refresh",
        }


class TestLoad:
    def test_missing_file_is_created_with_defaults(self, tmp_path):
        path = tmp_path / "nested" / "config.ini"

        config = Config.load(path)

        assert config.max_items == 30
        assert path.exists()
        parser = configparser.ConfigParser()
        parser.read(path)
        assert parser["general"]["max_items"] == "30"
        assert parser["general"]["default_view"] == "top"
        assert parser["keybindings"]["quit"] == "q, esc"

    def test_written_defaults_load_back(self, tmp_path):
        path = tmp_path / "config.ini"
        Config.load(path)
        assert Config.load(path) == Config(path=path)

    def test_general_section(self, tmp_path):
        path = write_config(
            tmp_path / "config.ini",
            "[general]\nmax_items = 50\ndefault_view = NEW\nscroll_past_list = yes\ncompact = true\n",
        )
        config = Config.load(path)

        assert config.max_items == 50
        assert config.default_view == "new"
        assert config.scroll_past_list is True
        assert config.wrap_past_end is False
        assert config.compact is True

    def test_invalid_default_view_falls_back_to_top(self, tmp_path):
        path = write_config(tmp_path / "config.ini", "[general]\ndefault_view = best\n")
        assert Config.load(path).default_view == "top"

    def test_max_items_over_limit_raises(self, tmp_path):
        path = write_config(tmp_path / "config.ini", "[general]\nmax_items = 501\n")
        with pytest.raises(ConfigError, match="500"):
            Config.load(path)

    def test_max_items_not_a_number_raises(self, tmp_path):
        path = write_config(tmp_path / "config.ini", "[general]\nmax_items = lots\n")
        with pytest.raises(ConfigError):
            Config.load(path)

    def test_invalid_bool_raises(self, tmp_path):
        path = write_config(tmp_path / "config.ini", "[general]\ncompact = maybe\n")
        with pytest.raises(ConfigError):
            Config.load(path)

    def test_keybindings_section(self, tmp_path):
        path = write_config(
            tmp_path / "config.ini",
            "[keybindings]\ndown = n, page_down\nrefresh = f5\nquit = esc\n",
        )
        config = Config.load(path)

        assert config.keybindings["down"] == ("n", "pagedown")
        assert config.keybindings["refresh"] == ("f5",)
        assert config.keybindings["quit"] == ("escape",)
        assert config.keybindings["up"] == ("k", "up")

    def test_unknown_action_ignored(self, tmp_path):
        path = write_config(tmp_path / "config.ini", "[keybindings]\nfly = x\n")
        config = Config.load(path)
        assert "fly" not in config.keybindings

    def test_invalid_key_raises(self, tmp_path):
        path = write_config(tmp_path / "config.ini", "[keybindings]\ndown = spacebar\n")
        with pytest.raises(ConfigError, match="spacebar"):
            Config.load(path)

    def test_unparseable_file_uses_defaults(self, tmp_path):
        path = write_config(tmp_path / "config.ini", "this is not ini\n")
        config = Config.load(path)
        assert config.max_items == 30


class TestParsing:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("arrow_down", "down"),
            ("arrow_left", "left"),
            ("esc", "escape"),
            ("enter", "enter"),
            ("page_up", "pageup"),
            ("back_tab", "shift+tab"),
            ("f12", "f12"),
            ("j", "j"),
            ("J", "J"),
        ],
    )
    def test_parse_key(self, name, expected):
        assert parse_key(name) == expected

    @pytest.mark.parametrize("name", ["f0", "f99", "fx1", "ctrl", ""])
    def test_parse_key_rejects(self, name):
        with pytest.raises(ConfigError):
            parse_key(name)

    def test_parse_shortcuts_tolerates_spacing(self):
        assert parse_shortcuts("q,  esc ,") == ("q", "escape")

    @pytest.mark.parametrize("value", [1, "1", 500, " 42 "])
    def test_validate_max_items_accepts(self, value):
        assert validate_max_items(value) == int(value)

    @pytest.mark.parametrize("value", [0, -3, 501, "ten"])
    def test_validate_max_items_rejects(self, value):
        with pytest.raises(ConfigError):
            validate_max_items(value)

    def test_validate_view(self):
        assert validate_view(" New ") == "new"
        assert validate_view("ask") == "top"


class TestConfigPath:
    def test_explicit_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HNTUI_CONFIG", str(tmp_path / "custom.ini"))
        assert default_config_path() == tmp_path / "custom.ini"

    def test_xdg_config_home(self, monkeypatch, tmp_path):
        monkeypatch.delenv("HNTUI_CONFIG", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert default_config_path() == tmp_path / "hntui" / "config.ini"
