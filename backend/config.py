"""User configuration read from an INI file.

The file is created with defaults on first run. Keybindings are stored with the
key names users write (``arrow_down``, ``esc``, ``f5``) and translated here to
the names Textual's keymap understands.
"""

from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from backend.settings import (
    DEFAULT_MAX_ITEMS,
    DEFAULT_VIEW,
    MAX_ITEMS_LIMIT,
    VIEWS,
)

logger = logging.getLogger(__name__)

ACTIONS = (
    "view_comments",
    "quit",
    "down",
    "up",
    "left",
    "right",
    "open_article",
    "refresh",
)

DEFAULT_KEYBINDINGS: dict[str, tuple[str, ...]] = {
    "view_comments": ("c",),
    "quit": ("q", "esc"),
    "down": ("j", "arrow_down"),
    "up": ("k", "arrow_up"),
    "left": ("h", "arrow_left"),
    "right": ("l", "arrow_right"),
    "open_article": ("enter",),
    "refresh": ("r",),
}

_NAMED_KEYS = {
    "backspace": "backspace",
    "enter": "enter",
    "arrow_left": "left",
    "arrow_right": "right",
    "arrow_up": "up",
    "arrow_down": "down",
    "home": "home",
    "end": "end",
    "page_up": "pageup",
    "page_down": "pagedown",
    "tab": "tab",
    "back_tab": "shift+tab",
    "delete": "delete",
    "insert": "insert",
    "esc": "escape",
}


class ConfigError(ValueError):
    """A configuration value cannot be used."""


def default_config_path() -> Path:
    """Return the config file location, honouring HNTUI_CONFIG and XDG_CONFIG_HOME."""
    explicit = os.getenv("HNTUI_CONFIG")
    if explicit:
        return Path(explicit)
    base = os.getenv("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / "hntui" / "config.ini"


def parse_key(name: str) -> str:
    """Translate one configured key name to a Textual key name."""
    key = name.strip()
    if not key:
        raise ConfigError("empty key name")
    lowered = key.lower()
    if lowered in _NAMED_KEYS:
        return _NAMED_KEYS[lowered]
    if len(key) == 1:
        return key
    if lowered.startswith("f") and lowered[1:].isdigit():
        number = int(lowered[1:])
        if 1 <= number <= 24:
            return f"f{number}"
        raise ConfigError(f"{key} is not a valid F key")
    raise ConfigError(f"{key} is not a valid shortcut")


def parse_shortcuts(value: str) -> tuple[str, ...]:
    """Parse a comma separated list of key names."""
    return tuple(parse_key(part) for part in value.split(",") if part.strip())


def _parse_bool(value: str, option: str) -> bool:
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    raise ConfigError(f"{value} is not a valid {option} value")


@dataclass
class Config:
    """Settings that shape the views, the cursor and the key bindings."""

    max_items: int = DEFAULT_MAX_ITEMS
    default_view: str = DEFAULT_VIEW
    scroll_past_list: bool = False
    compact: bool = False
    keybindings: dict[str, tuple[str, ...]] = field(
        default_factory=lambda: {
            action: tuple(parse_key(k) for k in keys)
            for action, keys in DEFAULT_KEYBINDINGS.items()
        }
    )
    path: Path | None = None

    @property
    def wrap_past_end(self) -> bool:
        return not self.scroll_past_list

    def keymap(self) -> dict[str, str]:
        """Binding id -> comma separated keys, for ``App.set_keymap``."""
        return {f"hntui.{action}": ",".join(keys) for action, keys in self.keybindings.items()}

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Load the config file, writing a default one if it does not exist.

        Raises:
            ConfigError: a value is present but invalid (max_items, booleans,
                key names).
        """
        path = path or default_config_path()
        config = cls(path=path)

        if not path.exists():
            try:
                config.write(path)
            except OSError as e:
                logger.warning("Could not write default config to %s: %s", path, e)
            return config

        parser = configparser.ConfigParser()
        try:
            with path.open("r", encoding="utf-8") as f:
                parser.read_file(f)
        except (OSError, configparser.Error, UnicodeDecodeError) as e:
            logger.error("Failed to read config %s: %s", path, e)
            return config

        config._apply(parser)
        return config

    def _apply(self, parser: configparser.ConfigParser) -> None:
        if parser.has_section("general"):
            general = parser["general"]
            if "max_items" in general:
                self.max_items = validate_max_items(general["max_items"])
            if "default_view" in general:
                self.default_view = validate_view(general["default_view"])
            if "scroll_past_list" in general:
                self.scroll_past_list = _parse_bool(
                    general["scroll_past_list"], "scroll_past_list"
                )
            if "compact" in general:
                self.compact = _parse_bool(general["compact"], "compact")

        if parser.has_section("keybindings"):
            for action, value in parser["keybindings"].items():
                if action not in ACTIONS:
                    logger.warning("Ignoring unknown keybinding action %s", action)
                    continue
                keys = parse_shortcuts(value)
                if keys:
                    self.keybindings[action] = keys

    def write(self, path: Path | None = None) -> None:
        path = path or self.path or default_config_path()
        parser = configparser.ConfigParser()
        parser["keybindings"] = {
            action: ", ".join(keys) for action, keys in DEFAULT_KEYBINDINGS.items()
        }
        parser["general"] = {
            "max_items": str(self.max_items),
            "default_view": self.default_view,
            "scroll_past_list": str(self.scroll_past_list).lower(),
            "compact": str(self.compact).lower(),
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            parser.write(f)


def validate_max_items(value: str | int) -> int:
    try:
        max_items = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{value} is not a valid max_items value") from None
    if max_items < 1:
        raise ConfigError(f"{value} is not a valid max_items value")
    if max_items > MAX_ITEMS_LIMIT:
        raise ConfigError(
            f"A max_items value greater than {MAX_ITEMS_LIMIT} is useless "
            f"as the API returns a max of {MAX_ITEMS_LIMIT} posts"
        )
    return max_items


def validate_view(value: str) -> str:
    """Normalise a view name, falling back to the default for unknown names."""
    view = value.strip().lower()
    if view not in VIEWS:
        logger.warning("%s is not a valid default_view value", view)
        return DEFAULT_VIEW
    return view
