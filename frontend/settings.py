"""Frontend configuration for hntui."""

from __future__ import annotations

import logging

from backend.config import default_config_path

DEFAULT_THEME = "textual-dark"

# Stored beside config.ini, never inside it.
THEME_FILE = default_config_path().parent / "theme.txt"

logger = logging.getLogger("hntui")


def get_theme() -> str:
    """Load theme from file, or return default if anything goes wrong."""
    try:
        theme = THEME_FILE.read_text().strip()
        return theme if theme else DEFAULT_THEME
    except Exception:
        return DEFAULT_THEME


def set_theme(theme: str) -> None:
    """Save theme to file. Never raises."""
    try:
        THEME_FILE.parent.mkdir(parents=True, exist_ok=True)
        THEME_FILE.write_text(theme)
    except Exception as exc:
        logger.debug("Could not persist theme %s: %s", theme, exc)
