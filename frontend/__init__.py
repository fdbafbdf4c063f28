"""Frontend package for the hntui TUI."""

from frontend.screens.home_screen import HomeScreen
from frontend.screens.log_screen import LogScreen
from frontend.widgets import StoryListView, StoryRow
from frontend.utils import rows_per_item

__all__ = [
    "HomeScreen",
    "LogScreen",
    "StoryListView",
    "StoryRow",
    "rows_per_item",
]
