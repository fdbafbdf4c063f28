"""Custom Textual widgets for hntui."""

from .story_list import StoryListView, StoryRow

__all__ = [
    "StoryListView",
    "StoryRow",
]
