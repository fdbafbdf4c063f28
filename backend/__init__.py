"""Backend for hntui: Hacker News API access and concurrent item collection."""

from backend.api import FetchError, Fetcher, HackerNewsClient
from backend.items import (
    CollectedItem,
    CollectedList,
    CollectionError,
    ViewCache,
    ViewState,
    collect_items,
)
from backend.models import Comment, Job, Poll, PollOption, Record, Story, parse_record

__all__ = [
    "CollectedItem",
    "CollectedList",
    "CollectionError",
    "Comment",
    "FetchError",
    "Fetcher",
    "HackerNewsClient",
    "Job",
    "Poll",
    "PollOption",
    "Record",
    "Story",
    "ViewCache",
    "ViewState",
    "collect_items",
    "parse_record",
]
