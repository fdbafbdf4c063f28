"""Backend configuration for hntui."""

from __future__ import annotations

import os

API_BASE_URL = os.getenv("HNTUI_API_BASE_URL", "https://hacker-news.firebaseio.com/v0")
DISCUSSION_URL = "https://news.ycombinator.com/item?id={id}"

# Per-request timeout in seconds. There is no retry or per-batch timeout.
REQUEST_TIMEOUT = float(os.getenv("HNTUI_REQUEST_TIMEOUT", "15"))

# Upper bound on in-flight item requests per batch. 0 means one task per id;
# negative values are treated as 0.
MAX_CONCURRENT_FETCHES = max(0, int(os.getenv("HNTUI_MAX_CONCURRENT_FETCHES", "0")))

# The API never returns more than 500 ids for a story list.
MAX_ITEMS_LIMIT = 500
DEFAULT_MAX_ITEMS = 30

VIEWS = ("top", "new")
DEFAULT_VIEW = "top"
