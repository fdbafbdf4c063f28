"""Test configuration.

Config, theme and log files are redirected to a throwaway directory before
any project module is imported, so tests never touch the user's files.
"""
import asyncio
import os
import sys
import tempfile
from datetime import datetime, timezone
from pathlib import Path

# Ensure project root is importable before backend imports.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

_TEST_HOME = Path(tempfile.mkdtemp(prefix="hntui-tests-"))
os.environ["HNTUI_CONFIG"] = str(_TEST_HOME / "config.ini")
os.environ["TEXTUAL_LOG"] = str(_TEST_HOME / "hntui-test.log")

import pytest

from backend.api import FetchError
from backend.models import parse_record

BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def story_payload(item_id: int, **overrides) -> dict:
    payload = {
        "id": item_id,
        "type": "story",
        "by": f"user{item_id}",
        "time": int(BASE_TIME.timestamp()),
        "title": f"Story {item_id}",
        "url": f"https://example.com/{item_id}",
        "score": item_id * 10,
        "descendants": item_id,
        "kids": [],
    }
    payload.update(overrides)
    return payload


class FakeFetcher:
    """In-memory Fetcher with controllable latency and failures.

    ``delays`` maps id -> seconds to sleep before answering, which lets a test
    force any completion order.
    """

    def __init__(self, payloads=None, id_lists=None, delays=None, failing=()):
        self.payloads = dict(payloads or {})
        self.id_lists = dict(id_lists or {})
        self.delays = dict(delays or {})
        self.failing = set(failing)
        self.list_failures: set[str] = set()
        self.item_calls: list[int] = []
        self.completed: list[int] = []
        self.list_calls: list[tuple[str, int | None]] = []

    async def fetch_item(self, item_id: int):
        self.item_calls.append(item_id)
        await asyncio.sleep(self.delays.get(item_id, 0))
        if item_id in self.failing:
            raise FetchError(item_id, "simulated failure")
        self.completed.append(item_id)
        return parse_record(self.payloads.get(item_id) or story_payload(item_id))

    async def fetch_id_list(self, view: str, limit: int | None = None) -> list[int]:
        self.list_calls.append((view, limit))
        if view in self.list_failures:
            raise FetchError(view, "simulated list failure")
        ids = list(self.id_lists.get(view, []))
        return ids[:limit] if limit is not None else ids


@pytest.fixture
def fake_fetcher():
    """FakeFetcher serving 'top' = 1..5 and 'new' = 101..103."""
    return FakeFetcher(id_lists={"top": [1, 2, 3, 4, 5], "new": [101, 102, 103]})


@pytest.fixture
def test_home() -> Path:
    return _TEST_HOME


@pytest.fixture
def make_fetcher():
    """Factory for FakeFetcher instances."""
    return FakeFetcher


@pytest.fixture
def make_payload():
    """Factory for item payloads as the API returns them."""
    return story_payload
