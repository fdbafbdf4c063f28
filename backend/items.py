"""Item collection: turn an ordered id list into an ordered list of records.

``collect_items`` fans out one fetch per id and fans the results back in. Each
task carries its 1-based position from the moment it is created, so the final
order depends only on the requested order, never on completion order. Nothing
is returned until the whole batch has finished.

A batch is all-or-nothing: if any id fails, ``CollectionError`` is raised with
every failed id and no partial list is produced. There is no per-id timeout, so
a hung request hangs its batch.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import NamedTuple

from backend.api import FetchError, Fetcher
from backend.models import Record
from backend.settings import MAX_CONCURRENT_FETCHES, VIEWS

logger = logging.getLogger(__name__)


class CollectedItem(NamedTuple):
    """A record with its 1-based rank in the requested id order."""

    position: int
    record: Record


CollectedList = tuple[CollectedItem, ...]


class CollectionError(Exception):
    """A batch could not be fully collected."""

    def __init__(self, message: str, failed_ids: Sequence[int] = ()):
        self.failed_ids = tuple(failed_ids)
        super().__init__(message)


class _TaggedFailure(Exception):
    def __init__(self, position: int, item_id: int, error: BaseException):
        self.position = position
        self.item_id = item_id
        self.error = error
        super().__init__(f"{item_id}: {error}")


async def collect_items(
    ids: Sequence[int],
    fetch: Callable[[int], Awaitable[Record]],
    max_concurrency: int | None = None,
) -> CollectedList:
    """Fetch every id concurrently and return records sorted by requested position.

    Args:
        ids: Item ids in display order.
        fetch: Coroutine function resolving one id to a record.
        max_concurrency: Upper bound on in-flight fetches. Defaults to ``len(ids)``.

    Raises:
        CollectionError: one or more ids could not be fetched.
        ValueError: ``max_concurrency`` is negative.
    """
    if max_concurrency is not None and max_concurrency < 0:
        raise ValueError(f"max_concurrency must not be negative, got {max_concurrency}")
    if not ids:
        return ()

    limit = max_concurrency or len(ids)
    semaphore = asyncio.Semaphore(min(limit, len(ids)))

    async def fetch_tagged(position: int, item_id: int) -> CollectedItem:
        async with semaphore:
            try:
                record = await fetch(item_id)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                raise _TaggedFailure(position, item_id, e) from e
        return CollectedItem(position, record)

    started = time.perf_counter()
    tasks = [
        asyncio.create_task(fetch_tagged(position, item_id))
        for position, item_id in enumerate(ids, start=1)
    ]

    collected: list[CollectedItem] = []
    failures: list[_TaggedFailure] = []
    try:
        for next_done in asyncio.as_completed(tasks):
            try:
                collected.append(await next_done)
            except _TaggedFailure as failure:
                failures.append(failure)
    finally:
        pending = [task for task in tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    logger.debug(
        "Collected %d/%d items in %.3fs",
        len(collected),
        len(ids),
        time.perf_counter() - started,
    )

    if failures:
        failures.sort(key=lambda f: f.position)
        failed_ids = [f.item_id for f in failures]
        logger.warning("Batch failed for ids %s: %s", failed_ids, failures[0].error)
        raise CollectionError(
            f"Failed to fetch {len(failed_ids)} of {len(ids)} items", failed_ids
        )

    collected.sort(key=lambda item: item.position)
    return tuple(collected)


class ViewState:
    """Cached collection for one named view ("top", "new").

    ``get`` fills the cache once; ``refresh`` replaces it. Both hold the same
    lock, so a view has at most one collection in flight, and the cached tuple
    is swapped in a single assignment so readers never see a partial list. A
    failed refresh leaves the previous list in place.
    """

    def __init__(
        self,
        name: str,
        fetcher: Fetcher,
        max_concurrency: int | None = MAX_CONCURRENT_FETCHES or None,
    ):
        self.name = name
        self._fetcher = fetcher
        self._max_concurrency = max_concurrency
        self._items: CollectedList | None = None
        self._lock = asyncio.Lock()

    @property
    def cached(self) -> CollectedList | None:
        """The last collected list, or None if the view was never collected."""
        return self._items

    @property
    def is_collected(self) -> bool:
        return self._items is not None

    async def get(self, max_items: int) -> CollectedList:
        async with self._lock:
            if self._items is None:
                self._items = await self._collect(max_items)
            return self._items

    async def refresh(self, max_items: int) -> CollectedList:
        async with self._lock:
            self._items = await self._collect(max_items)
            return self._items

    async def _collect(self, max_items: int) -> CollectedList:
        logger.info("Collecting %s view (max_items=%d)", self.name, max_items)
        try:
            ids = await self._fetcher.fetch_id_list(self.name, max_items)
        except FetchError as e:
            raise CollectionError(f"Failed to fetch the {self.name} list: {e.message}") from e
        return await collect_items(
            ids[:max_items], self._fetcher.fetch_item, self._max_concurrency
        )


class ViewCache:
    """One independently cached ``ViewState`` per view name."""

    def __init__(
        self,
        fetcher: Fetcher,
        views: Sequence[str] = VIEWS,
        max_concurrency: int | None = MAX_CONCURRENT_FETCHES or None,
    ):
        self._views = {
            name: ViewState(name, fetcher, max_concurrency) for name in views
        }

    def __getitem__(self, name: str) -> ViewState:
        return self._views[name]

    def __iter__(self):
        return iter(self._views.values())

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._views)
