"""Hacker News API client.

The rest of the application only depends on the ``Fetcher`` protocol;
``HackerNewsClient`` is the concrete implementation over ``httpx``.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from backend.models import Record, parse_record
from backend.settings import API_BASE_URL, REQUEST_TIMEOUT

logger = logging.getLogger(__name__)

STORY_LIST_ENDPOINTS = {
    "top": "topstories.json",
    "new": "newstories.json",
}


class FetchError(Exception):
    """A single request to the API could not be completed."""

    def __init__(self, target: int | str, message: str):
        self.target = target
        self.message = message
        super().__init__(f"{target}: {message}")


class Fetcher(Protocol):
    """Capability consumed by the item collector."""

    async def fetch_item(self, item_id: int) -> Record: ...

    async def fetch_id_list(self, view: str, limit: int | None = None) -> list[int]: ...


class HackerNewsClient:
    """Async client for the Hacker News Firebase API."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        client: httpx.AsyncClient | None = None,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "HackerNewsClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get_json(
        self, path: str, target: int | str, params: dict[str, Any] | None = None
    ) -> Any:
        url = f"{self.base_url}/{path}"
        logger.debug("GET %s params=%s", url, params)
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("HTTP %s for %s", e.response.status_code, url)
            raise FetchError(target, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning("Request to %s failed: %s", url, e)
            raise FetchError(target, str(e) or type(e).__name__) from e
        except ValueError as e:
            logger.warning("Invalid JSON from %s: %s", url, e)
            raise FetchError(target, "invalid JSON") from e

    async def fetch_item(self, item_id: int) -> Record:
        data = await self._get_json(f"item/{item_id}.json", item_id)
        if data is None:
            raise FetchError(item_id, "item not found")
        try:
            return parse_record(data)
        except ValidationError as e:
            logger.warning("Item %s failed validation: %s", item_id, e)
            raise FetchError(item_id, "unrecognised item payload") from e

    async def fetch_id_list(self, view: str, limit: int | None = None) -> list[int]:
        """Fetch the ordered id list behind a named view.

        Raises:
            KeyError: unknown view name
            FetchError: the request failed or returned something other than ids
        """
        endpoint = STORY_LIST_ENDPOINTS[view]
        params = None
        if limit is not None:
            params = {"orderBy": '"$key"', "limitToFirst": limit}

        data = await self._get_json(endpoint, view, params)
        if not isinstance(data, list) or not all(isinstance(i, int) for i in data):
            raise FetchError(view, "expected a list of item ids")
        return data[:limit] if limit is not None else data
