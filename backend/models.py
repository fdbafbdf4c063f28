"""Pydantic models for items returned by the Hacker News API.

Every kind shares the same base fields. Absent optional fields fall back to
defaults (empty string, zero, current time) instead of failing validation.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from backend.settings import DISCUSSION_URL


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseRecord(BaseModel):
    """Fields common to every item kind."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    by: str = ""
    time: datetime = Field(default_factory=_utc_now)
    deleted: bool = False
    dead: bool = False
    kids: tuple[int, ...] = ()

    @property
    def kind(self) -> str:
        return self.type  # type: ignore[attr-defined]

    @property
    def discussion_url(self) -> str:
        return DISCUSSION_URL.format(id=self.id)

    @property
    def link(self) -> str:
        """External url when the item has one, otherwise its discussion page."""
        return getattr(self, "url", "") or self.discussion_url


class Story(BaseRecord):
    type: Literal["story"] = "story"
    title: str = ""
    url: str = ""
    score: int = 0
    descendants: int = 0


class Job(BaseRecord):
    type: Literal["job"] = "job"
    title: str = ""
    url: str = ""
    text: str = ""


class Comment(BaseRecord):
    type: Literal["comment"] = "comment"
    parent: int = 0
    text: str = ""


class Poll(BaseRecord):
    type: Literal["poll"] = "poll"
    title: str = ""
    text: str = ""
    score: int = 0
    descendants: int = 0
    parts: tuple[int, ...] = ()


class PollOption(BaseRecord):
    type: Literal["pollopt"] = "pollopt"
    parent: int = 0
    score: int = 0


Record = Annotated[
    Union[Story, Job, Comment, Poll, PollOption],
    Field(discriminator="type"),
]

RECORD_ADAPTER: TypeAdapter[Record] = TypeAdapter(Record)


def parse_record(data: object) -> Record:
    """Validate a decoded JSON payload into the matching record kind.

    Raises:
        pydantic.ValidationError: payload is not an object, has no known
            ``type`` tag, or lacks an ``id``.
    """
    return RECORD_ADAPTER.validate_python(data)
