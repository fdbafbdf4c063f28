"""Rendering helpers shared by the story list and its cursor."""

import re
from datetime import datetime, timezone

from rich.markup import escape

from backend.items import CollectedItem
from backend.models import Comment, Job, Poll, PollOption, Record, Story

URL_REGEX = re.compile(r".+//(?P<url>[^/]*)")

# Kinds that get a metadata row under their title row.
_TWO_ROW_KINDS = (Story, Job, Poll)


def rows_per_item(record: Record, compact: bool = False) -> int:
    """Number of display rows a record occupies. Used by renderer and cursor alike."""
    if compact:
        return 1
    return 2 if isinstance(record, _TWO_ROW_KINDS) else 1


def extract_domain(url: str) -> str:
    """Host part of a url, or the url itself when it has no scheme."""
    match = URL_REGEX.match(url)
    if match and match.group("url"):
        return match.group("url")
    return url


def format_age(when: datetime, now: datetime | None = None) -> str:
    """Human-friendly age such as '5 minutes ago'."""
    if now is None:
        now = datetime.now(timezone.utc)
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)

    seconds = max(0, int((now - when).total_seconds()))
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            count = seconds // size
            return f"{count} {unit}{'s' if count != 1 else ''} ago"
    return "just now"


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def title_row(item: CollectedItem) -> str:
    """Rich markup for an item's first row."""
    position, record = item
    prefix = f"[red]{position}.[/red]"

    if isinstance(record, (Story, Job)):
        text = f"{prefix} {escape(record.title)}"
        if record.url:
            text += f" [i dim]({escape(extract_domain(record.url))})[/i dim]"
        return text
    if isinstance(record, Poll):
        return f"{prefix} {escape(record.title)}"
    if isinstance(record, Comment):
        return f"{prefix} comment by {escape(record.by)} on {record.parent}"
    if isinstance(record, PollOption):
        return f"{prefix} poll option of {record.parent} ({_plural(record.score, 'point')})"
    return f"{prefix} {record.id}"


def meta_row(record: Record, now: datetime | None = None) -> str:
    """Rich markup for the metadata row of a two-row item."""
    age = format_age(record.time, now)
    if isinstance(record, Job):
        return f"[dim]{age}[/dim]"
    score = getattr(record, "score", 0)
    comments = getattr(record, "descendants", 0)
    return (
        f"[dim]{_plural(score, 'point')} by {escape(record.by)} {age}"
        f" | {_plural(comments, 'comment')}[/dim]"
    )


def build_rows(
    items: tuple[CollectedItem, ...], compact: bool = False, now: datetime | None = None
) -> list[tuple[int, str]]:
    """Flatten items into (item_index, markup) display rows."""
    rows: list[tuple[int, str]] = []
    for index, item in enumerate(items):
        rows.append((index, title_row(item)))
        if rows_per_item(item.record, compact) == 2:
            rows.append((index, meta_row(item.record, now)))
    return rows
