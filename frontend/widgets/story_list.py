"""ListView of collected items where one item may span several rows."""

from __future__ import annotations

from datetime import datetime

from textual.binding import Binding
from textual.widgets import Label, ListItem, ListView

from backend.items import CollectedList
from frontend.state.cursor import Cursor
from frontend.utils import build_rows, rows_per_item

END_OF_LIST = "[dim]── end of list ──[/dim]"


class StoryRow(ListItem):
    """One display row, tagged with the index of the item it belongs to."""

    def __init__(self, markup: str, item_index: int | None, **kwargs):
        super().__init__(**kwargs)
        self.item_index = item_index
        self._markup = markup

    def compose(self):
        yield Label(self._markup)


class StoryListView(ListView):
    """ListView whose highlight is driven by a ``Cursor``.

    Up/down move between items rather than rows, so the highlight always sits
    on an item's title row. Every row of the selected item gets the
    ``item-selected`` class. The open key (``hntui.open_article``) posts
    ``ListView.Selected`` for the highlighted row, as a click does.
    """

    DEFAULT_CSS = """
    StoryListView > StoryRow {
        height: 1;
        padding: 0 1;
    }
    StoryListView > StoryRow.meta-row {
        padding-left: 4;
    }
    StoryListView > StoryRow.item-selected {
        color: $success;
    }
    StoryListView > StoryRow.end-row {
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("enter", "select_cursor", "Open", show=True, id="hntui.open_article"),
        Binding("j,down", "cursor_down", "Down", show=False, id="hntui.down"),
        Binding("k,up", "cursor_up", "Up", show=False, id="hntui.up"),
    ]

    def __init__(
        self,
        wrap_past_end: bool = True,
        compact: bool = False,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.cursor = Cursor(wrap_past_end=wrap_past_end)
        self.compact = compact
        self.collected: CollectedList = ()

    async def set_items(self, items: CollectedList, now: datetime | None = None) -> None:
        """Replace the rendered rows, keeping the selected item where possible."""
        self.collected = items
        rows = [
            StoryRow(
                markup,
                item_index,
                classes="title-row" if first else "meta-row",
            )
            for item_index, markup, first in self._flatten(items, now)
        ]
        if items and not self.cursor.wrap_past_end:
            rows.append(StoryRow(END_OF_LIST, None, classes="end-row"))

        await self.clear()
        await self.extend(rows)

        self.cursor.reset([rows_per_item(item.record, self.compact) for item in items])
        if self.cursor.selected is None and items:
            self.cursor.select_next()
        self._sync_index()

    def _flatten(self, items: CollectedList, now: datetime | None):
        previous = None
        for item_index, markup in build_rows(items, self.compact, now):
            yield item_index, markup, item_index != previous
            previous = item_index

    @property
    def selected_item(self):
        """The selected ``CollectedItem``, or None."""
        index = self.cursor.selected_item
        if index is None or index >= len(self.collected):
            return None
        return self.collected[index]

    def action_cursor_down(self) -> None:
        self.cursor.select_next()
        self._sync_index()

    def action_cursor_up(self) -> None:
        self.cursor.select_previous()
        self._sync_index()

    def select_row(self, row: int) -> None:
        self.cursor.select_row(row)
        self._sync_index()

    def _sync_index(self) -> None:
        selected_item = self.cursor.selected_item
        for row in self.query(StoryRow):
            row.set_class(
                selected_item is not None and row.item_index == selected_item,
                "item-selected",
            )
        self.index = self.cursor.selected
