"""Selection cursor over a list whose items span a variable number of rows.

Pure logic (no Textual dependencies). The cursor only ever rests on the top
row of an item, or on the "past list" row at index ``total_rows`` when
``wrap_past_end`` is off. Row counts come from ``rows_per_item`` so the
renderer and the cursor always agree on the layout.
"""

from __future__ import annotations

import bisect
from collections.abc import Sequence
from itertools import accumulate


class Cursor:
    """Tracks the selected row of a rendered list, with wraparound.

    With ``wrap_past_end`` on, moving down from the last item wraps to row 0.
    With it off, the cursor first stops on the past-list row, and the next
    move down wraps to row 0.
    """

    def __init__(self, row_counts: Sequence[int] = (), wrap_past_end: bool = True):
        self.wrap_past_end = wrap_past_end
        self.selected: int | None = None
        self._offsets: list[int] = []
        self._total_rows = 0
        self._set_layout(row_counts)

    def _set_layout(self, row_counts: Sequence[int]) -> None:
        if any(count < 1 for count in row_counts):
            raise ValueError("every item must render at least one row")
        totals = list(accumulate(row_counts))
        self._offsets = [0, *totals[:-1]] if totals else []
        self._total_rows = totals[-1] if totals else 0

    @property
    def total_rows(self) -> int:
        return self._total_rows

    @property
    def item_count(self) -> int:
        return len(self._offsets)

    @property
    def top_rows(self) -> tuple[int, ...]:
        return tuple(self._offsets)

    @property
    def step(self) -> int | None:
        """Rows per item when every item has the same height, else None."""
        if not self._offsets:
            return None
        heights = {
            end - start
            for start, end in zip(self._offsets, [*self._offsets[1:], self._total_rows])
        }
        return heights.pop() if len(heights) == 1 else None

    @property
    def past_end_row(self) -> int:
        return self._total_rows

    @property
    def is_past_end(self) -> bool:
        return self.selected is not None and self.selected == self._total_rows

    @property
    def _end(self) -> int:
        # Highest row the cursor may rest on before wrapping.
        if self.wrap_past_end:
            return self._offsets[-1]
        return self._total_rows

    def select_next(self) -> int | None:
        if not self._offsets:
            self.selected = None
        elif self.selected is None or self.selected >= self._end:
            self.selected = 0
        elif self.selected >= self._offsets[-1]:
            self.selected = self._total_rows
        else:
            self.selected = self._offsets[self._item_at(self.selected) + 1]
        return self.selected

    def select_previous(self) -> int | None:
        if not self._offsets:
            self.selected = None
        elif self.selected is None:
            self.selected = 0
        elif self.selected == 0:
            self.selected = self._end
        elif self.selected >= self._total_rows:
            self.selected = self._offsets[-1]
        else:
            self.selected = self._offsets[self._item_at(self.selected) - 1]
        return self.selected

    def select_item(self, index: int) -> int | None:
        """Select the top row of the given item, clamped to the list."""
        if not self._offsets:
            self.selected = None
        else:
            self.selected = self._offsets[max(0, min(index, len(self._offsets) - 1))]
        return self.selected

    def select_row(self, row: int) -> int | None:
        """Select whichever item owns ``row`` (mouse clicks land on any row)."""
        if not self._offsets:
            self.selected = None
        elif row >= self._total_rows:
            self.selected = self._end
        else:
            self.selected = self._offsets[self._item_at(max(row, 0))]
        return self.selected

    def unselect(self) -> None:
        self.selected = None

    @property
    def selected_item(self) -> int | None:
        """Logical index of the selected item; None when nothing or past-list is selected."""
        if self.selected is None or self.selected >= self._total_rows:
            return None
        return self._item_at(self.selected)

    def item_at_row(self, row: int) -> int | None:
        if row < 0 or row >= self._total_rows:
            return None
        return self._item_at(row)

    def _item_at(self, row: int) -> int:
        return bisect.bisect_right(self._offsets, row) - 1

    def reset(self, row_counts: Sequence[int]) -> int | None:
        """Swap in a new layout after the list was replaced.

        The selection keeps its logical item, clamped to the new last item.
        A past-list selection stays past the new end.
        """
        was_past_end = self.is_past_end
        previous_item = self.selected_item
        self._set_layout(row_counts)

        if self.selected is None or not self._offsets:
            self.selected = None
        elif was_past_end and not self.wrap_past_end:
            self.selected = self._total_rows
        elif previous_item is None:
            self.selected = self._offsets[-1]
        else:
            self.select_item(previous_item)
        return self.selected
