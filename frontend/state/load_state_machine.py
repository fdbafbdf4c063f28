"""Load state machine for one view's status line.

Pure logic (no Textual dependencies). The screen reports collection start,
success and failure; the machine answers with the flags and text the status
line and list need.
"""

import logging
from dataclasses import dataclass

from statemachine import State, StateMachine

logger = logging.getLogger("hntui")


@dataclass
class LoadOutput:
    """Output state from the load state machine."""

    status_text: str
    """Status line text: 'Loading top stories...', '30 stories', etc."""

    show_spinner: bool
    """Whether to show the loading indicator instead of the list."""

    show_list: bool
    """Whether the list has something worth showing (fresh or stale)."""

    is_stale: bool
    """True when the list on screen is older than the last attempted refresh."""

    @classmethod
    def idle(cls) -> "LoadOutput":
        return cls(status_text="", show_spinner=False, show_list=False, is_stale=False)


class LoadStateMachine(StateMachine):
    """Lifecycle of one view's collection.

    States:
    - idle: never collected.
    - loading: a batch is in flight (first load or refresh).
    - ready: the last batch succeeded.
    - failed: the last batch failed; a previous list may still be shown.
    """

    idle = State(initial=True)
    loading = State()
    ready = State()
    failed = State()

    # Self-transition on loading: a refresh replaces an in-flight batch.
    status_loading = idle.to(loading) | loading.to(loading) | ready.to(loading) | failed.to(loading)
    status_ready = loading.to(ready)
    status_failed = loading.to(failed)

    def __init__(self, view_name: str):
        self.view_name = view_name
        self._item_count: int | None = None
        self._error: str | None = None
        super().__init__()

    @property
    def output(self) -> LoadOutput:
        state_name = self.current_state.id
        has_items = bool(self._item_count)

        if state_name == "loading":
            status_text = "Refreshing..." if has_items else f"Loading {self.view_name} stories..."
        elif state_name == "ready":
            if self._item_count:
                noun = "story" if self._item_count == 1 else "stories"
                status_text = f"{self._item_count} {noun}"
            else:
                status_text = "No stories"
        elif state_name == "failed":
            if has_items:
                status_text = "Refresh failed, showing previous list"
            else:
                status_text = f"Failed to load: {self._error}"
        else:
            status_text = ""

        return LoadOutput(
            status_text=status_text,
            show_spinner=(state_name == "loading" and not has_items),
            show_list=has_items or state_name == "ready",
            is_stale=(state_name == "failed" and has_items),
        )

    def begin(self) -> LoadOutput:
        self.send("status_loading")
        return self.output

    def complete(self, item_count: int) -> LoadOutput:
        self._item_count = item_count
        self._error = None
        self.send("status_ready")
        return self.output

    def fail(self, error: str) -> LoadOutput:
        self._error = error
        logger.debug("%s view failed: %s", self.view_name, error)
        self.send("status_failed")
        return self.output
