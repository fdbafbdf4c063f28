import asyncio
import logging
import webbrowser

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.css.query import NoMatches
from textual.screen import Screen
from textual.widgets import (
    ContentSwitcher,
    Footer,
    Header,
    ListView,
    LoadingIndicator,
    Static,
    Tab,
    Tabs,
)

from backend.config import Config
from backend.items import CollectionError, ViewCache
from frontend.screens.log_screen import LogScreen
from frontend.state.load_state_machine import LoadOutput, LoadStateMachine
from frontend.widgets import StoryListView

logger = logging.getLogger("hntui")

VIEW_LABELS = {"top": "Top", "new": "New"}


class HomeScreen(Screen):
    """Tabbed story lists, one independently cached list per view."""

    DEFAULT_CSS = """
    HomeScreen #view-tabs {
        dock: top;
    }

    HomeScreen #lists-pane {
        height: 1fr;
        border: solid $accent;
        border-title-align: left;
    }

    HomeScreen #lists {
        height: 100%;
    }

    HomeScreen StoryListView {
        height: 100%;
    }

    HomeScreen #loading {
        display: none;
    }

    HomeScreen #lists-pane.loading #loading {
        display: block;
    }

    HomeScreen #lists-pane.loading #lists {
        display: none;
    }

    HomeScreen #status-line {
        dock: bottom;
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }

    HomeScreen #status-line.stale {
        color: $warning;
    }
    """

    BINDINGS = [
        Binding("c", "view_comments", "Comments", show=True, id="hntui.view_comments"),
        Binding("r", "refresh", "Refresh", show=True, id="hntui.refresh"),
        Binding("h,left", "previous_view", "Prev", show=False, id="hntui.left"),
        Binding("l,right", "next_view", "Next", show=False, id="hntui.right"),
        Binding("L", "open_logs", "Logs", show=True),
        Binding("q,escape", "quit", "Quit", show=True, id="hntui.quit"),
    ]

    def __init__(self, views: ViewCache, config: Config):
        super().__init__()
        self.views = views
        self.config = config
        self.active_view = config.default_view
        self.load_machines = {name: LoadStateMachine(name) for name in views.names}

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False, icon="")

        tabs = Tabs(
            *(Tab(VIEW_LABELS.get(name, name.title()), id=name) for name in self.views.names),
            active=self.active_view,
            id="view-tabs",
        )
        tabs.can_focus = False
        yield tabs

        lists = ContentSwitcher(
            *(
                StoryListView(
                    wrap_past_end=self.config.wrap_past_end,
                    compact=self.config.compact,
                    id=f"list-{name}",
                )
                for name in self.views.names
            ),
            initial=f"list-{self.active_view}",
            id="lists",
        )
        lists_pane = Container(LoadingIndicator(id="loading"), lists, id="lists-pane")
        lists_pane.border_title = VIEW_LABELS.get(self.active_view, self.active_view)
        yield lists_pane

        yield Static("", id="status-line")
        yield Footer()

    def on_mount(self) -> None:
        self.activate_view(self.active_view)

    def story_list(self, view: str | None = None) -> StoryListView:
        return self.query_one(f"#list-{view or self.active_view}", StoryListView)

    def activate_view(self, view: str) -> None:
        """Show a view, collecting it the first time it is shown."""
        self.active_view = view
        self.query_one("#lists", ContentSwitcher).current = f"list-{view}"
        self.query_one("#view-tabs", Tabs).active = view
        self.query_one("#lists-pane", Container).border_title = VIEW_LABELS.get(view, view)
        self.story_list(view).focus()

        machine = self.load_machines[view]
        if machine.current_state == machine.idle:
            self.load_view(view)
        else:
            self._render_output(view, machine.output)

    def load_view(self, view: str, refresh: bool = False) -> None:
        """Start a collection worker; a newer one for the same view replaces it."""
        output = self.load_machines[view].begin()
        self._render_output(view, output)
        self.run_worker(
            self._collect(view, refresh),
            exclusive=True,
            group=f"collect-{view}",
        )

    async def _collect(self, view: str, refresh: bool) -> None:
        state = self.views[view]
        machine = self.load_machines[view]
        try:
            if refresh:
                items = await state.refresh(self.config.max_items)
            else:
                items = await state.get(self.config.max_items)
        except CollectionError as e:
            logger.error("Failed to collect %s view: %s", view, e, exc_info=True)
            self._render_output(view, machine.fail(str(e)))
            self.notify(f"Could not load {view} stories", severity="error")
            return
        except Exception as e:
            logger.error("Unexpected error collecting %s view: %s", view, e, exc_info=True)
            self._render_output(view, machine.fail(str(e)))
            self.notify(f"Could not load {view} stories", severity="error")
            return

        await self.story_list(view).set_items(items)
        self._render_output(view, machine.complete(len(items)))

    def _render_output(self, view: str, output: LoadOutput) -> None:
        """Reflect a view's load state, if it is the one on screen."""
        if view != self.active_view:
            return
        try:
            status = self.query_one("#status-line", Static)
            pane = self.query_one("#lists-pane", Container)
        except NoMatches:
            return
        with self.app.batch_update():
            status.update(output.status_text)
            status.set_class(output.is_stale, "stale")
            pane.set_class(output.show_spinner, "loading")

    def on_tabs_tab_activated(self, event: Tabs.TabActivated) -> None:
        if event.tab is not None and event.tab.id != self.active_view:
            self.activate_view(event.tab.id)

    def action_next_view(self) -> None:
        names = self.views.names
        self.activate_view(names[(names.index(self.active_view) + 1) % len(names)])

    def action_previous_view(self) -> None:
        names = self.views.names
        self.activate_view(names[(names.index(self.active_view) - 1) % len(names)])

    def action_refresh(self) -> None:
        self.load_view(self.active_view, refresh=True)

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        """The open key or a click on any row of an item opens that item."""
        if not isinstance(event.list_view, StoryListView) or event.list_view.index is None:
            return
        event.list_view.select_row(event.list_view.index)
        self.action_open_article()

    def action_open_article(self) -> None:
        selected = self.story_list().selected_item
        if selected is not None:
            self._open_url(selected.record.link)

    def action_view_comments(self) -> None:
        selected = self.story_list().selected_item
        if selected is not None:
            self._open_url(selected.record.discussion_url)

    def _open_url(self, url: str) -> None:
        self.run_worker(self._open_in_browser(url), group="browser")

    async def _open_in_browser(self, url: str) -> None:
        try:
            opened = await asyncio.to_thread(webbrowser.open, url)
        except (webbrowser.Error, OSError) as e:
            logger.warning("Failed to open browser for %s: %s", url, e)
            opened = False
        if not opened:
            self.notify(f"Could not open {url}", severity="error")

    def action_open_logs(self) -> None:
        self.app.push_screen(LogScreen())

    def action_quit(self) -> None:
        self.app.exit()
