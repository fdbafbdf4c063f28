import asyncio
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import Footer, Header, RichLog

LOGS_DIR = Path(__file__).parent.parent.parent / "logs"
MAX_LINES = 2000

# Loggers owned by this app; everything else (httpx, asyncio...) is library noise.
APP_LOGGERS = ("hntui", "backend", "frontend")

# Matches the format set up in hntui._configure_logging.
RECORD_RE = re.compile(
    r"^(?P<time>\d{4}-\d{2}-\d{2} [\d:,]+) - (?P<name>\S+) - (?P<level>[A-Z]+) - (?P<message>.*)$"
)

PROBLEM_LEVELS = ("WARNING", "ERROR", "CRITICAL")

LEVEL_STYLES = {
    "WARNING": "yellow",
    "ERROR": "bold red",
    "CRITICAL": "bold red",
    "DEBUG": "dim",
}

logger = logging.getLogger("hntui")


@dataclass
class LogRecordLines:
    """One log record and any continuation lines (tracebacks) written under it."""

    name: str
    level: str
    lines: list[str] = field(default_factory=list)

    @property
    def is_app(self) -> bool:
        return any(self.name == root or self.name.startswith(f"{root}.") for root in APP_LOGGERS)

    @property
    def is_problem(self) -> bool:
        return self.level in PROBLEM_LEVELS


def tail_file(path: Path, max_lines: int) -> list[str]:
    with path.open("r", encoding="utf-8", errors="replace") as f:
        return [line.rstrip("\n") for line in f.readlines()[-max_lines:]]


def group_records(lines: list[str]) -> list[LogRecordLines]:
    """Split raw lines into records; lines that do not start a record join the previous one."""
    records: list[LogRecordLines] = []
    for line in lines:
        match = RECORD_RE.match(line)
        if match:
            records.append(LogRecordLines(match["name"], match["level"], [line]))
        elif records:
            records[-1].lines.append(line)
        else:
            # Tail cut into the middle of a record.
            records.append(LogRecordLines("", "", [line]))
    return records


def filter_lines(lines: list[str], app_only: bool = True, problems_only: bool = False) -> list[str]:
    kept: list[str] = []
    for record in group_records(lines):
        if app_only and not record.is_app:
            continue
        if problems_only and not record.is_problem:
            continue
        kept.extend(record.lines)
    return kept


def style_line(line: str) -> str:
    """Rich markup for one line, coloured by its record's level."""
    match = RECORD_RE.match(line)
    if not match:
        return f"[dim]{escape(line)}[/dim]"
    style = LEVEL_STYLES.get(match["level"])
    text = escape(line)
    return f"[{style}]{text}[/{style}]" if style else text


class LogScreen(Screen):
    """Tail of the application log, filtered to this app's own records by default."""

    BINDINGS = [
        Binding("r", "reload", "Reload", show=True),
        Binding("a", "toggle_all", "All loggers", show=True),
        Binding("w", "toggle_problems", "Warnings only", show=True),
        Binding("escape", "close", "Close", show=True),
        Binding("q", "close", "Close", show=False),
    ]

    def __init__(self, log_path: Path | None = None):
        super().__init__()
        self.log_path = log_path or Path(
            os.environ.get("TEXTUAL_LOG", LOGS_DIR / "hntui.log")
        )
        self.app_only = True
        self.problems_only = False
        self.shown_lines: list[str] = []

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False, icon="")
        yield RichLog(id="log-view", markup=True, auto_scroll=True, max_lines=MAX_LINES)
        yield Footer()

    async def on_mount(self):
        await self._load_log()

    async def action_reload(self):
        await self._load_log()

    async def action_toggle_all(self):
        self.app_only = not self.app_only
        await self._load_log()

    async def action_toggle_problems(self):
        self.problems_only = not self.problems_only
        await self._load_log()

    def action_close(self):
        self.app.pop_screen()

    def _describe_filter(self) -> str:
        scope = "app records" if self.app_only else "all records"
        return f"{scope}, warnings and errors" if self.problems_only else scope

    async def _load_log(self):
        log_widget = self.query_one("#log-view", RichLog)
        log_widget.clear()
        self.shown_lines = []
        self.sub_title = self._describe_filter()

        if not self.log_path.exists():
            log_widget.write("Log file has not been created yet.")
            return

        try:
            lines = await asyncio.to_thread(tail_file, self.log_path, MAX_LINES)
        except OSError as exc:
            log_widget.write(f"Failed to load log: {escape(str(exc))}")
            logger.error("Failed to load log view: %s", exc, exc_info=True)
            return

        self.shown_lines = filter_lines(lines, self.app_only, self.problems_only)
        if not self.shown_lines:
            log_widget.write("[dim]No matching log records.[/dim]")
            return
        for line in self.shown_lines:
            log_widget.write(style_line(line))
        log_widget.scroll_end(animate=False)
