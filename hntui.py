import argparse
import logging
import os
from pathlib import Path

from textual.app import App
from textual.logging import TextualHandler

from backend.api import Fetcher, HackerNewsClient
from backend.config import Config, ConfigError, validate_max_items
from backend.items import ViewCache
from backend.settings import VIEWS

LOGS_DIR = Path(__file__).parent / "logs"
LOGS_DIR.mkdir(exist_ok=True)

os.environ.setdefault("TEXTUAL_LOG", str(LOGS_DIR / "hntui.log"))


def _configure_logging() -> None:
    """Route all logging through Textual, with a file copy for the log screen."""
    log_path = Path(os.environ["TEXTUAL_LOG"])
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    textual_handler = TextualHandler(stderr=False, stdout=False)
    textual_handler.setFormatter(formatter)

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setFormatter(formatter)

    logging.basicConfig(
        level=logging.INFO,
        handlers=[textual_handler, file_handler],
        force=True,
    )

    # One line per item request is too noisy at INFO.
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


_configure_logging()

logger = logging.getLogger("hntui")

from frontend.screens.home_screen import HomeScreen
from frontend.settings import get_theme, set_theme


class HackerNewsApp(App):
    """Terminal browser for Hacker News story lists."""

    TITLE = "Hacker News"

    def __init__(self, config: Config | None = None, fetcher: Fetcher | None = None):
        super().__init__()
        self.config = config or Config()
        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or HackerNewsClient()
        self.views = ViewCache(self.fetcher)
        # Read before any theme watcher can overwrite the file.
        self._saved_theme = get_theme()

    def on_mount(self):
        if self._saved_theme in self.available_themes:
            self.theme = self._saved_theme
        self.set_keymap(self.config.keymap())
        self.push_screen(HomeScreen(self.views, self.config))

    def watch_theme(self, theme: str) -> None:
        set_theme(theme)

    async def on_unmount(self):
        if self._owns_fetcher:
            await self.fetcher.aclose()


HackerNewsApp.CSS = """
Screen {
    background: $surface;
}

Footer {
    background: $panel;
}

#log-view {
    height: 100%;
}
"""


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Browse Hacker News in the terminal")
    parser.add_argument("--config", type=Path, help="Path to config.ini")
    parser.add_argument("--view", choices=VIEWS, help="View to open on start")
    parser.add_argument("--max-items", type=int, help="Number of stories per view (1-500)")
    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> Config:
    """Read the config file and apply command line overrides.

    Raises:
        ConfigError: the file or an override holds an invalid value.
    """
    config = Config.load(args.config)
    if args.view:
        config.default_view = args.view
    if args.max_items is not None:
        config.max_items = validate_max_items(args.max_items)
    return config


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        config = load_config(args)
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        print(f"hntui: invalid configuration: {e}")
        return 2

    logger.info(
        "Starting with view=%s max_items=%d", config.default_view, config.max_items
    )
    HackerNewsApp(config).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
