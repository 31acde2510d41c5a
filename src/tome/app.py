"""Tome - terminal reader for public-domain books."""

from __future__ import annotations

import logging
import sys

from textual.app import App
from textual.binding import Binding

from tome.api.client import TomeClient
from tome.config import AppConfig, load_config
from tome.ui.screens.open_book_screen import OpenBookScreen
from tome.ui.screens.reader_screen import ReaderScreen
from tome.ui.themes import APP_CSS


class TomeApp(App):
    """Paginated reader backed by the Tome book service."""

    TITLE = "Tome"
    CSS = APP_CSS
    BINDINGS = [
        Binding("q", "quit", "Quit", show=False),
    ]

    def __init__(self, config: AppConfig | None = None, book_id: str | None = None) -> None:
        super().__init__()
        self.config = config or load_config()
        self.client = TomeClient(self.config)
        self._book_id = book_id

    def on_mount(self) -> None:
        if self._book_id:
            self.open_book(self._book_id)
        else:
            self.push_screen(OpenBookScreen(), callback=self._on_book_chosen)

    def _on_book_chosen(self, book_id: str | None) -> None:
        if book_id:
            self.open_book(book_id)
        else:
            self.exit()

    def open_book(self, book_id: str) -> None:
        self.push_screen(ReaderScreen(book_id))

    async def action_quit(self) -> None:
        await self.client.close()
        self.exit()


def _setup_logging(config: AppConfig) -> None:
    handler = logging.FileHandler(config.log_path, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root = logging.getLogger("tome")
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)


def main() -> None:
    config = load_config()
    _setup_logging(config)

    book_id: str | None = None
    if len(sys.argv) > 1:
        book_id = sys.argv[1]

    app = TomeApp(config=config, book_id=book_id)
    app.run()


if __name__ == "__main__":
    main()
