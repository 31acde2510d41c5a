from __future__ import annotations

import textwrap
from typing import TYPE_CHECKING

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.events import Click
from textual.screen import Screen
from textual.widgets import Footer, Input, Static

from tome.library.models import SHELF_TYPES
from tome.reader.engine import ReaderEngine

if TYPE_CHECKING:
    from tome.app import TomeApp

SPACING_LABELS = ["Compact", "Normal", "Wide", "X-Wide"]
SLIDER_WIDTH = 30


def _wrap(text: str, width: int, spacing: int) -> str:
    """Wrap paragraphs to width, with `spacing` blank lines between lines."""
    gap = "\n" * (spacing + 1)
    paragraphs: list[str] = []
    for para in text.split("\n\n"):
        lines = textwrap.wrap(" ".join(para.split()), width=width)
        if lines:
            paragraphs.append(gap.join(lines))
    return ("\n" * (spacing + 2)).join(paragraphs)


def _slider_bar(value: int, total: int, width: int = SLIDER_WIDTH) -> str:
    if total <= 0:
        return "─" * width
    filled = round(value / total * width)
    return "━" * filled + "●" + "─" * max(0, width - filled)


class ReaderScreen(Screen):
    BINDINGS = [
        Binding("escape", "go_back", "Back"),
        Binding("left", "prev_page", "←"),
        Binding("right", "next_page", "→"),
        Binding("space", "next_page", "Next", show=False),
        Binding("left_square_bracket", "back_ten", "-10"),
        Binding("right_square_bracket", "forward_ten", "+10"),
        Binding("home", "first_page", "First", show=False),
        Binding("end", "last_page", "Last", show=False),
        Binding("less_than_sign", "scrub(-1)", "<Slide", show=False),
        Binding("greater_than_sign", "scrub(1)", "Slide>", show=False),
        Binding("enter", "release_scrub", "Go", show=False),
        Binding("g", "show_page_input", "Go to"),
        Binding("r", "toggle_reading", "Timer"),
        Binding("s", "save_progress", "Save"),
        Binding("f", "toggle_fullscreen", "Full"),
        Binding("w", "cycle_wpp", "WPP"),
        Binding("=", "increase_spacing", "+Sp"),
        Binding("minus", "decrease_spacing", "-Sp"),
        Binding("1", "shelf(0)", "Reading", show=False),
        Binding("2", "shelf(1)", "Want", show=False),
        Binding("3", "shelf(2)", "Read", show=False),
        Binding("E", "export", "Export"),
    ]

    def __init__(self, book_id: str) -> None:
        super().__init__()
        self._book_id = book_id
        self._line_spacing = 1
        self._engine: ReaderEngine | None = None

    @property
    def tm(self) -> TomeApp:
        return self.app  # type: ignore[return-value]

    @property
    def engine(self) -> ReaderEngine:
        assert self._engine is not None
        return self._engine

    def compose(self) -> ComposeResult:
        yield Static("", id="reader-header")
        yield Static("", id="reader-controls")
        with VerticalScroll(id="content-scroll"):
            yield Static("Loading book details...", id="content-text", markup=False)
        with Horizontal(id="page-input-bar"):
            yield Input(placeholder="Enter page number", id="page-input", type="integer")
        yield Static("", id="reader-dock")
        yield Static("", id="reader-message", markup=False)
        yield Footer()

    def on_mount(self) -> None:
        self._line_spacing = self.tm.config.default_line_spacing
        self._engine = ReaderEngine(
            self._book_id,
            self.tm.client,
            self.tm.config,
            on_change=self._refresh_view,
            on_scroll_reset=self._scroll_to_top,
        )
        self._open_book()

    def on_unmount(self) -> None:
        if self._engine is not None:
            self._engine.close()

    @work(exclusive=True, group="load")
    async def _open_book(self) -> None:
        await self.engine.open()

    # ── Rendering ──────────────────────────────

    def _scroll_to_top(self) -> None:
        self.query_one("#content-scroll", VerticalScroll).scroll_home(animate=False)

    def _content_width(self) -> int:
        width = self.query_one("#content-scroll", VerticalScroll).size.width - 10
        return width if width >= 20 else 72

    def _refresh_view(self) -> None:
        if not self.is_mounted or self._engine is None:
            return
        e = self._engine
        content = self.query_one("#content-text", Static)
        content.remove_class("error-text", "loading-text")

        if e.loading:
            content.update("Loading book details...")
            content.add_class("loading-text")
        elif e.error:
            content.update(
                f"Book Not Found\n\n{e.error}\n\n"
                "Press Escape to go back or q to quit."
            )
            content.add_class("error-text")
        elif e.loading_content and not e.state.content:
            content.update("Loading content...")
            content.add_class("loading-text")
        else:
            body = _wrap(e.state.content, self._content_width(), self._line_spacing)
            if e.content_error:
                body = f"Content Unavailable: {e.content_error}\n\n{body}"
            content.update(body)

        self._update_header()
        self._update_dock()
        self.query_one("#reader-message", Static).update(e.message)
        self.set_class(e.dock.fullscreen, "fullscreen")

    def _update_header(self) -> None:
        e = self.engine
        s = e.state
        title = e.book.title if e.book else self._book_id
        author = e.book.author if e.book else ""
        parts = [f" {title}"]
        if author:
            parts.append(author)
        if e.book_status:
            parts.append(e.book_status)
        self.query_one("#reader-header", Static).update("  │  ".join(parts))

        timer = f"{e.timer.minutes} min"
        if e.timer.active:
            timer += " ●"
        controls = [
            f"Page {s.current_page} of {s.total_pages}",
            f"{s.progress}%",
            timer,
            f"WPP {s.words_per_page}",
            SPACING_LABELS[self._line_spacing],
        ]
        if e.saving:
            controls.append("Saving...")
        self.query_one("#reader-controls", Static).update("  │  ".join(controls))

    def _update_dock(self) -> None:
        e = self.engine
        s = e.state
        dock = self.query_one("#reader-dock", Static)
        dock.set_class(not e.dock.visible, "hidden")
        value = e.slider.display_value
        hint = f"Slide to page {value}" if e.slider.dragging else f"Current: {s.current_page}"
        dock.update(
            f"Page {s.current_page} of {s.total_pages} ({s.progress}%)   "
            f"◀ {_slider_bar(value, s.total_pages)} ▶   {hint}"
        )

    # ── Navigation ─────────────────────────────

    def action_next_page(self) -> None:
        self.run_worker(self.engine.next_page())

    def action_prev_page(self) -> None:
        self.run_worker(self.engine.prev_page())

    def action_forward_ten(self) -> None:
        self.run_worker(self.engine.next_page(10))

    def action_back_ten(self) -> None:
        self.run_worker(self.engine.prev_page(10))

    def action_first_page(self) -> None:
        self.run_worker(self.engine.first_page())

    def action_last_page(self) -> None:
        self.run_worker(self.engine.last_page())

    def action_scrub(self, delta: int) -> None:
        self.engine.scrub(delta)

    def action_release_scrub(self) -> None:
        self.engine.release_scrub()

    def action_show_page_input(self) -> None:
        bar = self.query_one("#page-input-bar")
        bar.add_class("visible")
        inp = self.query_one("#page-input", Input)
        inp.value = ""
        inp.focus()

    @on(Input.Submitted, "#page-input")
    def on_page_input_submitted(self, event: Input.Submitted) -> None:
        self.query_one("#page-input-bar").remove_class("visible")
        self.run_worker(self.engine.submit_page_input(event.value))

    def on_click(self, event: Click) -> None:
        if self._engine is not None:
            self._engine.interact()

    # ── Session & profile ──────────────────────

    def action_toggle_reading(self) -> None:
        self.engine.toggle_reading()

    def action_save_progress(self) -> None:
        self.run_worker(self.engine.save_progress(), group="profile")

    def action_shelf(self, index: int) -> None:
        self.run_worker(self.engine.add_to_bookshelf(SHELF_TYPES[index]), group="profile")

    def action_export(self) -> None:
        self.run_worker(self.engine.export_text(), group="export")

    # ── Settings ───────────────────────────────

    def action_toggle_fullscreen(self) -> None:
        self.engine.toggle_fullscreen()

    def action_cycle_wpp(self) -> None:
        self.run_worker(self.engine.cycle_words_per_page(), exclusive=True, group="wpp")

    def action_increase_spacing(self) -> None:
        if self._line_spacing < 3:
            self._line_spacing += 1
            self._refresh_view()

    def action_decrease_spacing(self) -> None:
        if self._line_spacing > 0:
            self._line_spacing -= 1
            self._refresh_view()

    def action_go_back(self) -> None:
        bar = self.query_one("#page-input-bar")
        if bar.has_class("visible"):
            bar.remove_class("visible")
            return
        if self.engine.dock.fullscreen:
            self.engine.toggle_fullscreen()
            return
        if len(self.app.screen_stack) > 2:
            self.app.pop_screen()
        else:
            self.run_worker(self.tm.action_quit())

    def on_resize(self) -> None:
        self._refresh_view()
