"""Reader engine: pagination, content loading, timers and progress for one book."""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import Callable, Optional

from tome.api.client import TomeClient
from tome.api.errors import ContentUnavailableError, TomeApiError
from tome.config import WORDS_PER_PAGE_OPTIONS, AppConfig
from tome.library.models import Book, ReadingProgress, shelf_label
from tome.reader.content import ContentResolver
from tome.reader.dock import DockAutoHide
from tome.reader.navigation import (
    Event,
    GoToPage,
    Mode,
    PaginationState,
    ShowLocalPage,
    Step,
    TextLoaded,
    WordsPerPageChanged,
    first_page as first_page_event,
    last_page as last_page_event,
    relative_page as relative_page_event,
    transition,
)
from tome.reader.session import ReadingTimer
from tome.reader.slider import SliderSync
from tome.reader.timers import LoopScheduler, Scheduler

log = logging.getLogger(__name__)


class ReaderEngine:
    """Owns the reader state for one book view.

    UI code calls the actions below and re-renders from the public attributes
    whenever ``on_change`` fires. Network failures never propagate out of the
    actions; they land in ``error`` (metadata), ``content_error`` (pages) or
    ``message`` (save and bookshelf actions).

    Page responses are applied in the order they arrive. Rapid navigation can
    therefore show a page from an earlier request if its response is slower.
    """

    def __init__(
        self,
        book_id: str,
        client: TomeClient,
        config: AppConfig,
        scheduler: Optional[Scheduler] = None,
        on_change: Optional[Callable[[], None]] = None,
        on_scroll_reset: Optional[Callable[[], None]] = None,
    ) -> None:
        self.book_id = book_id
        self._client = client
        self._config = config
        self._scheduler = scheduler or LoopScheduler()
        self._resolver = ContentResolver(client, config.storage_base_url)
        self._on_change = on_change
        self._on_scroll_reset = on_scroll_reset
        self._tasks: set[asyncio.Task] = set()
        self._closed = False

        self.state = PaginationState(words_per_page=config.words_per_page)
        self.book: Optional[Book] = None
        self.book_status: Optional[str] = None
        self.loading = True
        self.loading_content = False
        self.saving = False
        self.error = ""
        self.content_error = ""
        self.message = ""

        self.timer = ReadingTimer(
            self._scheduler, config.reading_tick, on_tick=lambda _: self._changed()
        )
        self.dock = DockAutoHide(
            self._scheduler, config.dock_hide_delay, on_change=lambda _: self._changed()
        )
        self.slider = SliderSync(
            self._scheduler, self.request_page, config.slider_debounce
        )

    def _changed(self) -> None:
        if self._on_change and not self._closed:
            self._on_change()

    def _apply(self, event: Event) -> Step:
        step = transition(self.state, event, self._config.large_book_pages)
        self.state = step.state
        self.slider.follow(self.state.current_page)
        if step.reset_scroll and self._on_scroll_reset and not self._closed:
            self._on_scroll_reset()
        self._changed()
        return step

    # ── Loading ────────────────────────────────

    async def open(self) -> None:
        await self.load_book()
        if self.book is None:
            return
        await self.refresh_status()
        await self.load_content(1)

    async def load_book(self) -> None:
        self.loading = True
        self.error = ""
        self._changed()
        try:
            self.book = await self._client.get_book(self.book_id)
        except TomeApiError as e:
            log.error("Error fetching book %s: %s", self.book_id, e)
            self.error = str(e) or "Failed to load book"
        finally:
            self.loading = False
            self._changed()

    async def refresh_status(self) -> None:
        if self.book is None or not self._client.is_authenticated:
            return
        self.book_status = await self._client.get_book_status(self.book.key)
        self._changed()

    async def load_content(self, page: int = 1) -> None:
        """Resolve a page, falling back to the full text paginated locally."""
        book = self.book
        if book is None:
            return
        if not self._resolver.has_text_source(book):
            self.content_error = "No full text available for this book"
            self._changed()
            return

        self.loading_content = True
        self.content_error = ""
        self._changed()
        try:
            try:
                event = await self._resolver.fetch_page(
                    self.book_id, page, self.state.words_per_page
                )
            except ContentUnavailableError as e:
                log.info("Page endpoint failed for %s (%s); using full text", self.book_id, e)
                event = await self._resolver.fetch_full_text(book)
            self._apply(event)
            if isinstance(event, TextLoaded) and page != self.state.current_page:
                self._apply(ShowLocalPage(page))
        except ContentUnavailableError as e:
            log.error("Error fetching content for %s: %s", self.book_id, e)
            self.content_error = str(e) or "Failed to load content"
            if book.summary:
                self._apply(TextLoaded(book.summary))
        finally:
            self.loading_content = False
            self._changed()

    async def _fetch(self, page: int) -> None:
        if self._closed:
            return
        if self.state.mode is not Mode.LOCAL:
            await self.load_content(page)
            return
        # Large local book: ask the server for the page, keep local mode.
        try:
            event = await self._resolver.fetch_page(
                self.book_id, page, self.state.words_per_page
            )
        except ContentUnavailableError as e:
            log.info("Server page %d unavailable (%s); slicing locally", page, e)
            self._apply(ShowLocalPage(page))
            return
        self._apply(event)

    # ── Navigation ─────────────────────────────

    async def go_to_page(self, page: int) -> None:
        if self._closed:
            return
        step = self._apply(GoToPage(page))
        self.dock.show_temporarily()
        if step.fetch_page is not None:
            await self._fetch(step.fetch_page)

    def request_page(self, page: int) -> None:
        """Fire-and-forget navigation for timer callbacks and key handlers."""
        if self._closed:
            return
        task = asyncio.get_running_loop().create_task(self.go_to_page(page))
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            log.error("Navigation task failed", exc_info=task.exception())

    async def first_page(self) -> None:
        await self.go_to_page(first_page_event().page)

    async def last_page(self) -> None:
        await self.go_to_page(last_page_event(self.state).page)

    async def next_page(self, step: int = 1) -> None:
        await self.go_to_page(relative_page_event(self.state, step).page)

    async def prev_page(self, step: int = 1) -> None:
        await self.go_to_page(relative_page_event(self.state, -step).page)

    async def submit_page_input(self, raw: str) -> bool:
        try:
            page = int(raw.strip())
        except ValueError:
            return False
        if not 1 <= page <= self.state.total_pages:
            return False
        await self.go_to_page(page)
        return True

    # ── Slider ─────────────────────────────────

    def scrub(self, delta: int) -> None:
        if not self.slider.dragging:
            self.slider.start_drag()
            self.dock.show_temporarily()
        value = self.state.clamp(self.slider.pending_value + delta)
        self.slider.change(value)
        self._changed()

    def release_scrub(self) -> None:
        if self.slider.dragging:
            self.slider.release()
            self._changed()

    # ── Settings ───────────────────────────────

    async def set_words_per_page(self, words_per_page: int) -> None:
        step = self._apply(WordsPerPageChanged(words_per_page))
        if step.fetch_page is not None:
            await self._fetch(step.fetch_page)

    async def cycle_words_per_page(self) -> int:
        options = WORDS_PER_PAGE_OPTIONS
        current = self.state.words_per_page
        nxt = next((o for o in options if o > current), options[0])
        await self.set_words_per_page(nxt)
        return nxt

    # ── Fullscreen ─────────────────────────────

    def toggle_fullscreen(self) -> bool:
        fullscreen = self.dock.toggle_fullscreen()
        self._changed()
        return fullscreen

    def interact(self) -> None:
        self.dock.show_temporarily()

    # ── Reading session & profile ──────────────

    def toggle_reading(self) -> bool:
        active = self.timer.toggle()
        self.message = "Reading started... Timer active." if active else "Reading paused"
        self._changed()
        return active

    async def save_progress(self) -> bool:
        if not self._client.is_authenticated:
            self.message = "Please log in to save progress"
            self._changed()
            return False
        if self.book is None:
            self.message = "Book data not loaded"
            self._changed()
            return False

        self.saving = True
        self._changed()
        progress = ReadingProgress(
            book_id=self.book.key,
            gutenberg_id=self.book.gutenberg_id,
            current_page=self.state.current_page,
            progress=self.state.progress,
            reading_time=self.timer.minutes,
        )
        try:
            await self._client.update_reading_progress(progress)
            self.message = "✓ Progress saved successfully! Stats updated."
            self.book_status = await self._client.get_book_status(self.book.key)
            return True
        except TomeApiError as e:
            self.message = f"Error: {e}"
            return False
        finally:
            self.saving = False
            self._changed()

    async def add_to_bookshelf(self, shelf_type: str) -> bool:
        if not self._client.is_authenticated:
            self.message = "Please log in to use bookshelf"
            self._changed()
            return False
        if self.book is None:
            self.message = "Book data not loaded"
            self._changed()
            return False
        try:
            await self._client.add_to_bookshelf(
                self.book.key, shelf_type, self.book.gutenberg_id
            )
            self.book_status = shelf_type
            self.message = f"✓ Added to {shelf_label(shelf_type)}"
            return True
        except TomeApiError as e:
            self.message = f"Error: {e}"
            return False
        finally:
            self._changed()

    # ── Export ─────────────────────────────────

    async def export_text(self, dest_dir: Optional[Path] = None) -> Optional[Path]:
        """Write the book's text to <title>.txt and return the path."""
        if self.book is None:
            self.message = "Book data not loaded"
            self._changed()
            return None

        text = ""
        if self._resolver.has_text_source(self.book):
            try:
                text = (await self._resolver.fetch_full_text(self.book)).text
            except ContentUnavailableError as e:
                log.warning("Export falling back to loaded content: %s", e)
        if not text:
            text = "\n\n".join(self.state.pages) or self.state.content
        if not text:
            self.message = "Nothing to export"
            self._changed()
            return None

        dest_dir = dest_dir or self._config.export_dir
        safe_title = re.sub(r"[^\w\- ]+", "", self.book.title).strip() or "book"
        export_path = dest_dir / f"{safe_title}.txt"
        try:
            dest_dir.mkdir(parents=True, exist_ok=True)
            export_path.write_text(text, encoding="utf-8")
        except OSError as e:
            log.error("Export failed: %s", e)
            self.message = f"Error: {e}"
            self._changed()
            return None
        self.message = f"Exported: {export_path.name}"
        self._changed()
        return export_path

    # ── Teardown ───────────────────────────────

    def close(self) -> None:
        self._closed = True
        for task in list(self._tasks):
            task.cancel()
        self.timer.close()
        self.dock.close()
        self.slider.close()
