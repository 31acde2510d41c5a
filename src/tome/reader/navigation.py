"""Pagination state machine for the reader.

All transitions are pure: ``transition(state, event)`` returns a ``Step`` with
the next state and the side effects the caller has to perform (fetch a page
from the server, scroll the viewport back to the top). Nothing here performs
I/O, which keeps the rules testable without a UI or a network.

Two content modes exist. ``SERVER`` books are addressed one page at a time
through the backend's content endpoint. ``LOCAL`` books were downloaded as a
single text blob and paginated here; the switch to ``LOCAL`` happens once per
load and is never undone, even if a later server request succeeds.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, replace
from typing import Optional, Union

from tome.reader.paginator import paginate

LARGE_BOOK_PAGES = 50


class Mode(enum.Enum):
    SERVER = "server"
    LOCAL = "local"


@dataclass(frozen=True)
class PaginationState:
    current_page: int = 1
    total_pages: int = 0  # 0 = unknown / not loaded
    words_per_page: int = 300
    pages: tuple[str, ...] = ()  # only populated in LOCAL mode
    mode: Optional[Mode] = None
    content: str = ""

    def clamp(self, page: int) -> int:
        return max(1, min(page, max(self.total_pages, 1)))

    @property
    def progress(self) -> int:
        return progress_percent(self.current_page, self.total_pages)


# ── Events ─────────────────────────────────────


@dataclass(frozen=True)
class GoToPage:
    page: int


@dataclass(frozen=True)
class ServerPageLoaded:
    content: str
    current_page: int
    total_pages: int


@dataclass(frozen=True)
class TextLoaded:
    text: str


@dataclass(frozen=True)
class ShowLocalPage:
    page: int


@dataclass(frozen=True)
class WordsPerPageChanged:
    words_per_page: int


Event = Union[GoToPage, ServerPageLoaded, TextLoaded, ShowLocalPage, WordsPerPageChanged]


@dataclass(frozen=True)
class Step:
    state: PaginationState
    fetch_page: Optional[int] = None
    reset_scroll: bool = False


# ── Transitions ────────────────────────────────


def progress_percent(current_page: int, total_pages: int) -> int:
    """Percent read, rounded half up; 0 when the page count is unknown."""
    if total_pages <= 0:
        return 0
    return int(math.floor(current_page / total_pages * 100 + 0.5))


def routes_to_server(state: PaginationState, threshold: int = LARGE_BOOK_PAGES) -> bool:
    if state.mode is Mode.SERVER:
        return True
    return state.mode is Mode.LOCAL and state.total_pages > threshold


def _slice(state: PaginationState, page: int) -> PaginationState:
    page = state.clamp(page)
    content = state.pages[page - 1] if page <= len(state.pages) else ""
    return replace(state, current_page=page, content=content)


def _go_to(state: PaginationState, requested: int, threshold: int) -> Step:
    if state.total_pages == 0:
        return Step(state)
    page = state.clamp(requested)
    if page == state.current_page:
        return Step(state)
    if routes_to_server(state, threshold):
        return Step(state, fetch_page=page, reset_scroll=True)
    return Step(_slice(state, page), reset_scroll=True)


def _server_loaded(state: PaginationState, event: ServerPageLoaded) -> Step:
    if state.mode is Mode.LOCAL:
        # Sticky fallback: keep local pages and their count.
        return Step(
            replace(
                state,
                current_page=state.clamp(event.current_page),
                content=event.content,
            )
        )
    total = max(event.total_pages, 0)
    current = max(1, min(event.current_page, max(total, 1)))
    return Step(
        replace(
            state,
            mode=Mode.SERVER,
            pages=(),
            total_pages=total,
            current_page=current,
            content=event.content,
        )
    )


def _repaginate(state: PaginationState, text: str, words_per_page: int) -> PaginationState:
    pages = tuple(paginate(text, words_per_page))
    total = len(pages)
    current = max(1, min(state.current_page, max(total, 1)))
    return replace(
        state,
        mode=Mode.LOCAL,
        words_per_page=words_per_page,
        pages=pages,
        total_pages=total,
        current_page=current,
        content=pages[current - 1] if pages else "",
    )


def transition(
    state: PaginationState, event: Event, threshold: int = LARGE_BOOK_PAGES
) -> Step:
    if isinstance(event, GoToPage):
        return _go_to(state, event.page, threshold)

    if isinstance(event, ServerPageLoaded):
        return _server_loaded(state, event)

    if isinstance(event, TextLoaded):
        return Step(_repaginate(state, event.text, state.words_per_page))

    if isinstance(event, ShowLocalPage):
        if state.mode is not Mode.LOCAL or not state.pages:
            return Step(state)
        return Step(_slice(state, event.page), reset_scroll=True)

    if isinstance(event, WordsPerPageChanged):
        if event.words_per_page < 1 or event.words_per_page == state.words_per_page:
            return Step(state)
        if state.mode is Mode.LOCAL:
            text = " ".join(state.pages)
            return Step(_repaginate(state, text, event.words_per_page))
        new_state = replace(state, words_per_page=event.words_per_page)
        if state.mode is Mode.SERVER:
            return Step(new_state, fetch_page=state.current_page)
        return Step(new_state)

    raise TypeError(f"Unknown pagination event: {event!r}")


# ── Convenience moves ──────────────────────────


def first_page() -> GoToPage:
    return GoToPage(1)


def last_page(state: PaginationState) -> GoToPage:
    return GoToPage(state.total_pages)


def relative_page(state: PaginationState, delta: int) -> GoToPage:
    return GoToPage(state.current_page + delta)
