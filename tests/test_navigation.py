"""Tests for the pagination state machine."""

from __future__ import annotations

import pytest

from tome.reader.navigation import (
    GoToPage,
    Mode,
    PaginationState,
    ServerPageLoaded,
    ShowLocalPage,
    TextLoaded,
    WordsPerPageChanged,
    first_page,
    last_page,
    progress_percent,
    relative_page,
    transition,
)


def _local(total: int, current: int = 1) -> PaginationState:
    text = " ".join(f"w{i}" for i in range(total))
    state = transition(PaginationState(words_per_page=1), TextLoaded(text)).state
    if current != 1:
        state = transition(state, ShowLocalPage(current)).state
    return state


def _server(total: int, current: int = 1) -> PaginationState:
    return transition(
        PaginationState(), ServerPageLoaded(f"page {current}", current, total)
    ).state


class TestGoToPage:
    def test_clamps_above_range_local(self):
        state = _local(10)
        step = transition(state, GoToPage(999))
        assert step.state.current_page == 10
        assert step.state.content == "w9"
        assert step.fetch_page is None
        assert step.reset_scroll is True

    def test_clamps_below_range(self):
        state = _local(10, current=5)
        step = transition(state, GoToPage(-40))
        assert step.state.current_page == 1

    def test_clamps_server_fetch(self):
        step = transition(_server(10), GoToPage(999))
        assert step.fetch_page == 10
        assert step.state.current_page == 1

    @pytest.mark.parametrize("requested", [-1000, -1, 0, 1, 2, 5, 9, 10, 11, 10**6])
    def test_always_in_range(self, requested: int):
        step = transition(_local(10, current=3), GoToPage(requested))
        assert 1 <= step.state.current_page <= 10
        assert 1 <= (step.fetch_page or 1) <= 10

    def test_no_pages_is_noop(self):
        state = PaginationState()
        step = transition(state, GoToPage(5))
        assert step.state == state
        assert step.fetch_page is None
        assert step.reset_scroll is False

    def test_current_page_is_noop(self):
        state = _server(10, current=4)
        step = transition(state, GoToPage(4))
        assert step.fetch_page is None
        assert step.state is state
        assert transition(step.state, GoToPage(4)).fetch_page is None

    def test_clamped_to_current_is_noop(self):
        state = _server(10, current=10)
        assert transition(state, GoToPage(11)).fetch_page is None

    def test_server_mode_fetches(self):
        step = transition(_server(10), GoToPage(3))
        assert step.fetch_page == 3
        assert step.reset_scroll is True


class TestLargeBookThreshold:
    def test_fifty_pages_slices_locally(self):
        step = transition(_local(50), GoToPage(20))
        assert step.fetch_page is None
        assert step.state.current_page == 20
        assert step.state.content == "w19"

    def test_fifty_one_pages_goes_to_server(self):
        step = transition(_local(51), GoToPage(20))
        assert step.fetch_page == 20
        assert step.state.current_page == 1

    def test_custom_threshold(self):
        step = transition(_local(20), GoToPage(5), threshold=10)
        assert step.fetch_page == 5


class TestServerPageLoaded:
    def test_resolves_server_mode(self):
        step = transition(PaginationState(), ServerPageLoaded("hello", 2, 30))
        assert step.state.mode is Mode.SERVER
        assert step.state.current_page == 2
        assert step.state.total_pages == 30
        assert step.state.content == "hello"
        assert step.state.pages == ()

    def test_local_fallback_is_sticky(self):
        state = _local(60)
        step = transition(state, ServerPageLoaded("server text", 7, 60))
        assert step.state.mode is Mode.LOCAL
        assert step.state.current_page == 7
        assert step.state.content == "server text"
        assert len(step.state.pages) == 60

    def test_current_page_clamped(self):
        step = transition(PaginationState(), ServerPageLoaded("x", 0, 0))
        assert step.state.current_page == 1
        assert step.state.total_pages == 0


class TestTextLoaded:
    def test_local_pagination(self):
        state = transition(
            PaginationState(words_per_page=3), TextLoaded("a b c d e f g")
        ).state
        assert state.mode is Mode.LOCAL
        assert state.pages == ("a b c", "d e f", "g")
        assert state.total_pages == 3
        assert state.content == "a b c"

    def test_empty_text(self):
        state = transition(PaginationState(), TextLoaded("")).state
        assert state.mode is Mode.LOCAL
        assert state.total_pages == 0
        assert state.current_page == 1
        assert state.content == ""


class TestShowLocalPage:
    def test_ignores_threshold(self):
        step = transition(_local(80), ShowLocalPage(70))
        assert step.state.current_page == 70
        assert step.state.content == "w69"

    def test_noop_in_server_mode(self):
        state = _server(10)
        assert transition(state, ShowLocalPage(3)).state is state


class TestWordsPerPageChanged:
    def test_local_repaginates(self):
        state = transition(
            PaginationState(words_per_page=3), TextLoaded("a b c d e f g")
        ).state
        state = transition(state, GoToPage(3)).state
        step = transition(state, WordsPerPageChanged(2))
        assert step.state.pages == ("a b", "c d", "e f", "g")
        assert step.state.total_pages == 4
        assert step.state.current_page == 3
        assert step.state.content == "e f"
        assert step.fetch_page is None

    def test_local_clamps_current_page(self):
        state = transition(
            PaginationState(words_per_page=1), TextLoaded("a b c d e f g")
        ).state
        state = transition(state, GoToPage(7)).state
        step = transition(state, WordsPerPageChanged(3))
        assert step.state.total_pages == 3
        assert step.state.current_page == 3

    def test_server_refetches_current(self):
        step = transition(_server(10, current=4), WordsPerPageChanged(400))
        assert step.state.words_per_page == 400
        assert step.fetch_page == 4

    def test_same_value_is_noop(self):
        state = _server(10)
        assert transition(state, WordsPerPageChanged(300)).fetch_page is None


class TestConvenienceMoves:
    def test_moves_route_through_go_to_page(self):
        state = _local(30, current=5)
        assert first_page() == GoToPage(1)
        assert last_page(state) == GoToPage(30)
        assert relative_page(state, 10) == GoToPage(15)
        assert relative_page(state, -10) == GoToPage(-5)
        assert transition(state, relative_page(state, -10)).state.current_page == 1


class TestProgressPercent:
    def test_quarter(self):
        assert progress_percent(25, 100) == 25

    def test_unknown_total(self):
        assert progress_percent(1, 0) == 0

    def test_rounds_half_up(self):
        assert progress_percent(1, 8) == 13
        assert progress_percent(1, 3) == 33

    def test_state_property(self):
        assert _local(4, current=2).progress == 50
