"""Shared fixtures for tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from tome.config import AppConfig
from tome.reader.timers import Scheduler, TimerHandle


class FakeHandle(TimerHandle):
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler(Scheduler):
    """Manual clock: callbacks only run inside advance()."""

    def __init__(self) -> None:
        self.time = 0.0
        self._queue: list[tuple[float, int, Callable[[], None], FakeHandle]] = []
        self._seq = 0

    def now(self) -> float:
        return self.time

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = FakeHandle()
        self._seq += 1
        self._queue.append((self.time + delay, self._seq, callback, handle))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for entry in self._queue if not entry[3].cancelled)

    def advance(self, seconds: float) -> None:
        target = self.time + seconds
        while True:
            due = [e for e in self._queue if not e[3].cancelled and e[0] <= target]
            if not due:
                break
            entry = min(due, key=lambda e: (e[0], e[1]))
            self._queue.remove(entry)
            self.time = entry[0]
            entry[3].cancelled = True
            entry[2]()
        self.time = target
        self._queue = [e for e in self._queue if not e[3].cancelled]


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        data_dir=tmp_path / "data",
        config_dir=tmp_path / "config",
        api_base_url="http://api.test/api",
        storage_base_url="http://storage.test/books",
        auth_token="token-123",
    )
