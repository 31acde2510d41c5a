"""Reading-time accrual while the reading toggle is on."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from tome.reader.timers import Scheduler, Timer

log = logging.getLogger(__name__)


class ReadingTimer:
    """Accrues whole minutes on a recurring tick while active.

    Each tick adds the whole minutes elapsed since the last rebase and moves
    the rebase point forward by those minutes, so a partial minute carries
    over to the next tick. Pausing stops the tick; nothing accrues until
    the timer is toggled on again.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        tick: float = 60.0,
        on_tick: Optional[Callable[[int], None]] = None,
    ) -> None:
        self._scheduler = scheduler
        self._tick = tick
        self._on_tick = on_tick
        self._timer = Timer(scheduler)
        self.active = False
        self.minutes = 0
        self.started_at: Optional[float] = None

    def toggle(self) -> bool:
        if self.active:
            self.pause()
        else:
            self.resume()
        return self.active

    def resume(self) -> None:
        if self.active:
            return
        self.active = True
        self.started_at = self._scheduler.now()
        self._schedule()

    def pause(self) -> None:
        self.active = False
        self.started_at = None
        self._timer.cancel()

    def _schedule(self) -> None:
        self._timer.start(self._tick, self._on_timer)

    def _on_timer(self) -> None:
        if not self.active or self.started_at is None:
            return
        now = self._scheduler.now()
        elapsed = int((now - self.started_at) // 60)
        self.minutes += elapsed
        self.started_at += elapsed * 60
        log.debug("Reading tick: +%d min (total %d)", elapsed, self.minutes)
        if self._on_tick:
            self._on_tick(self.minutes)
        self._schedule()

    def close(self) -> None:
        self.pause()
