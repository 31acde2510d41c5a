"""Page slider that turns continuous scrubbing into a few page requests."""

from __future__ import annotations

import logging
from typing import Callable

from tome.reader.timers import Scheduler, Timer

log = logging.getLogger(__name__)


class SliderSync:
    """Two states: idle (value mirrors the page) and dragging (value is pending).

    While dragging, each change restarts a short debounce; if the drag is still
    in progress when it fires, the pending value is requested. Releasing the
    drag cancels the debounce and requests the released value once.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        navigate: Callable[[int], None],
        debounce: float = 0.3,
    ) -> None:
        self._navigate = navigate
        self._debounce = debounce
        self._timer = Timer(scheduler)
        self.dragging = False
        self.pending_value = 1

    @property
    def display_value(self) -> int:
        return self.pending_value

    def follow(self, current_page: int) -> None:
        if not self.dragging:
            self.pending_value = current_page

    def start_drag(self) -> None:
        self.dragging = True

    def change(self, value: int) -> None:
        self.pending_value = value
        self._timer.start(self._debounce, self._on_debounce)

    def _on_debounce(self) -> None:
        if self.dragging:
            log.debug("Slider settled on page %d", self.pending_value)
            self._navigate(self.pending_value)

    def release(self) -> None:
        self._timer.cancel()
        self.dragging = False
        self._navigate(self.pending_value)

    def close(self) -> None:
        self._timer.cancel()
