"""Auto-hiding navigation dock for fullscreen reading."""

from __future__ import annotations

from typing import Callable, Optional

from tome.reader.timers import Scheduler, Timer


class DockAutoHide:
    """Dock is visible by default and hides after a quiet period in fullscreen.

    Outside fullscreen the dock is always visible.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        delay: float = 3.0,
        on_change: Optional[Callable[[bool], None]] = None,
    ) -> None:
        self._delay = delay
        self._on_change = on_change
        self._timer = Timer(scheduler)
        self.fullscreen = False
        self.visible = True
        self._closed = False

    def _set_visible(self, visible: bool) -> None:
        if visible != self.visible:
            self.visible = visible
            if self._on_change:
                self._on_change(visible)

    def _hide(self) -> None:
        if self.fullscreen:
            self._set_visible(False)

    def enter_fullscreen(self) -> None:
        if self._closed:
            return
        self.fullscreen = True
        self._timer.start(self._delay, self._hide)

    def exit_fullscreen(self) -> None:
        self.fullscreen = False
        self._timer.cancel()
        self._set_visible(True)

    def toggle_fullscreen(self) -> bool:
        if self.fullscreen:
            self.exit_fullscreen()
        else:
            self.enter_fullscreen()
        return self.fullscreen

    def show_temporarily(self) -> None:
        if not self.fullscreen or self._closed:
            return
        self._set_visible(True)
        self._timer.start(self._delay, self._hide)

    def close(self) -> None:
        self._closed = True
        self._timer.cancel()
