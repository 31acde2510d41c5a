from __future__ import annotations

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label


class OpenBookScreen(ModalScreen[str | None]):
    """Ask for a book id or Gutenberg id."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def compose(self) -> ComposeResult:
        with Vertical(id="open-book-dialog"):
            yield Label("Open a book by id or Gutenberg id", id="open-book-title")
            yield Input(placeholder="e.g. 1342", id="open-book-input")
            with Horizontal(id="open-book-buttons"):
                yield Button("Open", variant="primary", id="ob-open")
                yield Button("Cancel [Esc]", variant="default", id="ob-cancel")

    def on_mount(self) -> None:
        self.query_one("#open-book-input", Input).focus()

    def _submit(self) -> None:
        value = self.query_one("#open-book-input", Input).value.strip()
        if value:
            self.dismiss(value)

    @on(Input.Submitted, "#open-book-input")
    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "ob-open":
            self._submit()
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)
