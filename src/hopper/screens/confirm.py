"""Confirm screen — yes/no modal guarding instance deletion."""

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label


class ConfirmScreen(ModalScreen[bool]):
    """Modal asking the user to confirm a destructive action.

    ``detail`` is shown dimmed under the question (e.g. the instance's
    pattern).  No is focused by default; ``y``/``n`` answer directly and
    ``h``/``l`` move between the buttons.  Dismisses True on confirm.
    """

    BINDINGS = [
        Binding("escape", "cancel", show=False),
        Binding("y", "confirm", show=False),
        Binding("n", "cancel", show=False),
        Binding("h", "focus_yes", show=False),
        Binding("l", "focus_no", show=False),
    ]

    def __init__(self, message: str, detail: str = "") -> None:
        super().__init__()
        self._message = message
        self._detail = detail

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-container"):
            yield Label(self._message, id="confirm-message")
            if self._detail:
                yield Label(Text(self._detail, style="dim"), id="confirm-detail")
            with Horizontal(id="confirm-buttons"):
                yield Button("Yes", variant="error", id="confirm-yes")
                yield Button("No", variant="primary", id="confirm-no")

    def on_mount(self) -> None:
        self.query_one("#confirm-no", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm-yes")

    def action_focus_yes(self) -> None:
        self.query_one("#confirm-yes", Button).focus()

    def action_focus_no(self) -> None:
        self.query_one("#confirm-no", Button).focus()

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)
