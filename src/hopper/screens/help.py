"""Help overlay screen."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Static

from hopper.constants import HELP_TEXT


class HelpScreen(ModalScreen):
    """Modal overlay listing key bindings and the active instance."""

    BINDINGS = [
        Binding("escape", "dismiss", show=False),
        Binding("?", "dismiss", show=False),
        Binding("q", "dismiss", show=False),
    ]

    def __init__(self, active: str | None = None) -> None:
        super().__init__()
        self._active = active

    def compose(self) -> ComposeResult:
        active = self._active or "none (press s to select)"
        yield Container(
            Static(f" Active instance: {active}", id="help-active", markup=False),
            Static(HELP_TEXT, id="help-text"),
            id="help-container",
        )

    def on_click(self) -> None:
        """Dismiss on any click outside the help box."""
        self.dismiss()
