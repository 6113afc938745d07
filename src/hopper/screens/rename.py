"""Rename screen — modal for giving an instance a new name."""

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Label

from hopper.models import name_problem
from hopper.registry import InstanceRegistry

_HINT = "Enter to rename · Escape to cancel"


class RenameScreen(ModalScreen[str | None]):
    """Modal that renames one instance of *registry*.

    The instance's pattern and placement are shown underneath the title so
    the user can see what is being renamed.  The new name is checked
    against the registry at submit time, not against a snapshot taken when
    the modal opened.  Dismisses with the new name, or None on cancel or
    when the name is left unchanged; the caller applies the edit.
    """

    BINDINGS = [
        Binding("escape", "cancel", show=False),
    ]

    def __init__(self, registry: InstanceRegistry, name: str) -> None:
        super().__init__()
        self._instance_registry = registry
        self._instance = registry.get(name)

    def compose(self) -> ComposeResult:
        name = self._instance.name
        with Vertical(id="rename-container"):
            yield Label(f"Rename  {name}", id="rename-title")
            yield Label(Text(self._instance.describe(), style="dim"), id="rename-detail")
            yield Input(value=name, id="rename-name")
            yield Label(_HINT, id="rename-hint")

    def on_mount(self) -> None:
        name_input = self.query_one("#rename-name", Input)
        name_input.focus()
        name_input.cursor_position = len(self._instance.name)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        new_name = event.value
        if new_name == self._instance.name:
            self.dismiss(None)
            return

        problem = name_problem(new_name)
        if problem is None and new_name in self._instance_registry:
            problem = f"Instance '{new_name}' already exists"
        if problem:
            self._show_error(problem)
            return

        self.dismiss(new_name)

    def _show_error(self, message: str) -> None:
        hint = self.query_one("#rename-hint", Label)
        hint.update(Text(message, style="red"))
        self.set_timer(2.0, lambda: hint.update(_HINT))

    def action_cancel(self) -> None:
        self.dismiss(None)
