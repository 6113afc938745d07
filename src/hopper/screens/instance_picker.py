"""Instance picker modal — choose the active instance."""

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import ModalScreen
from textual.widgets import ListItem, ListView, Static

from hopper.constants import PICKER_HINT
from hopper.models import InstanceDef


class InstancePickerScreen(ModalScreen[str | None]):
    """Modal listing every instance in registry order.

    Each row shows the name and a dimmed summary of its pattern and
    placement.  The current selection, if still present, is pre-highlighted.
    Dismisses with the chosen name on Enter or ``None`` on Escape/q.
    """

    BINDINGS = [
        Binding("escape", "cancel", show=False),
        Binding("q", "cancel", show=False),
        Binding("j", "cursor_down", show=False),
        Binding("k", "cursor_up", show=False),
    ]

    DEFAULT_CSS = """
    InstancePickerScreen {
        align: center middle;
    }
    """

    def __init__(self, instances: list[tuple[str, InstanceDef]], current: str | None = None) -> None:
        super().__init__()
        self._names = [name for name, _ in instances]
        self._instances = instances
        self._current = current

    def compose(self) -> ComposeResult:
        items: list[ListItem] = []
        for name, instance in self._instances:
            label = Text()
            label.append("  → " if name == self._current else "    ")
            label.append(name, style="bold")
            label.append(f"  {instance.describe()}", style="dim")
            classes = "picker-item picker-active" if name == self._current else "picker-item"
            items.append(ListItem(Static(label), classes=classes))

        yield Static("  Select instance", id="picker-title")
        yield ListView(*items, id="picker-list")
        yield Static(PICKER_HINT, id="picker-hint")

    def on_mount(self) -> None:
        list_view = self.query_one("#picker-list", ListView)
        if self._current in self._names:
            list_view.index = self._names.index(self._current)
        list_view.focus()

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        index = event.list_view.index
        if index is None or not 0 <= index < len(self._names):
            return
        self.dismiss(self._names[index])

    def action_cursor_down(self) -> None:
        self.query_one("#picker-list", ListView).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one("#picker-list", ListView).action_cursor_up()

    def action_cancel(self) -> None:
        self.dismiss(None)
