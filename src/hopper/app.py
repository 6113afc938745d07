"""Main application entry point."""

from collections.abc import Callable
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, Static

from hopper.config import JsonRegistryStore, load_theme, save_theme
from hopper.constants import APP_TITLE
from hopper.errors import HopperError
from hopper.models import Direction, HopResult, InstanceDef
from hopper.navigation import NavigationEngine
from hopper.registry import InstanceRegistry
from hopper.screens.add import AddScreen
from hopper.screens.confirm import ConfirmScreen
from hopper.screens.edit import EditScreen
from hopper.screens.help import HelpScreen
from hopper.screens.instance_picker import InstancePickerScreen
from hopper.screens.rename import RenameScreen
from hopper.selection import SelectionState
from hopper.text import BufferCursor
from hopper.widgets.text_view import TextView


class HopperApp(App):
    """hopper — hop between occurrences of named search instances."""

    CSS_PATH = "app.tcss"
    TITLE = APP_TITLE

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("?", "toggle_help", "Help"),
        Binding("n", "hop_next", "Next"),
        Binding("N", "hop_previous", "Prev"),
        Binding("p", "hop_previous", show=False),
        Binding("s", "select_instance", "Select"),
        Binding("o", "add_instance", "Add"),
        Binding("i", "edit_instance", "Edit"),
        Binding("r", "rename_instance", "Rename"),
        Binding("d", "delete_instance", "dd Delete"),
    ]

    def __init__(
        self,
        text: str,
        registry: InstanceRegistry | None = None,
        selection: SelectionState | None = None,
        source_name: str = "",
    ) -> None:
        super().__init__()
        self._document = text.replace("\r\n", "\n")
        self._instances = registry if registry is not None else InstanceRegistry()
        self._active = selection or SelectionState()
        self._source_name = source_name or "untitled"
        self._navigator = NavigationEngine(self._instances, self._active)
        self._d_pressed: bool = False
        self.last_result: HopResult | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield TextView(self._document, id="text")
        yield Static("", id="status")
        yield Footer()

    def on_mount(self) -> None:
        saved_theme = load_theme()
        if saved_theme:
            self.theme = saved_theme
        self._update_subtitle()
        self._get_view().focus()

    def watch_theme(self, theme: str) -> None:
        """Persist theme changes whenever the theme is changed."""
        save_theme(theme)

    @property
    def instance_registry(self) -> InstanceRegistry:
        return self._instances

    @property
    def selection_state(self) -> SelectionState:
        return self._active

    def _get_view(self) -> TextView:
        return self.query_one("#text", TextView)

    def _set_status(self, message: str) -> None:
        self.query_one("#status", Static).update(message)

    def _update_subtitle(self) -> None:
        active = self._active.name if self._active.is_valid(self._instances) else None
        self.sub_title = f"[{active or 'no instance'}] · {self._source_name}"

    def _focus_view(self) -> None:
        self._get_view().focus()

    def _with_selection(self, then: Callable[[str], None]) -> None:
        """Run *then* with the active instance name, opening the picker if needed.

        This is the TUI's chooser: the picker is a modal answered through a
        callback, so the selection is settled here before the navigation
        engine runs, and the engine is built without a chooser of its own.
        """
        if self._active.is_valid(self._instances):
            then(self._active.name)  # type: ignore[arg-type]
            return
        if len(self._instances) == 0:
            self.notify("No instances defined, press o to add one", severity="warning", timeout=4)
            return

        def on_pick(name: str | None) -> None:
            if name is None:
                self._focus_view()
                return
            self._active.set(name, self._instances)
            self._update_subtitle()
            then(name)

        self.push_screen(
            InstancePickerScreen(self._instances.list_instances(), self._active.name), on_pick
        )

    # ------------------------------------------------------------------
    # Hops
    # ------------------------------------------------------------------

    def action_hop_next(self) -> None:
        self._with_selection(lambda _name: self._apply_hop(1))

    def action_hop_previous(self) -> None:
        self._with_selection(lambda _name: self._apply_hop(-1))

    def _apply_hop(self, count: int) -> None:
        view = self._get_view()
        cursor = BufferCursor(view.text, view.char_offset)
        try:
            result = self._navigator.hop(cursor, Direction.FORWARD, count)
        except HopperError as exc:
            self.notify(f"Hop failed: {exc}", severity="error", timeout=8)
            return
        self.last_result = result
        view.move_to_offset(result.position)
        self._set_status(result.message)
        if not result.moved:
            self.notify(result.message, timeout=2)
        self._focus_view()

    # ------------------------------------------------------------------
    # Registry maintenance
    # ------------------------------------------------------------------

    def action_toggle_help(self) -> None:
        active = self._active.name if self._active.is_valid(self._instances) else None
        self.push_screen(HelpScreen(active))

    def action_select_instance(self) -> None:
        """Open the picker and make the chosen instance active."""
        if len(self._instances) == 0:
            self.notify("No instances defined, press o to add one", severity="warning", timeout=4)
            return

        def on_pick(name: str | None) -> None:
            if name is not None:
                self._active.set(name, self._instances)
                self._update_subtitle()
                self.notify(f"Active instance: {name}", timeout=2)
            self._focus_view()

        self.push_screen(
            InstancePickerScreen(self._instances.list_instances(), self._active.name), on_pick
        )

    def action_add_instance(self) -> None:
        """Open the add modal; the new instance becomes the active one."""
        existing = set(self._instances.names())

        def on_save(instance: InstanceDef | None) -> None:
            if instance is not None:
                try:
                    self._instances.add(instance.name, instance.pattern, instance.placement)
                except HopperError as exc:
                    self.notify(f"Add failed: {exc}", severity="error", timeout=8)
                else:
                    self._active.set(instance.name, self._instances)
                    self._update_subtitle()
                    self.notify(f"Added {instance.name}", timeout=2)
            self._focus_view()

        self.push_screen(AddScreen(existing_names=existing), on_save)

    def action_edit_instance(self) -> None:
        self._with_selection(self._open_edit)

    def _open_edit(self, name: str) -> None:
        instance = self._instances.get(name)
        existing = set(self._instances.names())

        def on_save(updated: InstanceDef | None) -> None:
            if updated is not None and updated != instance:
                self._apply_edit(name, updated)
            self._focus_view()

        self.push_screen(EditScreen(instance, existing), on_save)

    def _apply_edit(self, name: str, updated: InstanceDef) -> None:
        try:
            self._instances.edit(name, updated.name, updated.pattern, updated.placement)
        except HopperError as exc:
            self.notify(f"Edit failed: {exc}", severity="error", timeout=8)
            return
        if self._active.name == name:
            self._active.set(updated.name, self._instances)
        self._update_subtitle()
        self.notify(f"Updated {updated.name}", timeout=2)

    def action_rename_instance(self) -> None:
        self._with_selection(self._open_rename)

    def _open_rename(self, name: str) -> None:
        def on_rename(new_name: str | None) -> None:
            if new_name is not None:
                current = self._instances.get(name)
                self._apply_edit(name, InstanceDef(new_name, current.pattern, current.placement))
            self._focus_view()

        self.push_screen(RenameScreen(self._instances, name), on_rename)

    def action_delete_instance(self) -> None:
        """Implement vim-style dd: delete the active instance on second d press.

        The selection is left pointing at the deleted name; the next hop
        notices it is stale and opens the picker.
        """
        if not self._d_pressed:
            self._d_pressed = True
            self.set_timer(0.5, self._reset_d)
            return
        self._d_pressed = False
        self._with_selection(self._confirm_delete)

    def _reset_d(self) -> None:
        self._d_pressed = False

    def _confirm_delete(self, name: str) -> None:
        detail = self._instances.get(name).describe()

        def on_confirm(confirmed: bool | None) -> None:
            if confirmed:
                try:
                    self._instances.delete(name)
                except HopperError as exc:
                    self.notify(f"Delete failed: {exc}", severity="error", timeout=8)
                else:
                    self._update_subtitle()
                    self.notify(f"Deleted {name}", timeout=2)
            self._focus_view()

        self.push_screen(ConfirmScreen(f"Delete  {name}?", detail), on_confirm)


def run(path: Path, store: JsonRegistryStore | None = None) -> None:
    """Open *path* in the TUI with the registry from *store*."""
    registry = InstanceRegistry.from_store(store or JsonRegistryStore())
    HopperApp(path.read_text(), registry, source_name=path.name).run()
