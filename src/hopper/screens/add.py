"""Add screen — modal for defining a new instance."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Checkbox, Input, Label, RadioButton, RadioSet, TextArea

from hopper.errors import InvalidPatternError
from hopper.models import (
    PLACEMENT_LABELS,
    InstanceDef,
    LiteralPattern,
    PatternSpec,
    PlacementRule,
    RegexPattern,
    name_problem,
)
from hopper.text import compile_pattern

_PLACEMENT_CAPTIONS = {
    "natural": "Natural (end going forward, start going back)",
    "start": "Always at match start",
    "end": "Always at match end",
}


class AddScreen(ModalScreen[InstanceDef | None]):
    """Modal that lets the user define a named instance.

    Dismisses with a new InstanceDef on save, or None on cancel.
    Inline validation prevents blank or duplicate names, empty patterns and
    regular expressions that do not compile.

    When the "Literal strings" checkbox is ticked the regex Input is
    replaced by a TextArea taking one literal per line.  ``ctrl+w`` saves
    from anywhere in the modal.
    """

    BINDINGS = [
        Binding("escape", "cancel", show=False),
        Binding("ctrl+w", "save", show=False, priority=True),
    ]

    def __init__(self, existing_names: set[str], instance: InstanceDef | None = None) -> None:
        super().__init__()
        self._existing_names = existing_names
        self._instance = instance

    def title_text(self) -> str:
        return "Add instance"

    def compose(self) -> ComposeResult:
        instance = self._instance
        placement = instance.placement.label if instance else "natural"
        regex = ""
        literals = ""
        if instance is not None:
            if isinstance(instance.pattern, LiteralPattern):
                literals = "\n".join(instance.pattern.strings)
            else:
                regex = instance.pattern.pattern

        with Vertical(id="add-container"):
            yield Label(self.title_text(), id="add-title")
            yield Input(value=instance.name if instance else "", placeholder="name", id="add-name")
            yield Checkbox(
                "Literal strings (one per line)",
                value=bool(instance and instance.is_literal),
                id="add-literal",
            )
            yield Input(value=regex, placeholder="regular expression", id="add-regex")
            yield TextArea(literals, id="add-literals", show_line_numbers=False)
            with RadioSet(id="add-placement"):
                for label in PLACEMENT_LABELS:
                    yield RadioButton(
                        _PLACEMENT_CAPTIONS[label], value=label == placement, id=f"place-{label}"
                    )
            yield Label("", id="add-error")
            yield Label("Tab · Enter to save · Escape to cancel", id="add-hint")
            with Horizontal(id="add-buttons"):
                yield Button("Save", variant="success", id="add-save")
                yield Button("Cancel", variant="primary", id="add-cancel")

    def on_mount(self) -> None:
        self._show_literals(self.query_one("#add-literal", Checkbox).value)
        self.query_one("#add-name", Input).focus()

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        if event.checkbox.id != "add-literal":
            return
        self._show_literals(event.value)
        if event.value:
            self.query_one("#add-literals", TextArea).focus()

    def _show_literals(self, literal: bool) -> None:
        self.query_one("#add-regex", Input).display = not literal
        self.query_one("#add-literals", TextArea).display = literal
        hint = self.query_one("#add-hint", Label)
        if literal:
            hint.update("ctrl+w to save · Tab to reach buttons · Escape to cancel")
        else:
            hint.update("Tab · Enter to save · Escape to cancel")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "add-name":
            if self.query_one("#add-literal", Checkbox).value:
                self.query_one("#add-literals", TextArea).focus()
            else:
                self.query_one("#add-regex", Input).focus()
            return

        if event.input.id == "add-regex":
            self._try_save()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "add-save":
            self._try_save()
        elif event.button.id == "add-cancel":
            self.dismiss(None)

    def action_save(self) -> None:
        """Save — triggered by ctrl+w from anywhere in the modal."""
        self._try_save()

    def _placement(self) -> PlacementRule:
        index = self.query_one("#add-placement", RadioSet).pressed_index
        if index < 0:
            return PlacementRule.natural()
        return PlacementRule.from_label(PLACEMENT_LABELS[index])

    def _pattern(self) -> PatternSpec:
        if self.query_one("#add-literal", Checkbox).value:
            lines = self.query_one("#add-literals", TextArea).text.splitlines()
            return LiteralPattern(tuple(lines))
        regex = self.query_one("#add-regex", Input).value
        if not regex:
            raise InvalidPatternError("Regular expression cannot be blank")
        compile_pattern(regex)
        return RegexPattern(regex)

    def _try_save(self) -> None:
        name = self.query_one("#add-name", Input).value
        error = self.query_one("#add-error", Label)

        problem = name_problem(name)
        if problem:
            error.update(problem)
            self.query_one("#add-name", Input).focus()
            return

        if name in self._existing_names:
            error.update(f"'{name}' already exists")
            self.query_one("#add-name", Input).focus()
            return

        try:
            pattern = self._pattern()
        except InvalidPatternError as exc:
            error.update(str(exc))
            return

        self.dismiss(InstanceDef(name=name, pattern=pattern, placement=self._placement()))

    def action_cancel(self) -> None:
        self.dismiss(None)
