"""Command-line interface: maintain instances and hop through files."""

import logging
from pathlib import Path
from typing import NoReturn

import typer
from rich.logging import RichHandler

from hopper.config import ConfigError, JsonRegistryStore
from hopper.errors import ChooserCancelledError, HopperError
from hopper.models import (
    PLACEMENT_LABELS,
    Direction,
    LiteralPattern,
    PatternSpec,
    PlacementRule,
    RegexPattern,
    name_problem,
)
from hopper.navigation import NavigationEngine
from hopper.registry import InstanceRegistry
from hopper.selection import SelectionState
from hopper.text import BufferCursor

app = typer.Typer(
    help="Hop between occurrences of named search instances",
    no_args_is_help=True,
)

# Module-level defaults for Typer options
_REGEX_HELP = "Regular expression to search for"
_LITERAL_HELP = "Literal string to search for (repeatable)"
_PLACE_HELP = f"Cursor placement after a match: {', '.join(PLACEMENT_LABELS)}"


class _State:
    store: JsonRegistryStore = JsonRegistryStore()


_state = _State()


class TerminalChooser:
    """Chooser that prints a numbered menu and reads the pick from stdin."""

    def pick(self, candidates: list[str]) -> str:
        for number, name in enumerate(candidates, start=1):
            typer.echo(f"  {number}) {name}")
        try:
            answer = typer.prompt("Instance", default="1")
        except typer.Abort:
            raise ChooserCancelledError("No instance chosen") from None
        if answer in candidates:
            return answer
        if answer.isdigit() and 1 <= int(answer) <= len(candidates):
            return candidates[int(answer) - 1]
        raise ChooserCancelledError(f"'{answer}' is not one of the offered instances")


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


def _registry() -> InstanceRegistry:
    try:
        return InstanceRegistry.from_store(_state.store)
    except ConfigError as exc:
        _fail(str(exc))


def _pattern(regex: str | None, literals: list[str] | None) -> PatternSpec | None:
    if regex is not None and literals:
        _fail("Use either --regex or --literal, not both")
    if regex is not None:
        return RegexPattern(regex)
    if literals:
        return LiteralPattern(tuple(literals))
    return None


def _name(name: str) -> str:
    problem = name_problem(name)
    if problem:
        _fail(f"{problem}: {name!r}")
    return name


def _placement(label: str) -> PlacementRule:
    try:
        return PlacementRule.from_label(label)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.callback()
def main(
    config: Path | None = typer.Option(None, "--config", help="Path to instances.json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )
    _state.store = JsonRegistryStore(config)


@app.command("list")
def list_instances() -> None:
    """List all instances in registry order."""
    registry = _registry()
    if not len(registry):
        typer.echo("No instances defined")
        return
    for name, instance in registry.list_instances():
        typer.echo(f"{name}\t{instance.describe()}")


@app.command()
def add(
    name: str = typer.Argument(..., help="Unique instance name"),
    regex: str | None = typer.Option(None, "--regex", "-e", help=_REGEX_HELP),
    literal: list[str] | None = typer.Option(None, "--literal", "-l", help=_LITERAL_HELP),
    place: str = typer.Option("natural", "--place", "-p", help=_PLACE_HELP),
) -> None:
    """Define a new instance."""
    registry = _registry()
    try:
        pattern = _pattern(regex, literal)
        if pattern is None:
            _fail("A pattern is required: pass --regex or --literal")
        registry.add(_name(name), pattern, _placement(place))  # type: ignore[arg-type]
    except HopperError as exc:
        _fail(str(exc))
    typer.echo(f"Added {name}")


@app.command()
def edit(
    name: str = typer.Argument(..., help="Instance to edit"),
    rename: str | None = typer.Option(None, "--rename", help="New name"),
    regex: str | None = typer.Option(None, "--regex", "-e", help=_REGEX_HELP),
    literal: list[str] | None = typer.Option(None, "--literal", "-l", help=_LITERAL_HELP),
    place: str | None = typer.Option(None, "--place", "-p", help=_PLACE_HELP),
) -> None:
    """Change an instance's name, pattern or placement. Unset options are kept."""
    registry = _registry()
    try:
        current = registry.get(name)
        pattern = _pattern(regex, literal) or current.pattern
        placement = _placement(place) if place is not None else current.placement
        new_name = _name(rename) if rename is not None else name
        registry.edit(name, new_name, pattern, placement)
    except HopperError as exc:
        _fail(str(exc))
    typer.echo(f"Updated {new_name}")


@app.command()
def delete(
    name: str = typer.Argument(..., help="Instance to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete an instance after confirmation."""
    registry = _registry()
    try:
        instance = registry.get(name)
        if not yes:
            typer.confirm(f"Delete {name} ({instance.describe()})?", abort=True)
        registry.delete(name)
    except HopperError as exc:
        _fail(str(exc))
    typer.echo(f"Deleted {name}")


@app.command()
def hop(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Text file to search"),
    instance: str | None = typer.Option(None, "--instance", "-i", help="Instance to use"),
    offset: int = typer.Option(0, "--offset", "-o", help="Starting cursor offset"),
    count: int = typer.Option(1, "--count", "-n", help="Occurrences to hop (negative goes back)"),
    backward: bool = typer.Option(False, "--backward", "-b", help="Hop backward"),
) -> None:
    """Hop from OFFSET to the next (or previous) occurrence and print where it landed."""
    registry = _registry()
    selection = SelectionState()
    engine = NavigationEngine(registry, selection, TerminalChooser())
    cursor = BufferCursor(file.read_text(), offset)
    direction = Direction.BACKWARD if backward else Direction.FORWARD
    try:
        if instance is not None:
            selection.set(instance, registry)
        result = engine.hop(cursor, direction, count)
    except HopperError as exc:
        _fail(str(exc))
    typer.echo(result.message)
    typer.echo(f"offset: {result.position}")


@app.command()
def tui(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Text file to browse"),
) -> None:
    """Browse FILE in the interactive hopper TUI."""
    from hopper.app import run

    try:
        run(file, _state.store)
    except ConfigError as exc:
        _fail(str(exc))


if __name__ == "__main__":
    app()
