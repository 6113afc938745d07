"""Domain models."""

import re
from dataclasses import dataclass
from enum import Enum

from hopper.errors import InvalidPatternError


class Direction(Enum):
    FORWARD = 1
    BACKWARD = -1

    @property
    def sign(self) -> int:
        return self.value

    def reversed(self) -> "Direction":
        return Direction.BACKWARD if self is Direction.FORWARD else Direction.FORWARD


@dataclass(frozen=True)
class RegexPattern:
    """A single regular expression, handed to the matcher as-is."""

    pattern: str

    def __post_init__(self) -> None:
        if not self.pattern:
            raise InvalidPatternError("Regular expression cannot be empty")

    def to_regex(self) -> str:
        return self.pattern


@dataclass(frozen=True)
class LiteralPattern:
    """One or more literal strings, matched as a single alternation.

    Empty strings are dropped and duplicates removed while keeping the
    first occurrence's position, so ``strings`` is always an ordered set
    with at least one member.
    """

    strings: tuple[str, ...]

    def __post_init__(self) -> None:
        cleaned = tuple(dict.fromkeys(s for s in self.strings if s))
        if not cleaned:
            raise InvalidPatternError("At least one non-empty literal string is required")
        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "strings", cleaned)

    def to_regex(self) -> str:
        """Return an alternation matching any one of the strings.

        Longer strings are tried first so that a literal wins over its own
        prefix at the same position.
        """
        ordered = sorted(self.strings, key=len, reverse=True)
        return "|".join(re.escape(s) for s in ordered)


PatternSpec = RegexPattern | LiteralPattern


@dataclass(frozen=True)
class PlacementRule:
    """Where the cursor rests relative to a matched span.

    - ``adjust=False``: natural search convention (match end going forward,
      match start going backward).
    - ``adjust=True, at_end=False``: always the match start.
    - ``adjust=True, at_end=True``: always the match end.
    """

    adjust: bool = False
    at_end: bool = False

    @classmethod
    def natural(cls) -> "PlacementRule":
        return cls(adjust=False, at_end=False)

    @classmethod
    def start(cls) -> "PlacementRule":
        return cls(adjust=True, at_end=False)

    @classmethod
    def end(cls) -> "PlacementRule":
        return cls(adjust=True, at_end=True)

    @classmethod
    def from_label(cls, label: str) -> "PlacementRule":
        try:
            return _PLACEMENTS[label]
        except KeyError:
            raise ValueError(f"Unknown placement '{label}' (expected natural, start or end)") from None

    @property
    def label(self) -> str:
        if not self.adjust:
            return "natural"
        return "end" if self.at_end else "start"

    def lands_on_start(self, direction: Direction) -> bool:
        """Return True if a hop in *direction* leaves the cursor on a match start."""
        if not self.adjust:
            return direction is Direction.BACKWARD
        return not self.at_end


_PLACEMENTS = {
    "natural": PlacementRule.natural(),
    "start": PlacementRule.start(),
    "end": PlacementRule.end(),
}

PLACEMENT_LABELS: tuple[str, ...] = tuple(_PLACEMENTS)


@dataclass(frozen=True)
class InstanceDef:
    """A named pattern plus a cursor-placement rule."""

    name: str
    pattern: PatternSpec
    placement: PlacementRule = PlacementRule()

    def __post_init__(self) -> None:
        if not self.name:
            raise InvalidPatternError("Instance name cannot be empty")

    @property
    def is_literal(self) -> bool:
        return isinstance(self.pattern, LiteralPattern)

    def describe(self) -> str:
        """Return a one-line summary used in pickers and listings."""
        if isinstance(self.pattern, LiteralPattern):
            body = ", ".join(repr(s) for s in self.pattern.strings)
            return f"literal [{body}] · {self.placement.label}"
        return f"regex /{self.pattern.pattern}/ · {self.placement.label}"


def name_problem(name: str) -> str | None:
    """Return why *name* is unfit as typed by a user, or None.

    Names are stored exactly as given, so a name with surrounding
    whitespace is refused rather than silently trimmed.
    """
    if not name.strip():
        return "Name cannot be blank"
    if name != name.strip():
        return "Name cannot start or end with whitespace"
    return None


@dataclass(frozen=True)
class MatchRange:
    """Half-open span ``[start, end)`` of a single match."""

    start: int
    end: int


@dataclass(frozen=True)
class Found:
    """The hop landed on a match: ``index`` of ``total`` counted from the start."""

    index: int
    total: int


@dataclass(frozen=True)
class AtBoundary:
    """No further match, and the cursor already rests on the first/last one."""

    which: str  # "first" or "last"
    total: int


@dataclass(frozen=True)
class NoMatch:
    """No further match and the cursor is not on a boundary occurrence."""

    direction: Direction
    total: int


Report = Found | AtBoundary | NoMatch


@dataclass(frozen=True)
class HopResult:
    instance: str
    position: int
    report: Report

    @property
    def moved(self) -> bool:
        return isinstance(self.report, Found)

    @property
    def message(self) -> str:
        report = self.report
        if isinstance(report, Found):
            return f"{self.instance}: instance {report.index} of {report.total}"
        if isinstance(report, AtBoundary):
            return (
                f"{self.instance}: this is the {report.which} instance "
                f"({report.total}/{report.total})"
            )
        side = "next" if report.direction is Direction.FORWARD else "previous"
        return f"{self.instance}: no {side} instance (total {report.total})"
