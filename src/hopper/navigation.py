"""Hop navigation: find the next/previous occurrence of the active instance.

A hop resolves the active instance, searches for the requested occurrence
through a ``TextCursor``, places the cursor according to the instance's
placement rule and reports where it landed:

- ``Found(index, total)`` when the cursor moved to a match,
- ``AtBoundary(which, total)`` when there is no further match but the
  cursor already rests on the first/last one,
- ``NoMatch(direction, total)`` otherwise.
"""

import logging

from hopper.constants import LOOKBACK_LIMIT
from hopper.models import (
    AtBoundary,
    Direction,
    Found,
    HopResult,
    InstanceDef,
    NoMatch,
    PlacementRule,
)
from hopper.registry import InstanceRegistry
from hopper.selection import Chooser, SelectionState
from hopper.text import TextCursor

logger = logging.getLogger(__name__)


class NavigationEngine:
    """Stateless hop algorithm bound to a registry and a selection pointer."""

    def __init__(
        self,
        registry: InstanceRegistry,
        selection: SelectionState,
        chooser: Chooser | None = None,
        lookback: int = LOOKBACK_LIMIT,
    ) -> None:
        self._registry = registry
        self._selection = selection
        self._chooser = chooser
        self._lookback = lookback

    def active_instance(self) -> InstanceDef:
        """Resolve the selection (asking the chooser if needed) and fetch it."""
        name = self._selection.resolve(self._registry, self._chooser)
        return self._registry.get(name)

    def hop(
        self,
        cursor: TextCursor,
        direction: Direction = Direction.FORWARD,
        count: int = 1,
    ) -> HopResult:
        """Hop *count* occurrences in *direction*.

        A backward hop is a forward hop with a negated count, so both
        directions share the same boundary logic.  A count of zero is
        treated as one.
        """
        signed = count * direction.sign
        return self._hop(cursor, self.active_instance(), signed or 1)

    def hop_forward(self, cursor: TextCursor, count: int = 1) -> HopResult:
        return self.hop(cursor, Direction.FORWARD, count)

    def hop_backward(self, cursor: TextCursor, count: int = 1) -> HopResult:
        return self.hop(cursor, Direction.BACKWARD, count)

    def _hop(self, cursor: TextCursor, instance: InstanceDef, signed: int) -> HopResult:
        direction = Direction.FORWARD if signed > 0 else Direction.BACKWARD
        count = abs(signed)
        pattern = instance.pattern.to_regex()
        placement = instance.placement

        # Resting on the very match a start/end placement would land on
        # again: skip it so the hop is never a no-op.
        if self._refinds_current(placement, direction) and self._rests_on_match(
            cursor, pattern, placement.lands_on_start(direction)
        ):
            count += 1

        found = cursor.advance_to_nth(pattern, direction, count)
        total = cursor.count_matches(pattern, 0, cursor.size)

        if found is not None:
            if placement.adjust:
                cursor.goto(found.end if placement.at_end else found.start)
            index = cursor.count_matches(pattern, 0, cursor.point)
            if cursor.match_at(pattern):
                index += 1
            logger.debug("Hop %s on %r landed at %d", direction.name, instance.name, cursor.point)
            return HopResult(instance.name, cursor.point, Found(index=index, total=total))

        if self._rests_on_match(cursor, pattern, placement.lands_on_start(direction)):
            which = "last" if direction is Direction.FORWARD else "first"
            return HopResult(instance.name, cursor.point, AtBoundary(which=which, total=total))
        return HopResult(instance.name, cursor.point, NoMatch(direction=direction, total=total))

    @staticmethod
    def _refinds_current(placement: PlacementRule, direction: Direction) -> bool:
        if not placement.adjust:
            return False
        if direction is Direction.FORWARD:
            return not placement.at_end
        return placement.at_end

    def _rests_on_match(self, cursor: TextCursor, pattern: str, on_start: bool) -> bool:
        if on_start:
            return cursor.match_at(pattern)
        return cursor.match_ending_at(pattern, max(0, cursor.point - self._lookback))
