"""Text cursor protocol and a string-backed implementation.

The navigation engine only talks to a ``TextCursor``: a position in a
single linear body of text plus a handful of match oracles.  ``BufferCursor``
is the host implementation used by the TUI and CLI; it searches a Python
string with the ``re`` module.
"""

import re
from functools import lru_cache
from typing import Protocol

from hopper.errors import InvalidPatternError
from hopper.models import Direction, MatchRange


class TextCursor(Protocol):
    """Protocol every text substrate must satisfy."""

    @property
    def point(self) -> int: ...

    @property
    def size(self) -> int: ...

    def goto(self, offset: int) -> None: ...

    def match_at(self, pattern: str) -> bool:
        """Return True if *pattern* matches starting exactly at point."""
        ...

    def match_ending_at(self, pattern: str, limit: int) -> bool:
        """Return True if a match starting at or after *limit* ends exactly at point."""
        ...

    def advance_to_nth(self, pattern: str, direction: Direction, n: int) -> MatchRange | None:
        """Move to the n-th match in *direction*; leave point untouched on failure."""
        ...

    def count_matches(self, pattern: str, start: int, end: int) -> int:
        """Count non-overlapping, non-empty matches inside ``[start, end)``."""
        ...


@lru_cache(maxsize=64)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile *pattern*, translating ``re.error`` into InvalidPatternError."""
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidPatternError(f"Invalid regular expression {pattern!r}: {exc}") from exc


class BufferCursor:
    """TextCursor over an in-memory string.

    Forward searches leave point at the end of the match, backward searches
    at its start.  A backward match never extends past the position the
    search started from.  The match found at a given start is always the
    one ``re`` prefers there, whichever direction the search runs.
    """

    def __init__(self, text: str, point: int = 0) -> None:
        self._text = text
        self._point = 0
        self.goto(point)

    @property
    def text(self) -> str:
        return self._text

    @property
    def point(self) -> int:
        return self._point

    @property
    def size(self) -> int:
        return len(self._text)

    def goto(self, offset: int) -> None:
        """Move point, clamped to the bounds of the text."""
        self._point = max(0, min(offset, len(self._text)))

    def match_at(self, pattern: str) -> bool:
        return self._match(compile_pattern(pattern), self._point) is not None

    def match_ending_at(self, pattern: str, limit: int) -> bool:
        regex = compile_pattern(pattern)
        limit = max(0, limit)
        for start in range(self._point, limit - 1, -1):
            m = self._match(regex, start)
            if m is not None and m.end() == self._point:
                return True
        return False

    def advance_to_nth(self, pattern: str, direction: Direction, n: int) -> MatchRange | None:
        regex = compile_pattern(pattern)
        pos = self._point
        found: MatchRange | None = None
        for _ in range(n):
            if direction is Direction.FORWARD:
                found = self._search_forward(regex, pos)
                if found is None:
                    return None
                pos = found.end
            else:
                found = self._search_backward(regex, pos)
                if found is None:
                    return None
                pos = found.start
        if found is not None:
            self._point = pos
        return found

    def count_matches(self, pattern: str, start: int, end: int) -> int:
        regex = compile_pattern(pattern)
        start = max(0, start)
        end = min(end, len(self._text))
        if start >= end:
            return 0
        count = 0
        for m in regex.finditer(self._text, start):
            if m.end() > end:
                break
            if m.end() > m.start():
                count += 1
        return count

    # Matching always runs against the whole text so that anchors and
    # lookarounds see the real surroundings; a match ending past the allowed
    # position is rejected afterwards.  Empty matches never count.

    def _match(self, regex: re.Pattern[str], start: int) -> re.Match[str] | None:
        m = regex.match(self._text, start)
        if m is None or m.end() == m.start():
            return None
        return m

    def _search_forward(self, regex: re.Pattern[str], pos: int) -> MatchRange | None:
        while pos <= len(self._text):
            m = regex.search(self._text, pos)
            if m is None:
                return None
            if m.end() > m.start():
                return MatchRange(m.start(), m.end())
            pos = m.start() + 1
        return None

    def _search_backward(self, regex: re.Pattern[str], pos: int) -> MatchRange | None:
        for start in range(pos - 1, -1, -1):
            m = self._match(regex, start)
            if m is not None and m.end() <= pos:
                return MatchRange(m.start(), m.end())
        return None
