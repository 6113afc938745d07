"""Read-only text view whose cursor is the hop point."""

from textual.widgets import TextArea


def offset_to_location(text: str, offset: int) -> tuple[int, int]:
    """Convert a character offset into a ``(row, column)`` location."""
    offset = max(0, min(offset, len(text)))
    row = text.count("\n", 0, offset)
    line_start = text.rfind("\n", 0, offset) + 1
    return row, offset - line_start


def location_to_offset(text: str, location: tuple[int, int]) -> int:
    """Convert a ``(row, column)`` location into a character offset."""
    row, column = location
    lines = text.split("\n")
    row = max(0, min(row, len(lines) - 1))
    offset = sum(len(line) + 1 for line in lines[:row])
    return offset + max(0, min(column, len(lines[row])))


class TextView(TextArea):
    """TextArea that exposes its cursor as a linear character offset.

    Text is always shown read-only; newlines are normalised to ``\\n`` so
    offsets line up with the string handed to the text cursor.
    """

    def __init__(self, text: str, **kwargs) -> None:
        super().__init__(
            text.replace("\r\n", "\n"),
            read_only=True,
            show_line_numbers=True,
            soft_wrap=False,
            **kwargs,
        )

    @property
    def char_offset(self) -> int:
        return location_to_offset(self.text, self.cursor_location)

    def move_to_offset(self, offset: int) -> None:
        self.move_cursor(offset_to_location(self.text, offset), center=True)
