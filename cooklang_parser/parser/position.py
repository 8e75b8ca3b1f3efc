"""
Tracks the current position of the parser within the source, mapping
offsets into 1-based line and column numbers.
"""

from typing import List, Optional, Tuple

from peggie.error_message_generation import offset_to_line_and_column


__all__ = ["PositionTracker"]


class PositionTracker:
    """
    Tracks a current position within some (newline-normalised) source text.

    Parameters
    ==========
    source : str
        The complete source text.
    """

    source: str

    _lines: List[str]
    _offset: int
    _position: Optional[Tuple[int, int]]
    """
    The current 1-based (line, column), or None if not yet computed from
    :py:attr:`_offset`.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self._lines = source.split("\n")
        self._offset = 0
        self._position = (1, 1)

    def set_position(self, line_index: int, column_index: int) -> None:
        """Set the current position from a 0-based line and column."""
        self._position = (line_index + 1, column_index + 1)

    def set_offset(self, offset: int) -> None:
        """Set the current position from a source offset."""
        self._offset = offset
        self._position = None

    @property
    def line(self) -> int:
        """The 1-based line number of the current position."""
        return self._resolve()[0]

    @property
    def column(self) -> int:
        """The 1-based column number of the current position."""
        return self._resolve()[1]

    def _resolve(self) -> Tuple[int, int]:
        if self._position is None:
            self._position = self.locate(self._offset)
        return self._position

    def locate(self, offset: int) -> Tuple[int, int]:
        """Convert a source offset into a 1-based (line, column) pair."""
        return offset_to_line_and_column(self.source, offset)

    def get_line(self, line: int) -> str:
        """Return the 1-based numbered line or an empty string if out of range."""
        if 1 <= line <= len(self._lines):
            return self._lines[line - 1]
        else:
            return ""

    def get_context(self, length: int = 20) -> str:
        """
        Return up to 'length' characters of the current line centred on the
        current column, with the character at the current column bracketed
        by arrows. For example, with the current position on the '{' in
        ``Add @sugar{unterminated``::

            >>> tracker.get_context(10)
            'sugar→{←unte'
        """
        text = self.get_line(self.line)
        if not text:
            return ""

        index = min(self.column - 1, len(text))
        start = max(0, index - length // 2)
        end = min(len(text), start + length)

        before = text[start:index]
        at = text[index : index + 1]
        after = text[index + 1 : end]
        return f"{before}→{at}←{after}"
