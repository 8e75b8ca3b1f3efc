"""
Lines of source text are carried through preprocessing as
:py:class:`SourceLine` objects which remember the source offset of every
character. This allows comments to be stripped and lines to be merged while
still reporting diagnostics against the original source.
"""

from typing import List, Sequence, Tuple

from dataclasses import dataclass


__all__ = ["SourceLine", "split_lines"]


@dataclass(frozen=True)
class SourceLine:
    text: str

    offsets: Tuple[int, ...]
    """The source offset of each character in :py:attr:`text`."""

    end: int
    """
    The source offset just past the end of this line (i.e. the position of
    the newline which terminated it).
    """

    @classmethod
    def from_source(cls, text: str, start: int) -> "SourceLine":
        return cls(text, tuple(range(start, start + len(text))), start + len(text))

    @classmethod
    def synthetic(cls, text: str, offset: int) -> "SourceLine":
        """Text inserted during preprocessing, attributed to 'offset'."""
        return cls(text, (offset,) * len(text), offset)

    def __len__(self) -> int:
        return len(self.text)

    def offset_at(self, index: int) -> int:
        if index < len(self.offsets):
            return self.offsets[index]
        else:
            return self.end

    def __getitem__(self, key: slice) -> "SourceLine":
        start, stop, _ = key.indices(len(self.text))
        stop = max(start, stop)
        return SourceLine(
            self.text[start:stop],
            self.offsets[start:stop],
            self.offset_at(stop),
        )

    def __add__(self, other: "SourceLine") -> "SourceLine":
        return SourceLine(
            self.text + other.text,
            self.offsets + other.offsets,
            other.end,
        )

    @classmethod
    def concat(cls, parts: Sequence["SourceLine"]) -> "SourceLine":
        """Concatenate one or more lines in a single pass."""
        offsets: List[int] = []
        for part in parts:
            offsets.extend(part.offsets)
        return cls("".join(part.text for part in parts), tuple(offsets), parts[-1].end)

    def is_blank(self) -> bool:
        return not self.text.strip()

    def strip(self) -> "SourceLine":
        start = len(self.text) - len(self.text.lstrip())
        stop = len(self.text.rstrip())
        return self[start:stop]


def split_lines(source: str, start: int = 0) -> List[SourceLine]:
    """
    Split (newline-normalised) source text into lines. The 'start' argument
    gives the source offset of the first character of 'source'.
    """
    lines = []
    for text in source.split("\n"):
        lines.append(SourceLine.from_source(text, start))
        start += len(text) + 1
    return lines
