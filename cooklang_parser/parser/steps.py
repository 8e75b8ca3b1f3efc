"""
Assembly of a step from a content line and any continuation lines which
follow it.
"""

from typing import List, Sequence, Tuple

from cooklang_parser.recipe import Item, Text

from cooklang_parser.parser.components import COMPONENT_MARKERS, ComponentScanner


__all__ = ["StepScanner", "merge_text_items"]


def merge_text_items(items: Sequence[Item]) -> Tuple[Item, ...]:
    """Merge adjacent :py:class:`Text` items, dropping empty ones."""
    merged: List[Item] = []
    for item in items:
        if isinstance(item, Text):
            if not item.value:
                continue
            if merged and isinstance(merged[-1], Text):
                merged[-1] = Text(merged[-1].value + item.value)
                continue
        merged.append(item)
    return tuple(merged)


class StepScanner(ComponentScanner):
    """
    Scans the lines making up a single step (i.e. a content line followed by
    zero or more continuation lines) into a sequence of items.
    """

    items: List[Item]

    def scan(self) -> Tuple[Item, ...]:
        self.row = 0
        self.col = 0
        self.items = []

        while True:
            if self.col >= len(self.text):
                if self.row + 1 >= len(self.lines):
                    break
                self._start_continuation()
                continue

            self.collector.tracker.set_offset(self.line.offset_at(self.col))
            if self.text[self.col] in COMPONENT_MARKERS:
                self.items.append(self.scan_component())
            else:
                self._scan_text()

        return merge_text_items(self.items)

    def _scan_text(self) -> None:
        start = self.col
        while self.col < len(self.text) and self.text[self.col] not in COMPONENT_MARKERS:
            self.col += 1
        self.items.append(Text(self.text[start : self.col]))

    def _start_continuation(self) -> None:
        """
        Move the cursor onto the next line, inserting whitespace between it and
        the previous line.
        """
        self.row += 1
        indent = len(self.text) - len(self.text.lstrip())
        whitespace = self.text[:indent]
        if not whitespace:
            if any(not isinstance(item, Text) for item in self.items):
                whitespace = "  "
            else:
                whitespace = " "
        self.items.append(Text(whitespace))
        self.col = indent
