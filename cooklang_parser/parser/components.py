"""
Parsing of ingredient (``@``), cookware (``#``) and timer (``~``)
components within a step.

Components take one of the following forms::

    @salt
    @ground black pepper{}
    @potato{2%kg}(peeled and diced)
    #pot
    #baking tray{2}
    ~{25%minutes}
    ~eggs{3%minutes}

A name without an amount block (``{...}``) is a single word. Ingredients and
cookware may be followed by a parenthesised note.
"""

from typing import Optional, Sequence, Tuple

import unicodedata

from dataclasses import dataclass

from cooklang_parser.diagnostics import DiagnosticKind

from cooklang_parser.quantity import Quantity, Regular, TextQuantity, SOME, parse_quantity

from cooklang_parser.recipe import Item, Text, Ingredient, Cookware, Timer

from cooklang_parser.parser.collector import DiagnosticCollector

from cooklang_parser.parser.source import SourceLine


__all__ = ["COMPONENT_MARKERS", "ComponentScanner"]


@dataclass(frozen=True)
class ComponentKind:
    noun: str
    syntax_error: DiagnosticKind
    default_quantity: Quantity


COMPONENT_KINDS = {
    "@": ComponentKind("ingredient", DiagnosticKind.invalid_ingredient_syntax, SOME),
    "#": ComponentKind("cookware", DiagnosticKind.invalid_cookware_syntax, Regular(1)),
    "~": ComponentKind("timer", DiagnosticKind.invalid_timer_syntax, TextQuantity("")),
}

COMPONENT_MARKERS = "".join(COMPONENT_KINDS)


def is_word_character(char: str) -> bool:
    return not (
        char.isspace()
        or char in COMPONENT_MARKERS
        or unicodedata.category(char).startswith("P")
    )


def is_empty_quantity(quantity: Quantity) -> bool:
    return str(quantity) == "" or quantity.numeric_value() == 0


class ComponentScanner:
    """
    A cursor over the (preprocessed) lines of a single step which can parse
    components at the cursor.
    """

    lines: Sequence[SourceLine]
    collector: DiagnosticCollector

    row: int
    """Index into :py:attr:`lines` of the cursor."""
    col: int
    """Index into the current line of the cursor."""

    def __init__(
        self, lines: Sequence[SourceLine], collector: DiagnosticCollector
    ) -> None:
        self.lines = lines
        self.collector = collector
        self.row = 0
        self.col = 0

    @property
    def line(self) -> SourceLine:
        return self.lines[self.row]

    @property
    def text(self) -> str:
        return self.lines[self.row].text

    def scan_component(self) -> Item:
        """
        Parse the component whose marker is under the cursor, leaving the
        cursor just after it. In tolerant mode, malformed components produce
        a :py:class:`Text` containing just the marker and the cursor is left
        just after the marker.
        """
        strict = self.collector.strict
        start = self.col
        marker = self.text[start]
        kind = COMPONENT_KINDS[marker]
        self.col += 1

        if marker != "~" and self.col < len(self.text) and self.text[self.col].isspace():
            if not strict:
                return Text(marker)
            self.collector.error(
                kind.syntax_error,
                f"Invalid {kind.noun} syntax: space not allowed after '{marker}'",
                self.line,
                self.col,
            )
            while self.col < len(self.text) and self.text[self.col].isspace():
                self.col += 1

        brace = self._find_brace()
        unterminated = False
        if brace < 0:
            name = self._scan_word()
            quantity, units = kind.default_quantity, ""
            if not name and marker != "~":
                self.col = start + 1
                return Text(marker)
        else:
            raw_name = self.text[self.col : brace]
            name = raw_name.strip()
            if marker == "~" and raw_name != raw_name.rstrip():
                if not strict:
                    self.col = start + 1
                    return Text(marker)
                self.collector.error(
                    kind.syntax_error,
                    "Invalid timer syntax: space not allowed before '{'",
                    self.line,
                    self.col + len(raw_name.rstrip()),
                )
            self.col = brace
            quantity, units, unterminated = self._scan_amount(kind)

        if marker == "~":
            if not name and is_empty_quantity(quantity):
                if not strict:
                    self.col = start + 1
                    return Text(marker)
                elif not unterminated:
                    self.collector.error(
                        kind.syntax_error,
                        "Invalid timer syntax: timer must have either a name or duration",
                        self.line,
                        start,
                        self.col - start,
                    )
            return Timer(name, quantity, units)

        note = None
        if self.col < len(self.text) and self.text[self.col] == "(":
            note = self._scan_note()

        if marker == "@":
            return Ingredient(name, quantity, units, note)
        else:
            return Cookware(name, quantity, units, note)

    def _find_brace(self) -> int:
        """
        Find the index of the next '{' on the current line, stopping (and
        returning -1) if another component marker appears first.
        """
        for index in range(self.col, len(self.text)):
            if self.text[index] == "{":
                return index
            elif self.text[index] in COMPONENT_MARKERS:
                return -1
        return -1

    def _scan_word(self) -> str:
        start = self.col
        while self.col < len(self.text) and is_word_character(self.text[self.col]):
            self.col += 1
        return self.text[start : self.col]

    def _scan_amount(self, kind: ComponentKind) -> Tuple[Quantity, str, bool]:
        """
        Parse the amount block starting at the '{' under the cursor. Returns
        the quantity, units and True if the block was unterminated.
        """
        brace = self.col
        close = self.text.find("}", brace + 1)
        if close < 0:
            self.collector.error(
                DiagnosticKind.unterminated_brace,
                "Unterminated brace: missing '}'",
                self.line,
                brace,
                len(self.text) - brace,
            )
            self.col = len(self.text)
            return kind.default_quantity, "", True

        amount = self.line[brace + 1 : close]
        self.col = close + 1

        percent = amount.text.find("%")
        if percent < 0:
            quantity_text, units = amount, ""
        else:
            quantity_text, units = amount[:percent], amount.text[percent + 1 :].strip()

        def on_error(message: str, start: int, length: int) -> None:
            self.collector.error(
                DiagnosticKind.invalid_quantity,
                message,
                quantity_text,
                start,
                length,
            )

        quantity = parse_quantity(quantity_text.text, kind.default_quantity, on_error)
        return quantity, units, False

    def _scan_note(self) -> Optional[str]:
        """
        Parse a parenthesised note starting at the '(' under the cursor. The
        note may continue onto following lines of the step, in which case
        it contains newlines.
        """
        open_row, open_col = self.row, self.col
        depth = 1
        parts = []
        row, col = self.row, self.col + 1
        segment_start = col
        while True:
            text = self.lines[row].text
            while col < len(text):
                if text[col] == "(":
                    depth += 1
                elif text[col] == ")":
                    depth -= 1
                    if depth == 0:
                        parts.append(text[segment_start:col])
                        self.row, self.col = row, col + 1
                        return "\n".join(parts)
                col += 1
            parts.append(text[segment_start:])
            if row + 1 >= len(self.lines):
                break
            row += 1
            col = segment_start = 0

        line = self.lines[open_row]
        self.collector.error(
            DiagnosticKind.unterminated_parenthesis,
            "Unterminated parenthesis: missing ')'",
            line,
            open_col,
            len(line) - open_col,
        )
        self.row = open_row
        if self.collector.strict:
            self.col = len(line)
            return line.text[open_col + 1 :]
        else:
            # The '(' is left to be scanned as text
            self.col = open_col
            return None
