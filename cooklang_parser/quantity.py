"""
The quantity given in a component's amount block (e.g. the ``1/2`` in
``@milk{1/2%cup}``) is represented by one of the following types:

.. autoclass:: Regular
    :members:

.. autoclass:: Fractional
    :members:

.. autoclass:: TextQuantity
    :members:

The text of an amount block's quantity is parsed by:

.. autofunction:: parse_quantity
"""

from typing import Callable, Optional, Union

import re

from fractions import Fraction

from dataclasses import dataclass


__all__ = [
    "Regular",
    "Fractional",
    "TextQuantity",
    "Quantity",
    "SOME",
    "parse_quantity",
]


fraction_pattern = re.compile(
    r"((?P<integer>[0-9]+)[ \t]+)?(?P<numerator>[0-9]+)[ \t]*/[ \t]*(?P<denominator>[0-9]+)"
)

decimal_pattern = re.compile(
    r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?"
)


@dataclass(frozen=True)
class Regular:
    """A plain (integer or decimal) number, e.g. ``3`` or ``2.5``."""

    value: float

    def numeric_value(self) -> Optional[float]:
        return self.value

    def __str__(self) -> str:
        value = float(self.value)
        if value.is_integer():
            return str(int(value))
        else:
            return repr(value)


@dataclass(frozen=True)
class Fractional:
    """
    A fraction, optionally with a whole number part, e.g. ``1/2`` or ``2 1/3``.
    The exact form written in the recipe is retained.
    """

    whole: int
    numerator: int
    denominator: int
    """Never zero."""

    def __post_init__(self) -> None:
        if self.denominator == 0:
            raise ValueError("Fractional quantity denominator must not be zero")

    def numeric_value(self) -> Optional[float]:
        return self.whole + self.numerator / self.denominator

    def as_fraction(self) -> Fraction:
        """The exact value as a :py:class:`fractions.Fraction`."""
        return self.whole + Fraction(self.numerator, self.denominator)

    def __str__(self) -> str:
        if self.whole:
            return f"{self.whole} {self.numerator}/{self.denominator}"
        else:
            return f"{self.numerator}/{self.denominator}"


@dataclass(frozen=True)
class TextQuantity:
    """A free-text quantity such as ``a pinch`` (or ``some``)."""

    value: str

    def numeric_value(self) -> Optional[float]:
        return None

    def __str__(self) -> str:
        return self.value


Quantity = Union[Regular, Fractional, TextQuantity]

SOME = TextQuantity("some")
"""The quantity given to ingredients which don't specify one."""


QuantityErrorCallback = Callable[[str, int, int], None]
"""
Called as ``on_error(message, start, length)`` with offsets relative to the
text passed to :py:func:`parse_quantity`.
"""


def parse_quantity(
    text: str,
    default: Quantity = SOME,
    on_error: Optional[QuantityErrorCallback] = None,
) -> Quantity:
    """
    Parse the quantity part of an amount block.

    Empty (or whitespace-only) text produces the supplied default. Integer
    fractions (e.g. ``1/2`` or ``1 1/2``) produce a :py:class:`Fractional`,
    other numbers (including decimal fractions such as ``1.5/2``) produce a
    :py:class:`Regular` and anything else a :py:class:`TextQuantity`.

    Malformed fractions (e.g. ``1/2/3`` or ``1/0``) are reported via
    ``on_error`` (if given) and kept verbatim as a :py:class:`TextQuantity`.
    """
    stripped = text.strip()
    if not stripped:
        return default

    start = len(text) - len(text.lstrip())

    def error(message: str) -> TextQuantity:
        if on_error is not None:
            on_error(message, start, len(stripped))
        return TextQuantity(stripped)

    if "/" not in stripped:
        if decimal_pattern.fullmatch(stripped):
            return Regular(float(stripped))
        else:
            return TextQuantity(stripped)

    parts = stripped.split("/")
    if len(parts) != 2:
        return error(f"Invalid fraction format: '{stripped}'")

    numerator, denominator = (part.strip() for part in parts)

    # Values like '01/2' are deliberately not numbers
    if len(numerator) > 1 and numerator[0] == "0" and numerator[1].isdigit():
        return TextQuantity(stripped)

    match = fraction_pattern.fullmatch(stripped)
    if match is not None:
        # Nor are whole parts with a leading zero (e.g. '0 1/2')
        if match["integer"] is not None and match["integer"].startswith("0"):
            return TextQuantity(stripped)
        if int(match["denominator"]) == 0:
            return error("Division by zero in fraction")
        return Fractional(
            int(match["integer"]) if match["integer"] is not None else 0,
            int(match["numerator"]),
            int(match["denominator"]),
        )

    if decimal_pattern.fullmatch(numerator) and decimal_pattern.fullmatch(
        denominator
    ):
        if float(denominator) == 0:
            return error("Division by zero in fraction")
        return Regular(float(numerator) / float(denominator))

    return TextQuantity(stripped)
