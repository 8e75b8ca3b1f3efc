"""
Problems found while parsing a recipe are described by :py:class:`Diagnostic`
objects. When cast to :py:class:`str`, diagnostics take a form similar to:

.. code:: text

    At line 1 column 12:
        Add @sugar{1/0%cups}
                   ^
    Error: Division by zero in fraction

The category of a diagnostic is identified by a member of the following
enumeration. Further details are only given as human-readable strings.

.. autoclass:: DiagnosticKind
    :members:
    :undoc-members:

.. autoclass:: Severity
    :members:
    :undoc-members:

.. autoclass:: Diagnostic
    :members:

The outcome of a parse is given by a :py:class:`ParseResult`:

.. autoclass:: ParseResult
    :members:

.. autoexception:: RecipeSyntaxError
"""

from typing import Optional, Tuple

from dataclasses import dataclass

from enum import Enum, auto

from peggie.error_message_generation import format_error_message

from cooklang_parser.recipe import Recipe


__all__ = [
    "DiagnosticKind",
    "Severity",
    "Diagnostic",
    "ParseResult",
    "RecipeSyntaxError",
]


class DiagnosticKind(Enum):
    """Kinds of diagnostic."""

    invalid_ingredient_syntax = auto()
    invalid_cookware_syntax = auto()
    invalid_timer_syntax = auto()
    invalid_section_header = auto()
    invalid_metadata = auto()
    unterminated_brace = auto()
    unterminated_parenthesis = auto()
    invalid_quantity = auto()
    unexpected_character = auto()
    other = auto()


class Severity(Enum):
    warning = auto()
    error = auto()


@dataclass(frozen=True)
class Diagnostic:
    """
    A problem found in a recipe's source.
    """

    kind: DiagnosticKind
    severity: Severity
    message: str

    line: int
    column: int
    """The 1-based line and column in the original source."""

    length: int = 1
    """
    The number of characters (from :py:attr:`column` onward, within the same
    line) covered by the problem. Always at least 1.
    """

    context: str = ""
    """The text of the source line the problem was found on."""

    def __str__(self) -> str:
        return format_error_message(
            self.line,
            self.column,
            self.context,
            f"{self.severity.name.capitalize()}: {self.message}",
        )


@dataclass(frozen=True)
class ParseResult:
    """
    The result of parsing a recipe. On success, :py:attr:`recipe` holds the
    parsed recipe and :py:attr:`diagnostics` holds zero or more warnings. On
    failure :py:attr:`recipe` is None and :py:attr:`diagnostics` lists every
    problem found (in source order).
    """

    recipe: Optional[Recipe]
    diagnostics: Tuple[Diagnostic, ...] = ()

    @property
    def success(self) -> bool:
        return self.recipe is not None

    @property
    def errors(self) -> Tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity == Severity.error)

    @property
    def warnings(self) -> Tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity == Severity.warning)

    def unwrap(self) -> Recipe:
        """
        Return the parsed recipe.

        Raises
        ======
        RecipeSyntaxError
            If parsing failed.
        """
        if self.recipe is None:
            raise RecipeSyntaxError(self.errors)
        return self.recipe


@dataclass
class RecipeSyntaxError(ValueError):
    """
    Thrown by :py:meth:`ParseResult.unwrap` when a recipe could not be
    parsed.
    """

    diagnostics: Tuple[Diagnostic, ...]

    def __str__(self) -> str:
        return "\n\n".join(str(d) for d in self.diagnostics)
