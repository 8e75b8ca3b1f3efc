"""
A parser for recipes written in the Cooklang recipe markup language.

.. code:: python

    >>> from cooklang_parser import parse
    >>> recipe = parse("Crack @eggs{3} into a #bowl.").unwrap()
"""

from cooklang_parser.parser import parse

from cooklang_parser.diagnostics import (
    Diagnostic,
    DiagnosticKind,
    ParseResult,
    RecipeSyntaxError,
    Severity,
)

__version__ = "1.0"

__all__ = [
    "parse",
    "Diagnostic",
    "DiagnosticKind",
    "ParseResult",
    "RecipeSyntaxError",
    "Severity",
]
