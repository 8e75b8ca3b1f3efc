"""
Recipes are parsed using :py:func:`cooklang_parser.parser.parse`:

.. autofunction:: cooklang_parser.parser.parse

Two recovery policies are available. By default parsing is *tolerant*:
malformed syntax (e.g. ``@ salt`` or ``~{}``) is treated as literal text and
a recipe is always produced. In *strict* mode every problem is reported as a
:py:class:`~cooklang_parser.diagnostics.Diagnostic` (parsing continues past
each one so that all problems are found at once) and no recipe is produced
if any errors are found. Both policies produce identical recipes for
well-formed input.
"""

import logging

from cooklang_parser.diagnostics import ParseResult

from cooklang_parser.recipe import Recipe

from cooklang_parser.parser.collector import DiagnosticCollector

from cooklang_parser.parser.lexer import normalise_line_endings, preprocess

from cooklang_parser.parser.position import PositionTracker

from cooklang_parser.parser.sections import assemble_sections


__all__ = ["parse"]


logger = logging.getLogger(__name__)


def parse(
    source: str,
    strict: bool = False,
    classic_metadata_warnings: bool = True,
) -> ParseResult:
    """
    Parse a recipe.

    Parameters
    ==========
    source : str
        The recipe source.
    strict : bool
        If True, report every syntax error found rather than treating
        malformed syntax as literal text.
    classic_metadata_warnings : bool
        In strict mode, if True, emit a warning for every classic
        ``>> key: value`` metadata line.

    Returns
    =======
    :py:class:`~cooklang_parser.diagnostics.ParseResult`
        Never raises for malformed input.
    """
    source = normalise_line_endings(source)
    tracker = PositionTracker(source)
    collector = DiagnosticCollector(tracker, strict, classic_metadata_warnings)

    try:
        preprocessed = preprocess(source, collector)
        sections, metadata = assemble_sections(preprocessed.lines, collector)
        recipe = Recipe(sections, metadata, preprocessed.front_matter)
    except Exception as exc:
        logger.exception("Unexpected error while parsing recipe")
        collector.internal_error(exc)
        return ParseResult(None, tuple(collector.diagnostics))

    logger.debug(
        "Parsed recipe (%s): %d section(s), %d diagnostic(s)",
        "strict" if strict else "tolerant",
        len(sections),
        len(collector.diagnostics),
    )

    if collector.has_errors:
        return ParseResult(None, tuple(collector.diagnostics))
    else:
        return ParseResult(recipe, tuple(collector.diagnostics))
