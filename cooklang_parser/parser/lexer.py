"""
Preprocessing and lexical analysis of recipe source.

Before parsing, source text is preprocessed by :py:func:`preprocess` which
normalises line endings, extracts the front matter block and strips block
(``[- ... -]``) and line (``-- ...``) comments, producing a series of
:py:class:`~cooklang_parser.parser.source.SourceLine` objects. Each line is
then classified by :py:func:`classify_line` as either a structural line
(section header, metadata or note) or a content line.

.. autofunction:: preprocess

.. autofunction:: classify_line

A flat token stream may also be produced (e.g. for syntax highlighting) using
:py:func:`tokenize`:

.. autofunction:: tokenize

.. autoclass:: Token

.. autoclass:: TokenType
    :members:
    :undoc-members:
"""

from typing import List, Optional, Tuple

from dataclasses import dataclass

from enum import Enum, auto

from cooklang_parser.diagnostics import DiagnosticKind

from cooklang_parser.parser.position import PositionTracker

from cooklang_parser.parser.source import SourceLine, split_lines

from cooklang_parser.parser.collector import DiagnosticCollector


__all__ = [
    "TokenType",
    "Token",
    "PreprocessedSource",
    "normalise_line_endings",
    "is_comment_line",
    "find_line_comment",
    "classify_line",
    "extract_front_matter",
    "strip_block_comments",
    "strip_line_comments",
    "preprocess",
    "tokenize",
]


class TokenType(Enum):
    at = auto()
    hash = auto()
    tilde = auto()
    lbrace = auto()
    rbrace = auto()
    lparen = auto()
    rparen = auto()
    percent = auto()
    text = auto()
    section_header = auto()
    metadata = auto()
    note = auto()
    newline = auto()
    end_of_stream = auto()


SPECIAL_CHARACTERS = {
    "@": TokenType.at,
    "#": TokenType.hash,
    "~": TokenType.tilde,
    "{": TokenType.lbrace,
    "}": TokenType.rbrace,
    "(": TokenType.lparen,
    ")": TokenType.rparen,
    "%": TokenType.percent,
}


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    line: int
    column: int
    """1-based position of the token's first character in the source."""


@dataclass(frozen=True)
class PreprocessedSource:
    front_matter: str
    lines: List[SourceLine]


FENCE = "---"


def normalise_line_endings(source: str) -> str:
    return source.replace("\r\n", "\n").replace("\r", "\n")


def is_comment_line(text: str) -> bool:
    """True for lines containing only a ``--`` comment (but not a fence)."""
    stripped = text.lstrip()
    return stripped.startswith("--") and not stripped.startswith(FENCE)


def find_line_comment(text: str, start: int = 0) -> int:
    """
    Find the index of the space preceding a trailing ``--`` comment in a
    line, or -1 if there is none.
    """
    index = text.find(" --", start)
    while index >= 0:
        if not text.startswith("-", index + 3):
            return index
        index = text.find(" --", index + 1)
    return -1


def classify_line(text: str) -> Optional[TokenType]:
    """
    Classify a line as a section header, metadata or note line, returning
    the corresponding :py:class:`TokenType`. Returns None for content
    lines.
    """
    stripped = text.strip()
    if stripped.startswith("="):
        return TokenType.section_header
    elif stripped.startswith(">>"):
        return TokenType.metadata
    elif stripped.startswith(">"):
        return TokenType.note
    else:
        return None


def _is_structural(text: str) -> bool:
    return (
        classify_line(text) is not None
        or text.strip().startswith(FENCE)
        or is_comment_line(text)
    )


def extract_front_matter(
    lines: List[SourceLine],
    collector: Optional[DiagnosticCollector] = None,
) -> Tuple[str, List[SourceLine]]:
    """
    If the first line is a ``---`` fence, extract the (verbatim) front matter
    text. Returns the front matter (or an empty string) and the remaining
    body lines.
    """
    if not lines or lines[0].text.strip() != FENCE:
        return "", lines

    for index in range(1, len(lines)):
        if lines[index].text.strip() == FENCE:
            return "\n".join(line.text for line in lines[1:index]), lines[index + 1 :]

    if collector is not None:
        collector.error(
            DiagnosticKind.invalid_metadata,
            "Unterminated front matter: missing closing '---'",
            lines[0],
            0,
            len(lines[0]),
        )
    return "\n".join(line.text for line in lines[1:]), []


def _join_fragments(before: SourceLine, after: SourceLine) -> SourceLine:
    if before.text[-1:].isspace() and after.text and not after.text[0].isspace():
        keep = len(before.text.rstrip())
        return before[: keep + 1] + after
    else:
        return before + after


def strip_block_comments(lines: List[SourceLine]) -> List[SourceLine]:
    """
    Remove ``[- ... -]`` comments, which may span several lines.

    Lines wholly within a comment are removed, as are lines on which a
    comment opens which are left blank. A line on which an earlier comment
    closes is always kept (even if blank).
    """
    kept = []
    in_comment = False
    for line in lines:
        text = line.text
        position = 0
        if in_comment:
            end = text.find("-]")
            if end < 0:
                continue
            position = end + 2
            in_comment = False

        opened = False
        fragments = []
        while True:
            start = text.find("[-", position)
            if start < 0:
                fragments.append(line[position:])
                break
            opened = True
            fragments.append(line[position:start])
            end = text.find("-]", start + 2)
            if end < 0:
                in_comment = True
                break
            position = end + 2

        processed = fragments[0]
        for fragment in fragments[1:]:
            processed = _join_fragments(processed, fragment)

        if opened and processed.is_blank():
            continue
        kept.append(processed)

    return kept


def strip_line_comments(lines: List[SourceLine]) -> List[SourceLine]:
    """
    Remove ``--`` comments. Comment-only lines are replaced by blank lines.

    When stripping a trailing comment leaves some content and the following
    line is a non-blank content line, the following line is joined onto the
    current one (separated by two spaces).
    """
    out = []
    index = 0
    while index < len(lines):
        line = lines[index]
        index += 1

        if is_comment_line(line.text):
            out.append(line[:0])
            continue

        parts = [line]
        comment = find_line_comment(line.text)
        while comment >= 0:
            parts[-1] = parts[-1][:comment]
            if (
                (len(parts) == 1 and parts[0].is_blank())
                or index >= len(lines)
                or lines[index].is_blank()
                or _is_structural(lines[index].text)
            ):
                break

            following = lines[index].strip()
            index += 1
            parts.append(SourceLine.synthetic("  ", following.offset_at(0)))
            parts.append(following)
            comment = find_line_comment(following.text)

        out.append(SourceLine.concat(parts))

    return out


def preprocess(
    source: str, collector: Optional[DiagnosticCollector] = None
) -> PreprocessedSource:
    """
    Preprocess newline-normalised source text, extracting the front matter and
    stripping comments.
    """
    front_matter, lines = extract_front_matter(split_lines(source), collector)
    lines = strip_line_comments(strip_block_comments(lines))
    return PreprocessedSource(front_matter, lines)


def tokenize(source: str) -> List[Token]:
    """
    Split recipe source into a flat list of :py:class:`Token` objects.
    Comments and front matter are not included.

    Structural lines (section headers, metadata and notes) produce a single
    token containing the whole (stripped) line. Content lines are split into
    tokens for each of the characters ``@#~{}()%`` and text tokens for the
    runs of text between them. Every line is followed by a newline token and
    the stream ends with an end-of-stream token.
    """
    source = normalise_line_endings(source)
    tracker = PositionTracker(source)
    tokens: List[Token] = []

    def emit(type: TokenType, value: str, line: SourceLine, index: int) -> None:
        line_number, column = tracker.locate(line.offset_at(index))
        tokens.append(Token(type, value, line_number, column))

    for line in preprocess(source).lines:
        text = line.text
        kind = classify_line(text)
        if line.is_blank():
            pass
        elif kind is not None:
            emit(kind, text.strip(), line, len(text) - len(text.lstrip()))
        else:
            index = 0
            while index < len(text):
                if text[index] in SPECIAL_CHARACTERS:
                    emit(SPECIAL_CHARACTERS[text[index]], text[index], line, index)
                    index += 1
                else:
                    end = index
                    while end < len(text) and text[end] not in SPECIAL_CHARACTERS:
                        end += 1
                    emit(TokenType.text, text[index:end], line, index)
                    index = end
        emit(TokenType.newline, "\n", line, len(text))

    line_number, column = tracker.locate(len(source))
    tokens.append(Token(TokenType.end_of_stream, "", line_number, column))
    return tokens
