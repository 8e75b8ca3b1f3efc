"""
Grouping of the lines of a (preprocessed) recipe into sections of steps and
notes, collecting classic (``>> key: value``) metadata along the way.
"""

from typing import Dict, List, Optional, Sequence, Tuple

import logging

from cooklang_parser.diagnostics import DiagnosticKind

from cooklang_parser.recipe import Section, SectionContent, Step, Note

from cooklang_parser.parser.collector import DiagnosticCollector

from cooklang_parser.parser.lexer import TokenType, classify_line

from cooklang_parser.parser.source import SourceLine

from cooklang_parser.parser.steps import StepScanner


__all__ = [
    "parse_section_name",
    "parse_note",
    "parse_metadata_line",
    "assemble_sections",
]


logger = logging.getLogger(__name__)


def parse_section_name(text: str) -> Optional[str]:
    """
    Extract the name from a section header line such as ``== Dough ==``.
    Returns None for unnamed headers (e.g. ``==``).
    """
    name = text.strip().strip("=").strip()
    return name or None


def parse_note(text: str) -> str:
    return text.strip()[1:].strip()


def parse_metadata_line(
    line: SourceLine, collector: DiagnosticCollector
) -> Optional[Tuple[str, str]]:
    """
    Parse a classic ``>> key: value`` metadata line. Returns None (having
    reported an error) if the line is malformed.
    """
    text = line.text
    start = len(text) - len(text.lstrip())
    body = text.strip()[2:]
    colon = body.find(":")
    if colon < 0:
        collector.error(
            DiagnosticKind.invalid_metadata,
            "Invalid metadata format. Expected '>> key: value'",
            line,
            start,
            len(text.strip()),
        )
        return None

    key = body[:colon].strip()
    value = body[colon + 1 :].strip()
    if not key:
        collector.error(
            DiagnosticKind.invalid_metadata,
            "Metadata key cannot be empty",
            line,
            start,
            colon + 2,
        )
        return None

    if collector.classic_metadata_warnings:
        collector.warning(
            DiagnosticKind.invalid_metadata,
            "Classic metadata format '>> key: value' is deprecated, "
            "use a front matter block instead",
            line,
            start,
            len(text.strip()),
        )
    return key, value


def assemble_sections(
    lines: Sequence[SourceLine], collector: DiagnosticCollector
) -> Tuple[Tuple[Section, ...], Dict[str, str]]:
    """
    Assemble the lines of a preprocessed recipe body into sections.

    Returns the sections (always at least one) and the classic metadata
    found.
    """
    sections: List[Section] = []
    metadata: Dict[str, str] = {}

    name: Optional[str] = None
    content: List[SectionContent] = []
    from_header = False
    step_number = 1

    def close_section() -> None:
        # The implicit leading section is only kept if it has content
        if from_header or content:
            sections.append(Section(name, tuple(content)))

    index = 0
    while index < len(lines):
        line = lines[index]
        kind = classify_line(line.text)
        index += 1

        if line.is_blank():
            continue
        elif kind == TokenType.section_header:
            close_section()
            name = parse_section_name(line.text)
            content = []
            from_header = True
            step_number = 1
        elif kind == TokenType.metadata:
            entry = parse_metadata_line(line, collector)
            if entry is not None:
                key, value = entry
                metadata[key] = value
        elif kind == TokenType.note:
            content.append(Note(parse_note(line.text)))
        else:
            step_lines = [line]
            while (
                index < len(lines)
                and not lines[index].is_blank()
                and classify_line(lines[index].text) is None
            ):
                step_lines.append(lines[index])
                index += 1

            items = StepScanner(step_lines, collector).scan()
            if items:
                content.append(Step(items, step_number))
                step_number += 1

    close_section()

    if not sections:
        sections.append(Section(None, ()))

    logger.debug("Assembled %d section(s)", len(sections))
    return tuple(sections), metadata
