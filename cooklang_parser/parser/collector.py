"""
Diagnostics are accumulated during a parse by a :py:class:`DiagnosticCollector`
which also decides the recovery policy used by the grammar: in strict mode
every problem is recorded, in tolerant mode problems are silently dropped
and malformed syntax is treated as literal text.
"""

from typing import List

from cooklang_parser.diagnostics import Diagnostic, DiagnosticKind, Severity

from cooklang_parser.parser.position import PositionTracker

from cooklang_parser.parser.source import SourceLine


__all__ = ["DiagnosticCollector"]


class DiagnosticCollector:
    tracker: PositionTracker
    strict: bool
    classic_metadata_warnings: bool
    diagnostics: List[Diagnostic]

    def __init__(
        self,
        tracker: PositionTracker,
        strict: bool = False,
        classic_metadata_warnings: bool = True,
    ) -> None:
        self.tracker = tracker
        self.strict = strict
        self.classic_metadata_warnings = classic_metadata_warnings
        self.diagnostics = []

    @property
    def has_errors(self) -> bool:
        return any(d.severity == Severity.error for d in self.diagnostics)

    def error(
        self,
        kind: DiagnosticKind,
        message: str,
        line: SourceLine,
        index: int,
        length: int = 1,
    ) -> None:
        """
        Report an error at character 'index' of a (preprocessed) source line.
        Ignored in tolerant mode.
        """
        self._report(Severity.error, kind, message, line, index, length)

    def warning(
        self,
        kind: DiagnosticKind,
        message: str,
        line: SourceLine,
        index: int,
        length: int = 1,
    ) -> None:
        self._report(Severity.warning, kind, message, line, index, length)

    def internal_error(self, exc: Exception) -> Diagnostic:
        """
        Record an unexpected exception as an 'other' diagnostic at the
        tracker's current position. Recorded in both modes.
        """
        diagnostic = Diagnostic(
            DiagnosticKind.other,
            Severity.error,
            f"Unexpected error: {exc}",
            self.tracker.line,
            self.tracker.column,
            1,
            self.tracker.get_context(),
        )
        self.diagnostics.append(diagnostic)
        return diagnostic

    def _report(
        self,
        severity: Severity,
        kind: DiagnosticKind,
        message: str,
        line: SourceLine,
        index: int,
        length: int,
    ) -> None:
        if not self.strict:
            return

        line_number, column = self.tracker.locate(line.offset_at(index))
        context = self.tracker.get_line(line_number)

        # Never underline past the end of the original line
        length = max(1, min(length, len(context) - column + 1))

        self.diagnostics.append(
            Diagnostic(kind, severity, message, line_number, column, length, context)
        )
