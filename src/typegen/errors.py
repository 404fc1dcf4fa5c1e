"""Diagnostics for description files and their terminal rendering.

Rendered diagnostics look like::

    error[E201]: unknown type variable 'elm'
     --> list.tyd:2:1
      |
    2 | elm
      | ^^^
      = help: did you mean 'elem'?
    2 | elem
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typegen.source import Span


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


_SEVERITY_COLOR = {
    Severity.ERROR: "\033[1;31m",
    Severity.WARNING: "\033[1;33m",
}
_BOLD = "\033[1m"
_GUTTER = "\033[1;34m"
_HELP = "\033[1;32m"
_RESET = "\033[0m"


@dataclass(frozen=True)
class DiagnosticLabel:
    """A source span, with an optional message printed after its carets."""

    span: Span
    message: str = ""


@dataclass(frozen=True)
class Suggestion:
    """Replace the text under the primary label with *replacement*."""

    message: str
    replacement: str


@dataclass
class Diagnostic:
    severity: Severity
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    suggestions: list[Suggestion] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


class DiagnosticRenderer:
    """Formats diagnostics with source excerpts, optionally in color.

    *sources* maps file names to their text for sources that are not on
    disk (stdin, editor buffers, tests).
    """

    def __init__(self, *, color: bool = True, sources: dict[str, str] | None = None) -> None:
        self.color = color
        self._lines: dict[str, list[str]] = {
            name: text.splitlines() for name, text in (sources or {}).items()
        }

    def render(self, diag: Diagnostic) -> str:
        width = max((len(str(lb.span.start_line)) for lb in diag.labels), default=0)
        pad = " " * width
        paint = _SEVERITY_COLOR[diag.severity]

        out = [
            self._paint(paint, f"{diag.severity.value}[{diag.code}]")
            + self._paint(_BOLD, f": {diag.message}")
        ]
        for label in diag.labels:
            out.extend(self._excerpt(label, pad, paint))
        for suggestion in diag.suggestions:
            out.append(f"{pad} {self._paint(_GUTTER, '=')} "
                       f"{self._paint(_HELP, 'help')}: {suggestion.message}")
            if diag.labels:
                patched = self._patched_line(diag.labels[0].span, suggestion.replacement)
                if patched is not None:
                    out.append(self._source_row(diag.labels[0].span.start_line, width, patched))
        for note in diag.notes:
            out.append(f"{pad} {self._paint(_GUTTER, '=')} note: {note}")
        return "\n".join(out)

    # ── Pieces ─────────────────────────────────────────────────

    def _excerpt(self, label: DiagnosticLabel, pad: str, paint: str) -> list[str]:
        span = label.span
        rows = [
            f"{pad}{self._paint(_GUTTER, '-->')} {span}",
            f"{pad} {self._paint(_GUTTER, '|')}",
        ]
        text = self._line(span.file, span.start_line)
        if text is None:
            return rows
        rows.append(self._source_row(span.start_line, len(pad), text))
        last = span.end_col if span.end_line == span.start_line else len(text)
        carets = "^" * max(1, last - span.start_col + 1)
        marker = " " * (span.start_col - 1) + self._paint(paint, carets)
        if label.message:
            marker += " " + self._paint(paint, label.message)
        rows.append(f"{pad} {self._paint(_GUTTER, '|')} {marker}")
        return rows

    def _source_row(self, line_num: int, width: int, text: str) -> str:
        return f"{self._paint(_GUTTER, f'{line_num:>{width}} |')} {text}"

    def _patched_line(self, span: Span, replacement: str) -> str | None:
        text = self._line(span.file, span.start_line)
        if text is None or span.end_line != span.start_line:
            return None
        return text[:span.start_col - 1] + replacement + text[span.end_col:]

    def _line(self, filename: str, line_num: int) -> str | None:
        if filename not in self._lines:
            path = Path(filename)
            try:
                self._lines[filename] = path.read_text().splitlines() if path.is_file() else []
            except OSError:
                self._lines[filename] = []
        lines = self._lines[filename]
        if 1 <= line_num <= len(lines):
            return lines[line_num - 1]
        return None

    def _paint(self, code: str, text: str) -> str:
        return f"{code}{text}{_RESET}" if self.color else text


class CompileError(Exception):
    """Raised at the end of a pass with everything that pass found."""

    def __init__(self, diagnostics: list[Diagnostic]) -> None:
        self.diagnostics = diagnostics
        messages = [d.message for d in diagnostics]
        super().__init__(f"{len(diagnostics)} error(s): {'; '.join(messages)}")


class ContractViolation(CompileError):
    """A malformed type algebra value: bad arity or an unbound index.

    These are caller bugs, never user input errors, so there is no span
    and the rendered form is the header line alone.
    """

    def __init__(self, code: str, message: str) -> None:
        super().__init__([Diagnostic(severity=Severity.ERROR, code=code, message=message)])
        self.code = code
