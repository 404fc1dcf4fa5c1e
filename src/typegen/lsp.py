"""typegen Language Server: a pygls-based LSP for .tyd files.

Provides diagnostics, hover (the generated Reason declaration of a named
type), document symbols and formatting via stdio transport.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from typegen import __version__
from typegen.errors import CompileError, Diagnostic, Severity
from typegen.formatter import DescriptionFormatter
from typegen.parser import Description, parse_source
from typegen.reason_emitter import ReasonEmitter

# ── Conversion helpers ────────────────────────────────────────────

_SEVERITY_MAP = {
    Severity.ERROR: lsp.DiagnosticSeverity.Error,
    Severity.WARNING: lsp.DiagnosticSeverity.Warning,
}


def span_to_range(span: object) -> lsp.Range:
    """Convert a 1-indexed Span to a 0-indexed LSP Range."""
    sl = getattr(span, "start_line", 1)
    sc = getattr(span, "start_col", 1)
    el = getattr(span, "end_line", sl)
    ec = getattr(span, "end_col", sc)
    return lsp.Range(
        start=lsp.Position(line=sl - 1, character=sc - 1),
        end=lsp.Position(line=el - 1, character=ec),
    )


def _compile_diag(d: Diagnostic) -> lsp.Diagnostic:
    """Convert a typegen Diagnostic to an LSP Diagnostic."""
    span_range = lsp.Range(start=lsp.Position(0, 0), end=lsp.Position(0, 0))
    if d.labels:
        span_range = span_to_range(d.labels[0].span)
    return lsp.Diagnostic(
        range=span_range,
        severity=_SEVERITY_MAP.get(d.severity, lsp.DiagnosticSeverity.Error),
        source="typegen",
        code=d.code,
        message=f"[{d.code}] {d.message}",
    )


# ── Per-document state ────────────────────────────────────────────


@dataclass
class DocumentState:
    """Cached analysis results for a single open document."""

    source: str = ""
    description: Description | None = None
    diagnostics: list[lsp.Diagnostic] = field(default_factory=list)


server = LanguageServer(
    "typegen-lsp", __version__,
    text_document_sync_kind=lsp.TextDocumentSyncKind.Full,
)
_state: dict[str, DocumentState] = {}


def _analyze(uri: str, source: str) -> DocumentState:
    """Lex and parse, cache results, return state."""
    ds = DocumentState(source=source)
    try:
        desc, warnings = parse_source(source, uri)
    except CompileError as e:
        ds.diagnostics = [_compile_diag(d) for d in e.diagnostics]
    else:
        ds.description = desc
        ds.diagnostics = [_compile_diag(d) for d in warnings]
    _state[uri] = ds
    return ds


def _get_word_at(source: str, line: int, character: int) -> str:
    """Extract the identifier at the given 0-indexed position."""
    lines = source.splitlines()
    if line < 0 or line >= len(lines):
        return ""
    text = lines[line]
    if character < 0 or character >= len(text):
        # Cursor right after the word
        if 0 < character <= len(text):
            character -= 1
        else:
            return ""

    def is_word(ch: str) -> bool:
        return ch.isalnum() or ch in "_'"

    start = character
    while start > 0 and is_word(text[start - 1]):
        start -= 1
    end = character
    while end < len(text) and is_word(text[end]):
        end += 1
    return text[start:end]


def _hover_text(desc: Description, word: str) -> str | None:
    """Markdown hover for a declared type name, or None."""
    if word not in desc.names and word != "void":
        return None
    rendered = ReasonEmitter(desc).render_declaration(word)
    if rendered is None:
        return None
    return f"```reason\n{rendered}\n```"


# ── LSP Feature Handlers ─────────────────────────────────────────


@server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
def did_open(params: lsp.DidOpenTextDocumentParams) -> None:
    uri = params.text_document.uri
    ds = _analyze(uri, params.text_document.text)
    server.text_document_publish_diagnostics(lsp.PublishDiagnosticsParams(
        uri=uri,
        diagnostics=ds.diagnostics,
    ))


@server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: lsp.DidChangeTextDocumentParams) -> None:
    uri = params.text_document.uri
    # Full sync: take the last content change
    source = params.content_changes[-1].text if params.content_changes else ""
    ds = _analyze(uri, source)
    server.text_document_publish_diagnostics(lsp.PublishDiagnosticsParams(
        uri=uri,
        diagnostics=ds.diagnostics,
    ))


@server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
def did_close(params: lsp.DidCloseTextDocumentParams) -> None:
    _state.pop(params.text_document.uri, None)


@server.feature(lsp.TEXT_DOCUMENT_HOVER)
def hover(params: lsp.HoverParams) -> lsp.Hover | None:
    ds = _state.get(params.text_document.uri)
    if ds is None or ds.description is None:
        return None

    word = _get_word_at(ds.source, params.position.line, params.position.character)
    if not word:
        return None
    content = _hover_text(ds.description, word)
    if content is None:
        return None
    return lsp.Hover(contents=lsp.MarkupContent(
        kind=lsp.MarkupKind.Markdown,
        value=content,
    ))


@server.feature(lsp.TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbol(params: lsp.DocumentSymbolParams) -> list[lsp.DocumentSymbol]:
    ds = _state.get(params.text_document.uri)
    if ds is None or ds.description is None:
        return []
    return _symbols(ds.description)


def _symbols(desc: Description) -> list[lsp.DocumentSymbol]:
    return [
        lsp.DocumentSymbol(
            name=name,
            kind=lsp.SymbolKind.Class,
            range=span_to_range(span),
            selection_range=span_to_range(span),
        )
        for name, span in desc.names.items()
    ]


@server.feature(lsp.TEXT_DOCUMENT_FORMATTING)
def formatting(params: lsp.DocumentFormattingParams) -> list[lsp.TextEdit] | None:
    ds = _state.get(params.text_document.uri)
    if ds is None or ds.description is None:
        return None
    return _format_edits(ds)


def _format_edits(ds: DocumentState) -> list[lsp.TextEdit] | None:
    formatted = DescriptionFormatter().format(ds.description)
    if formatted == ds.source:
        return None

    # Replace entire document
    lines = ds.source.splitlines()
    end_line = len(lines)
    end_char = len(lines[-1]) if lines else 0
    return [lsp.TextEdit(
        range=lsp.Range(
            start=lsp.Position(0, 0),
            end=lsp.Position(end_line, end_char),
        ),
        new_text=formatted,
    )]


# ── Entry point ──────────────────────────────────────────────────


def main() -> None:
    """Start the typegen language server on stdio."""
    server.start_io()
