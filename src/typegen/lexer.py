"""Lexer for type description (``.tyd``) sources.

Whitespace and newlines are insignificant; ``//`` starts a comment that
runs to the end of the line.
"""

from __future__ import annotations

from typegen.errors import CompileError, Diagnostic, DiagnosticLabel, Severity
from typegen.source import Span
from typegen.tokens import KEYWORDS, PUNCTUATION, Token, TokenKind


class Lexer:
    """Tokenizes type description source."""

    def __init__(self, source: str, filename: str = "<stdin>") -> None:
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.col = 1
        self.tokens: list[Token] = []
        self.diagnostics: list[Diagnostic] = []

    def lex(self) -> list[Token]:
        """Tokenize the entire source and return the token list."""
        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch.isspace():
                self._advance()
            elif ch == '/' and self._peek(1) == '/':
                self._skip_line_comment()
            elif (ch.isascii() and ch.isalpha()) or ch == '_':
                self._lex_identifier()
            elif ch in PUNCTUATION:
                line, col = self.line, self.col
                self._advance()
                self._emit(PUNCTUATION[ch], ch, line, col)
            else:
                self._error(f"unexpected character {ch!r}", self.line, self.col)
                self._advance()

        self._emit(TokenKind.EOF, "", self.line, self.col)

        if self.diagnostics:
            raise CompileError(self.diagnostics)
        return self.tokens

    # ── Helpers ───────────────────────────────────────────────────

    def _peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _emit(self, kind: TokenKind, value: str, start_line: int, start_col: int) -> Token:
        end_col = self.col - 1 if self.col > start_col else start_col
        span = Span(self.filename, start_line, start_col, self.line, end_col)
        tok = Token(kind, value, span)
        self.tokens.append(tok)
        return tok

    def _error(self, message: str, line: int, col: int) -> None:
        span = Span(self.filename, line, col, line, col)
        self.diagnostics.append(
            Diagnostic(
                severity=Severity.ERROR,
                code="E100",
                message=message,
                labels=[DiagnosticLabel(span=span, message="")],
            )
        )

    # ── Token lexers ──────────────────────────────────────────────

    def _skip_line_comment(self) -> None:
        while self.pos < len(self.source) and self.source[self.pos] != '\n':
            self._advance()

    def _lex_identifier(self) -> None:
        line, col = self.line, self.col
        start = self.pos
        while self.pos < len(self.source) and _is_ident_char(self.source[self.pos]):
            self._advance()
        word = self.source[start:self.pos]
        self._emit(KEYWORDS.get(word, TokenKind.IDENTIFIER), word, line, col)


def _is_ident_char(ch: str) -> bool:
    return (ch.isascii() and ch.isalnum()) or ch in "_'"
