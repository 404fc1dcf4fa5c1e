"""Parser for type descriptions.

Recursive descent over the token stream. Variable names are resolved to
de Bruijn indices while parsing, so the result is a closed ``TypeExpr``
ready for translation::

    params a
    rec list { Nil, Cons: a * list }
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass, field

from typegen.algebra import (
    UNIT,
    VOID,
    BoundVar,
    Named,
    Product,
    Recursive,
    Sum,
    TypeExpr,
)
from typegen.errors import (
    CompileError,
    Diagnostic,
    DiagnosticLabel,
    Severity,
    Suggestion,
)
from typegen.extract import HELPER_NAMES
from typegen.lexer import Lexer
from typegen.names import constructor_name, is_constructor_name, type_name
from typegen.source import Span
from typegen.tokens import Token, TokenKind

class _SyntaxAbort(Exception):
    """Unrecoverable syntax error; the diagnostic is already recorded."""


@dataclass
class Description:
    """A parsed ``.tyd`` file: free parameters plus one top-level type."""

    params: list[str]
    body: TypeExpr
    span: Span
    names: dict[str, Span] = field(default_factory=dict)  # rec/alias name -> span


class Parser:
    """Parses a list of tokens into a ``Description``."""

    def __init__(self, tokens: list[Token], filename: str = "<stdin>") -> None:
        self.tokens = tokens
        self.pos = 0
        self.filename = filename
        self.diagnostics: list[Diagnostic] = []
        self._scope: list[str] = []  # index 0 is the innermost binder
        self._param_count = 0
        self._used_params: set[int] = set()
        self._names: dict[str, Span] = {}
        self._declared: dict[str, tuple[str, TypeExpr]] = {}  # Reason name -> (name, body)

    # ── Token access ─────────────────────────────────────────────

    def _current(self) -> Token:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return self.tokens[-1]  # EOF

    def _at(self, kind: TokenKind) -> bool:
        return self._current().kind == kind

    def _advance(self) -> Token:
        tok = self._current()
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def _expect(self, kind: TokenKind, what: str | None = None) -> Token:
        if self._current().kind == kind:
            return self._advance()
        tok = self._current()
        found = repr(tok.value) if tok.value else "end of input"
        self._error("E200", f"expected {what or kind.name}, got {found}", tok.span)
        raise _SyntaxAbort

    def _error(
        self, code: str, message: str, span: Span,
        suggestions: list[Suggestion] | None = None,
    ) -> None:
        self.diagnostics.append(
            Diagnostic(
                severity=Severity.ERROR,
                code=code,
                message=message,
                labels=[DiagnosticLabel(span=span, message="")],
                suggestions=suggestions or [],
            )
        )

    def _warning(self, code: str, message: str, span: Span) -> None:
        self.diagnostics.append(
            Diagnostic(
                severity=Severity.WARNING,
                code=code,
                message=message,
                labels=[DiagnosticLabel(span=span, message="")],
            )
        )

    def _span(self, start: Span, end: Span) -> Span:
        return Span(
            self.filename,
            start.start_line, start.start_col,
            end.end_line, end.end_col,
        )

    def _previous(self) -> Token:
        return self.tokens[max(self.pos - 1, 0)]

    # ── Top-level parsing ────────────────────────────────────────

    def parse(self) -> Description:
        """Parse the whole token stream. Raises CompileError on any error."""
        try:
            params, param_spans = self._parse_params()
            start = self._current().span
            body = self._parse_expr()
            end = self._previous().span
            self._expect(TokenKind.EOF, "end of input")
        except _SyntaxAbort:
            raise CompileError(self.diagnostics) from None

        for i, name in enumerate(params):
            if i not in self._used_params:
                self._warning("W300", f"parameter '{name}' is never used", param_spans[i])

        if any(d.severity == Severity.ERROR for d in self.diagnostics):
            raise CompileError(self.diagnostics)
        return Description(params, body, self._span(start, end), dict(self._names))

    def _parse_params(self) -> tuple[list[str], list[Span]]:
        params: list[str] = []
        spans: list[Span] = []
        if not self._at(TokenKind.PARAMS):
            return params, spans
        self._advance()
        while True:
            tok = self._expect(TokenKind.IDENTIFIER, "parameter name")
            clash = [p for p in params if type_name(p) == type_name(tok.value)]
            if clash:
                self._error(
                    "E202",
                    f"duplicate parameter '{tok.value}'"
                    + (f" (same as '{clash[0]}')" if clash[0] != tok.value else ""),
                    tok.span,
                )
            params.append(tok.value)
            spans.append(tok.span)
            if not self._at(TokenKind.COMMA):
                break
            self._advance()
        self._scope = list(params)
        self._param_count = len(params)
        return params, spans

    # ── Expressions ──────────────────────────────────────────────

    def _parse_expr(self) -> TypeExpr:
        items = [self._parse_term()]
        while self._at(TokenKind.PLUS):
            self._advance()
            items.append(self._parse_term())
        return items[0] if len(items) == 1 else Sum(tuple(items))

    def _parse_term(self) -> TypeExpr:
        items = [self._parse_factor()]
        while self._at(TokenKind.STAR):
            self._advance()
            items.append(self._parse_factor())
        return items[0] if len(items) == 1 else Product(tuple(items))

    def _parse_factor(self) -> TypeExpr:
        tok = self._current()
        if tok.kind == TokenKind.VOID:
            self._advance()
            return VOID
        if tok.kind == TokenKind.UNIT:
            self._advance()
            return UNIT
        if tok.kind == TokenKind.IDENTIFIER:
            self._advance()
            return self._resolve(tok)
        if tok.kind == TokenKind.LPAREN:
            self._advance()
            inner = self._parse_expr()
            self._expect(TokenKind.RPAREN, "')'")
            return inner
        if tok.kind == TokenKind.REC:
            return self._parse_rec()
        if tok.kind == TokenKind.ALIAS:
            return self._parse_alias()
        found = repr(tok.value) if tok.value else "end of input"
        self._error("E200", f"expected a type, got {found}", tok.span)
        raise _SyntaxAbort

    def _parse_rec(self) -> TypeExpr:
        self._advance()  # rec
        name_tok = self._expect(TokenKind.IDENTIFIER, "type name")
        self._check_name(name_tok)
        self._expect(TokenKind.LBRACE, "'{'")

        self._scope.insert(0, name_tok.value)
        constructors: list[tuple[str, TypeExpr]] = []
        seen: set[str] = set()
        try:
            while not self._at(TokenKind.RBRACE):
                ctor_tok = self._expect(TokenKind.IDENTIFIER, "constructor name")
                ctor = constructor_name(ctor_tok.value)
                if not is_constructor_name(ctor_tok.value):
                    self._error(
                        "E205",
                        f"constructor '{ctor_tok.value}' must start with a letter",
                        ctor_tok.span,
                    )
                elif ctor in seen:
                    self._error(
                        "E204",
                        f"duplicate constructor '{ctor_tok.value}' in '{name_tok.value}'",
                        ctor_tok.span,
                    )
                seen.add(ctor)
                payload: TypeExpr = UNIT
                if self._at(TokenKind.COLON):
                    self._advance()
                    payload = self._parse_expr()
                constructors.append((ctor_tok.value, payload))
                if not self._at(TokenKind.COMMA):
                    break
                self._advance()
        finally:
            self._scope.pop(0)
        self._expect(TokenKind.RBRACE, "',' or '}'")

        expr = Recursive(name_tok.value, tuple(constructors))
        self._record(name_tok, expr)
        return expr

    def _parse_alias(self) -> TypeExpr:
        self._advance()  # alias
        name_tok = self._expect(TokenKind.IDENTIFIER, "type name")
        self._check_name(name_tok)
        self._expect(TokenKind.LBRACE, "'{'")
        body = self._parse_expr()
        self._expect(TokenKind.RBRACE, "'}'")

        expr = Named(name_tok.value, body)
        self._record(name_tok, expr)
        return expr

    # ── Names ────────────────────────────────────────────────────

    def _resolve(self, tok: Token) -> TypeExpr:
        name = tok.value
        if name in self._scope:
            index = self._scope.index(name)
            param = index - (len(self._scope) - self._param_count)
            if param >= 0:
                self._used_params.add(param)
            return BoundVar(index)

        suggestions = [
            Suggestion(message=f"did you mean '{m}'?", replacement=m)
            for m in difflib.get_close_matches(name, self._scope, n=1)
        ]
        self._error("E201", f"unknown type variable '{name}'", tok.span, suggestions)
        return UNIT

    def _check_name(self, tok: Token) -> None:
        reason_name = type_name(tok.value)
        if reason_name in HELPER_NAMES:
            self._error(
                "E203",
                f"'{tok.value}' is reserved for the generated '{reason_name}' type",
                tok.span,
            )

    def _record(self, tok: Token, expr: TypeExpr) -> None:
        reason_name = type_name(tok.value)
        previous = self._declared.get(reason_name)
        if previous is None:
            self._declared[reason_name] = (tok.value, expr)
            self._names[tok.value] = tok.span
            return
        first, body = previous
        if first != tok.value:
            self._error(
                "E206",
                f"'{tok.value}' and '{first}' are both emitted as type '{reason_name}'",
                tok.span,
            )
        elif body != expr:
            self._warning(
                "W301",
                f"'{tok.value}' is declared again with a different body; "
                f"only the first declaration is emitted",
                tok.span,
            )


def parse_source(source: str, filename: str = "<stdin>") -> tuple[Description, list[Diagnostic]]:
    """Lex and parse *source*. Returns the description and its warnings."""
    tokens = Lexer(source, filename).lex()
    parser = Parser(tokens, filename)
    desc = parser.parse()
    return desc, parser.diagnostics
