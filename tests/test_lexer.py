"""Tests for the description lexer."""

from __future__ import annotations

import pytest

from typegen.errors import CompileError
from typegen.lexer import Lexer
from typegen.tokens import TokenKind


def lex(source: str) -> list[tuple[TokenKind, str]]:
    """Helper: lex source and return (kind, value) pairs, excluding EOF."""
    tokens = Lexer(source).lex()
    return [(t.kind, t.value) for t in tokens if t.kind != TokenKind.EOF]


def kinds(source: str) -> list[TokenKind]:
    tokens = Lexer(source).lex()
    return [t.kind for t in tokens if t.kind != TokenKind.EOF]


class TestLexerBasic:
    def test_empty_source(self):
        tokens = Lexer("").lex()
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.EOF

    def test_keywords(self):
        assert kinds("params rec alias void unit") == [
            TokenKind.PARAMS, TokenKind.REC, TokenKind.ALIAS,
            TokenKind.VOID, TokenKind.UNIT,
        ]

    def test_identifiers(self):
        assert lex("list Cons my_type a'") == [
            (TokenKind.IDENTIFIER, "list"),
            (TokenKind.IDENTIFIER, "Cons"),
            (TokenKind.IDENTIFIER, "my_type"),
            (TokenKind.IDENTIFIER, "a'"),
        ]

    def test_keyword_prefix_is_identifier(self):
        assert lex("units") == [(TokenKind.IDENTIFIER, "units")]

    def test_punctuation(self):
        assert kinds("+ * ( ) { } , :") == [
            TokenKind.PLUS, TokenKind.STAR, TokenKind.LPAREN, TokenKind.RPAREN,
            TokenKind.LBRACE, TokenKind.RBRACE, TokenKind.COMMA, TokenKind.COLON,
        ]

    def test_no_spaces_needed(self):
        assert kinds("rec t{A:unit}") == [
            TokenKind.REC, TokenKind.IDENTIFIER, TokenKind.LBRACE,
            TokenKind.IDENTIFIER, TokenKind.COLON, TokenKind.UNIT, TokenKind.RBRACE,
        ]


class TestComments:
    def test_line_comment(self):
        assert lex("// list of things\nunit") == [(TokenKind.UNIT, "unit")]

    def test_trailing_comment(self):
        assert kinds("unit // done") == [TokenKind.UNIT]


class TestSpans:
    def test_identifier_span(self):
        tokens = Lexer("params abc", "f.tyd").lex()
        span = tokens[1].span
        assert (span.file, span.start_line, span.start_col, span.end_col) == ("f.tyd", 1, 8, 10)

    def test_second_line(self):
        tokens = Lexer("params a\n  unit").lex()
        assert tokens[2].span.start_line == 2
        assert tokens[2].span.start_col == 3

    def test_single_char_span(self):
        tokens = Lexer("+").lex()
        assert tokens[0].span.start_col == tokens[0].span.end_col == 1


class TestLexerErrors:
    def test_unexpected_character(self):
        with pytest.raises(CompileError) as exc:
            Lexer("unit & unit").lex()
        assert exc.value.diagnostics[0].code == "E100"
        assert "'&'" in exc.value.diagnostics[0].message

    def test_all_errors_collected(self):
        with pytest.raises(CompileError) as exc:
            Lexer("# unit $").lex()
        assert len(exc.value.diagnostics) == 2

    def test_non_ascii_letter_rejected(self):
        with pytest.raises(CompileError):
            Lexer("é").lex()
