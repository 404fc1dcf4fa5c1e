"""Token kinds and token representation for the description lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typegen.source import Span


class TokenKind(Enum):
    # Keywords
    PARAMS = auto()
    REC = auto()
    ALIAS = auto()
    VOID = auto()
    UNIT = auto()

    # Operators
    PLUS = auto()
    STAR = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    COMMA = auto()
    COLON = auto()

    # Identifiers
    IDENTIFIER = auto()

    # Special
    EOF = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    span: Span


KEYWORDS: dict[str, TokenKind] = {
    "params": TokenKind.PARAMS,
    "rec": TokenKind.REC,
    "alias": TokenKind.ALIAS,
    "void": TokenKind.VOID,
    "unit": TokenKind.UNIT,
}

PUNCTUATION: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "*": TokenKind.STAR,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    ",": TokenKind.COMMA,
    ":": TokenKind.COLON,
}
