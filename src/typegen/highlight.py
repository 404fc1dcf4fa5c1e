"""Pygments support: a lexer for .tyd sources and Reason output highlighting."""

from __future__ import annotations

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexer import RegexLexer, bygroups, words
from pygments.lexers import get_lexer_by_name
from pygments.token import (
    Comment,
    Keyword,
    Name,
    Operator,
    Punctuation,
    Text,
)


class TydLexer(RegexLexer):
    """Pygments lexer for type description sources."""

    name = "Typegen description"
    aliases = ["tyd", "typegen"]
    filenames = ["*.tyd"]
    mimetypes = ["text/x-tyd"]

    tokens = {
        "root": [
            (r"\s+", Text),
            (r"//.*$", Comment.Single),
            # Declared names follow rec/alias
            (
                r"\b(rec|alias)(\s+)([A-Za-z_][A-Za-z0-9_']*)",
                bygroups(Keyword.Declaration, Text, Name.Class),
            ),
            (words(("params",), prefix=r"\b", suffix=r"\b"), Keyword.Namespace),
            (words(("void", "unit"), prefix=r"\b", suffix=r"\b"), Keyword.Type),
            # Constructor names (word followed by colon)
            (r"[A-Za-z_][A-Za-z0-9_']*(?=\s*:)", Name.Function),
            (r"[A-Z][A-Za-z0-9_']*", Name.Function),
            (r"[a-z_][A-Za-z0-9_']*", Name.Variable),
            (r"[+*]", Operator),
            (r"[(),{}:]", Punctuation),
        ],
    }


def highlight_reason(text: str) -> str:
    """Colorize generated Reason source for a terminal."""
    return highlight(text, get_lexer_by_name("reasonml"), TerminalFormatter())
