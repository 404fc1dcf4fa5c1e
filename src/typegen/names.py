"""Reason identifiers for description names.

Every stage that compares type names (the parser's duplicate checks,
the extractor's emitted set, the renderer) goes through these functions,
so two names are the same type exactly when they print the same.
"""

from __future__ import annotations

# Lowercase identifiers Reason will not accept as type or variable names.
REASON_KEYWORDS: frozenset[str] = frozenset({
    "and", "as", "assert", "begin", "class", "constraint", "do", "done",
    "downto", "else", "end", "esfun", "exception", "external", "false",
    "for", "fun", "function", "functor", "if", "in", "include", "inherit",
    "initializer", "lazy", "let", "method", "module", "mutable", "new",
    "nonrec", "object", "of", "open", "or", "pri", "pub", "rec", "sig",
    "struct", "switch", "then", "to", "true", "try", "type", "val",
    "virtual", "when", "while", "with",
})


def _lower_first(name: str) -> str:
    return name[:1].lower() + name[1:]


def type_name(name: str) -> str:
    """``MyList`` -> ``myList``; keywords get a trailing underscore."""
    ident = _lower_first(name)
    if ident in REASON_KEYWORDS:
        return ident + "_"
    return ident


def constructor_name(name: str) -> str:
    return name[:1].upper() + name[1:]


def variable_name(name: str) -> str:
    return "'" + type_name(name)


def is_constructor_name(name: str) -> bool:
    """Whether *name* can become a Reason constructor (leading letter)."""
    return name[:1].isascii() and name[:1].isalpha()
