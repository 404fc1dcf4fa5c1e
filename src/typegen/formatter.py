"""Canonical pretty-printer for type descriptions.

The inverse of the parser: de Bruijn indices are turned back into the
names in scope, and operators are parenthesized only where the grammar
needs it. A ``rec`` that does not fit on one line is broken one
constructor per line.
"""

from __future__ import annotations

from typegen.algebra import (
    BoundVar,
    Named,
    Product,
    Recursive,
    Sum,
    TypeExpr,
    Unit,
    Void,
)
from typegen.layout import comma_list, indent
from typegen.parser import Description

# Binding strength (higher binds tighter)
_PREC_SUM = 1
_PREC_PRODUCT = 2
_PREC_ATOM = 3


class DescriptionFormatter:
    """Format a parsed Description back to canonical source text."""

    def __init__(self, *, line_width: int = 80) -> None:
        self.line_width = line_width

    # ── Public API ─────────────────────────────────────────────

    def format(self, desc: Description) -> str:
        lines: list[str] = []
        if desc.params:
            lines.append(f"params {comma_list(desc.params)}")
        lines.append(self.format_expr(desc.body, list(desc.params)))
        return "\n".join(lines) + "\n"

    def format_expr(self, expr: TypeExpr, scope: list[str], parent_prec: int = 0) -> str:
        if isinstance(expr, Void):
            return "void"
        if isinstance(expr, Unit):
            return "unit"
        if isinstance(expr, BoundVar):
            return scope[expr.index]
        if isinstance(expr, Sum):
            text = " + ".join(self.format_expr(x, scope, _PREC_SUM + 1) for x in expr.items)
            return self._wrap(text, _PREC_SUM, parent_prec)
        if isinstance(expr, Product):
            text = " * ".join(
                self.format_expr(x, scope, _PREC_PRODUCT + 1) for x in expr.items
            )
            return self._wrap(text, _PREC_PRODUCT, parent_prec)
        if isinstance(expr, Recursive):
            return self._format_rec(expr, scope)
        if isinstance(expr, Named):
            return f"alias {expr.name} {{ {self.format_expr(expr.body, scope)} }}"
        raise TypeError(f"not a type expression: {expr!r}")

    # ── Helpers ────────────────────────────────────────────────

    def _format_rec(self, expr: Recursive, scope: list[str]) -> str:
        inner = [expr.name, *scope]
        if not expr.constructors:
            return f"rec {expr.name} {{}}"
        ctors = [self._format_ctor(name, body, inner) for name, body in expr.constructors]
        flat = f"rec {expr.name} {{ {comma_list(ctors)} }}"
        if "\n" not in flat and len(flat) <= self.line_width:
            return flat
        body = "\n".join(indent(c + ",") for c in ctors)
        return f"rec {expr.name} {{\n{body}\n}}"

    def _format_ctor(self, name: str, body: TypeExpr, scope: list[str]) -> str:
        if isinstance(body, Unit):
            return name
        return f"{name}: {self.format_expr(body, scope)}"

    @staticmethod
    def _wrap(text: str, prec: int, parent_prec: int) -> str:
        if prec < parent_prec:
            return f"({text})"
        return text
