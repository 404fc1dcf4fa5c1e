"""Collect every named declaration a type expression depends on.

The walk emits a type's own declaration and marks its name as emitted
*before* descending into the constructor bodies, so a type that refers to
itself (directly or through another type) is only ever visited once. The
resulting list has definers ahead of their dependencies; ``extract_defs``
reverses it so referenced names are declared first.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from typegen.algebra import (
    BoundVar,
    Declaration,
    EnclosingDecl,
    Environment,
    Named,
    Product,
    Recursive,
    Sum,
    TypeExpr,
    Unit,
    Void,
    free_variables,
)
from typegen.names import type_name
from typegen.reason_types import ReAlias, ReDecl, ReVariant
from typegen.translate import EITHER_NAME, VOID_NAME, translate

# ── Canonical helpers ───────────────────────────────────────────

VOID_HELPER = Recursive(VOID_NAME, ())

# Index 0 inside the constructors is ``either`` itself, so the two
# parameters sit at 1 and 2.
EITHER_HELPER = Recursive(
    EITHER_NAME, (("Left", BoundVar(1)), ("Right", BoundVar(2))),
)
EITHER_ENV = Environment.of_variables("a", "b")

HELPER_NAMES = frozenset({VOID_NAME, EITHER_NAME})


@dataclass(frozen=True)
class ExtractionState:
    """Reason identifiers whose declarations have already been emitted.

    Names are stored as they render, so ``List`` and ``list`` count as
    one type.
    """

    emitted: frozenset[str] = frozenset()

    def __contains__(self, name: str) -> bool:
        return type_name(name) in self.emitted

    def mark(self, name: str) -> ExtractionState:
        return ExtractionState(self.emitted | {type_name(name)})


# ── Public API ─────────────────────────────────────────────────


def extract_defs(env: Environment, expr: TypeExpr) -> list[ReDecl]:
    """Declarations needed by *expr*, dependencies before their users."""
    decls, _ = extract_with_state(env, expr, ExtractionState())
    decls.reverse()
    return decls


def extract_with_state(
    env: Environment, expr: TypeExpr, state: ExtractionState,
) -> tuple[list[ReDecl], ExtractionState]:
    """Walk *expr* under *env*, skipping names already in *state*.

    Returns the declarations in emission order (definer first) together
    with the grown state.
    """
    if isinstance(expr, Void):
        return extract_with_state(Environment(), VOID_HELPER, state)

    if isinstance(expr, (Unit, BoundVar)):
        return [], state

    if isinstance(expr, Product):
        return _extract_all(env, expr.items, state)

    if isinstance(expr, Sum):
        decls, state = _extract_all(env, expr.items, state)
        helper, state = extract_with_state(EITHER_ENV, EITHER_HELPER, state)
        return decls + helper, state

    if isinstance(expr, Recursive):
        if expr.name in state:
            return [], state
        decl = Declaration(expr.name, free_variables(env, expr))
        inner = env.prepend(EnclosingDecl(decl))
        variant = ReVariant(
            decl, tuple((c, translate(inner, body)) for c, body in expr.constructors),
        )
        state = state.mark(expr.name)
        nested, state = _extract_all(inner, [body for _, body in expr.constructors], state)
        return [variant, *nested], state

    if isinstance(expr, Named):
        if expr.name in state:
            return [], state
        alias = ReAlias(
            Declaration(expr.name, free_variables(env, expr)),
            translate(env, expr.body),
        )
        state = state.mark(expr.name)
        nested, state = extract_with_state(env, expr.body, state)
        return [alias, *nested], state

    raise TypeError(f"not a type expression: {expr!r}")


def _extract_all(
    env: Environment, exprs: Iterable[TypeExpr], state: ExtractionState,
) -> tuple[list[ReDecl], ExtractionState]:
    decls: list[ReDecl] = []
    for expr in exprs:
        found, state = extract_with_state(env, expr, state)
        decls.extend(found)
    return decls, state
