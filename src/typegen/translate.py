"""Type algebra -> ReasonML type expression."""

from __future__ import annotations

from typegen.algebra import (
    BoundVar,
    Environment,
    FreeVariable,
    Named,
    Product,
    Recursive,
    Sum,
    TypeExpr,
    Unit,
    Void,
    free_variables,
)
from typegen.reason_types import RE_UNIT, ReApp, ReTuple, ReType, ReVar

# Names of the canonical helper types. The extractor emits their
# declarations; the translator only refers to them.
VOID_NAME = "void"
EITHER_NAME = "either"


def translate(env: Environment, expr: TypeExpr) -> ReType:
    """Map *expr*, evaluated under *env*, to a Reason type expression."""
    if isinstance(expr, Void):
        return ReApp(VOID_NAME)
    if isinstance(expr, Unit):
        return RE_UNIT
    if isinstance(expr, Sum):
        return _fold_either([translate(env, x) for x in expr.items])
    if isinstance(expr, Product):
        return ReTuple(tuple(translate(env, x) for x in expr.items))
    if isinstance(expr, BoundVar):
        binding = env.lookup(expr.index)
        if isinstance(binding, FreeVariable):
            return ReVar(binding.name)
        return _apply(binding.decl.name, binding.decl.params)
    if isinstance(expr, (Recursive, Named)):
        return _apply(expr.name, free_variables(env, expr))
    raise TypeError(f"not a type expression: {expr!r}")


def _apply(name: str, params: tuple[str, ...]) -> ReApp:
    return ReApp(name, tuple(ReVar(p) for p in params))


def _fold_either(items: list[ReType]) -> ReType:
    # a + b + c == either(a, either(b, c))
    result = items[-1]
    for item in reversed(items[:-1]):
        result = ReApp(EITHER_NAME, (item, result))
    return result
