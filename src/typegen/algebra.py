"""Language-independent algebraic type descriptions.

A description is a closed term over void, unit, n-ary sums and products,
de Bruijn variables, recursive (least fixpoint) types and transparent named
aliases. Variables are resolved against an ``Environment``: index 0 is the
innermost binding. Entering a ``Recursive`` body prepends the type's own
declaration, so ``BoundVar(0)`` inside a constructor means "this type".
"""

from __future__ import annotations

from dataclasses import dataclass

from typegen.errors import ContractViolation

# ── Type expressions ────────────────────────────────────────────


@dataclass(frozen=True)
class Void:
    pass


@dataclass(frozen=True)
class Unit:
    pass


@dataclass(frozen=True)
class Sum:
    items: tuple[TypeExpr, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))
        if len(self.items) < 2:
            raise ContractViolation(
                "E300", f"sum needs at least 2 alternatives, got {len(self.items)}",
            )


@dataclass(frozen=True)
class Product:
    items: tuple[TypeExpr, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))
        if len(self.items) < 2:
            raise ContractViolation(
                "E301", f"product needs at least 2 factors, got {len(self.items)}",
            )


@dataclass(frozen=True)
class BoundVar:
    index: int

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ContractViolation("E303", f"negative variable index {self.index}")


@dataclass(frozen=True)
class Recursive:
    name: str
    constructors: tuple[tuple[str, TypeExpr], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "constructors", tuple((c, body) for c, body in self.constructors),
        )


@dataclass(frozen=True)
class Named:
    name: str
    body: TypeExpr


TypeExpr = Void | Unit | Sum | Product | BoundVar | Recursive | Named

VOID = Void()
UNIT = Unit()


# ── Declarations and bindings ───────────────────────────────────


@dataclass(frozen=True)
class Declaration:
    """A declared type name with its ordered formal parameters."""

    name: str
    params: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", tuple(self.params))


@dataclass(frozen=True)
class FreeVariable:
    """An abstract, uninstantiated type parameter."""

    name: str


@dataclass(frozen=True)
class EnclosingDecl:
    """The type currently being defined; references apply it to its params."""

    decl: Declaration


Binding = FreeVariable | EnclosingDecl


@dataclass(frozen=True)
class Environment:
    """Immutable de Bruijn context. Index 0 is the most recent binding."""

    bindings: tuple[Binding, ...] = ()

    @staticmethod
    def of_variables(*names: str) -> Environment:
        """Environment of free variables, ``names[0]`` at index 0."""
        return Environment(tuple(FreeVariable(n) for n in names))

    def prepend(self, binding: Binding) -> Environment:
        return Environment((binding, *self.bindings))

    def lookup(self, index: int) -> Binding:
        if not 0 <= index < len(self.bindings):
            raise ContractViolation(
                "E302",
                f"variable index {index} is out of range for an environment "
                f"of {len(self.bindings)} binding(s)",
            )
        return self.bindings[index]

    def __len__(self) -> int:
        return len(self.bindings)


EMPTY_ENV = Environment()


# ── Variable analysis ───────────────────────────────────────────


def used_indices(expr: TypeExpr) -> frozenset[int]:
    """Environment indices referenced by *expr*, relative to its own scope."""
    if isinstance(expr, (Void, Unit)):
        return frozenset()
    if isinstance(expr, (Sum, Product)):
        return frozenset().union(*(used_indices(x) for x in expr.items))
    if isinstance(expr, BoundVar):
        return frozenset({expr.index})
    if isinstance(expr, Recursive):
        inner = frozenset().union(*(used_indices(body) for _, body in expr.constructors))
        return frozenset(i - 1 for i in inner if i > 0)
    if isinstance(expr, Named):
        return used_indices(expr.body)
    raise TypeError(f"not a type expression: {expr!r}")


def free_variables(env: Environment, expr: TypeExpr) -> tuple[str, ...]:
    """Ordered parameter names *expr* actually depends on under *env*.

    Indices are visited innermost first. A reference to an enclosing
    declaration depends on that declaration's own parameters.
    """
    names: list[str] = []
    for index in sorted(used_indices(expr)):
        binding = env.lookup(index)
        if isinstance(binding, FreeVariable):
            candidates: tuple[str, ...] = (binding.name,)
        else:
            candidates = binding.decl.params
        for name in candidates:
            if name not in names:
                names.append(name)
    return tuple(names)
