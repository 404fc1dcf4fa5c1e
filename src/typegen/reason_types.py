"""ReasonML type expressions and declarations.

Plain data: the translator builds these, the renderer turns them into text.
"""

from __future__ import annotations

from dataclasses import dataclass

from typegen.algebra import Declaration

# ── Type expressions ────────────────────────────────────────────


@dataclass(frozen=True)
class ReUnit:
    pass


@dataclass(frozen=True)
class ReTuple:
    items: tuple[ReType, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))


@dataclass(frozen=True)
class ReVar:
    name: str


@dataclass(frozen=True)
class ReApp:
    """A named type applied to arguments; no arguments is a bare name."""

    name: str
    args: tuple[ReType, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))


ReType = ReUnit | ReTuple | ReVar | ReApp

RE_UNIT = ReUnit()


# ── Declarations ────────────────────────────────────────────────


@dataclass(frozen=True)
class ReAlias:
    decl: Declaration
    body: ReType


@dataclass(frozen=True)
class ReVariant:
    decl: Declaration
    constructors: tuple[tuple[str, ReType], ...] = ()  # empty: uninhabited

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "constructors", tuple((c, t) for c, t in self.constructors),
        )


ReDecl = ReAlias | ReVariant


def decl_name(decl: ReDecl) -> str:
    return decl.decl.name


def referenced_names(ty: ReType) -> set[str]:
    """Names of every type applied anywhere inside *ty*."""
    if isinstance(ty, ReApp):
        names = {ty.name}
        for arg in ty.args:
            names |= referenced_names(arg)
        return names
    if isinstance(ty, ReTuple):
        found: set[str] = set()
        for item in ty.items:
            found |= referenced_names(item)
        return found
    return set()
