"""Render ReasonML declarations to source text."""

from __future__ import annotations

from typegen.algebra import Declaration
from typegen.layout import comma_list, group, hsep, parens, vcat
from typegen.names import constructor_name, type_name, variable_name
from typegen.reason_types import (
    ReAlias,
    ReApp,
    ReDecl,
    ReTuple,
    ReType,
    ReUnit,
    ReVar,
    ReVariant,
)

DEFAULT_TOP_NAME = "t"


class ReasonRenderer:
    """Turn Reason declarations into statements."""

    def __init__(self, *, line_width: int = 80) -> None:
        self.line_width = line_width

    # ── Types ──────────────────────────────────────────────────

    def render_type(self, ty: ReType) -> str:
        if isinstance(ty, ReUnit):
            return "unit"
        if isinstance(ty, ReTuple):
            return parens(comma_list(self.render_type(t) for t in ty.items))
        if isinstance(ty, ReVar):
            return variable_name(ty.name)
        if isinstance(ty, ReApp):
            if not ty.args:
                return type_name(ty.name)
            return type_name(ty.name) + parens(
                comma_list(self.render_type(a) for a in ty.args)
            )
        raise TypeError(f"not a Reason type: {ty!r}")

    # ── Declarations ───────────────────────────────────────────

    def render(self, decl: ReDecl) -> str:
        head = self._declared(decl.decl)
        if isinstance(decl, ReAlias):
            return f"{head} = {self.render_type(decl.body)};"
        if isinstance(decl, ReVariant):
            if not decl.constructors:
                return f"{head};"
            ctors = [self._constructor(c, t) for c, t in decl.constructors]
            return group(f"{head} =", ctors, "|", ";", width=self.line_width)
        raise TypeError(f"not a Reason declaration: {decl!r}")

    def render_unit(
        self,
        decls: list[ReDecl],
        top: ReType | None = None,
        top_name: str = DEFAULT_TOP_NAME,
        top_params: tuple[str, ...] = (),
    ) -> str:
        """All declarations, optionally followed by ``type t = <top>;``.

        *top_params* are the free variables the top type mentions.
        """
        blocks = [self.render(d) for d in decls]
        if top is not None:
            blocks.append(self.render(ReAlias(Declaration(top_name, top_params), top)))
        return vcat(blocks) + "\n"

    # ── Helpers ────────────────────────────────────────────────

    def _declared(self, decl: Declaration) -> str:
        name = type_name(decl.name)
        if decl.params:
            name += parens(comma_list(variable_name(p) for p in decl.params))
        return hsep("type", name)

    def _constructor(self, name: str, payload: ReType) -> str:
        ctor = constructor_name(name)
        if isinstance(payload, ReUnit):
            return ctor
        if isinstance(payload, ReTuple):
            return ctor + self.render_type(payload)
        return ctor + parens(self.render_type(payload))
