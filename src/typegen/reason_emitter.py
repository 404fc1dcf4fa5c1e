"""Generate ReasonML source from a parsed type description."""

from __future__ import annotations

from typegen.algebra import Environment, Named, Recursive, TypeExpr, free_variables
from typegen.errors import CompileError, Diagnostic, DiagnosticLabel, Severity
from typegen.extract import extract_defs
from typegen.names import type_name
from typegen.parser import Description
from typegen.reason_types import ReDecl, decl_name
from typegen.renderer import DEFAULT_TOP_NAME, ReasonRenderer
from typegen.translate import translate


class ReasonEmitter:
    """Emit every declaration a description needs, plus its top-level type."""

    def __init__(
        self,
        desc: Description,
        *,
        top_name: str = DEFAULT_TOP_NAME,
        emit_top: bool = True,
        line_width: int = 80,
    ) -> None:
        self._desc = desc
        self._env = Environment.of_variables(*desc.params)
        self._top_name = top_name
        self._emit_top = emit_top
        self._renderer = ReasonRenderer(line_width=line_width)

    def declarations(self) -> list[ReDecl]:
        return extract_defs(self._env, self._desc.body)

    def emit(self) -> str:
        """Render the full source unit. Raises CompileError on a name clash."""
        body = self._desc.body
        decls = self.declarations()
        if not self._emit_top or self._is_top(body):
            return self._renderer.render_unit(decls)

        clash = [d for d in decls if type_name(decl_name(d)) == type_name(self._top_name)]
        if clash:
            name = decl_name(clash[0])
            labels = []
            if name in self._desc.names:
                labels.append(DiagnosticLabel(self._desc.names[name], "declared here"))
            raise CompileError([Diagnostic(
                severity=Severity.ERROR,
                code="E400",
                message=f"type '{name}' clashes with the top-level alias '{self._top_name}'",
                labels=labels,
                notes=["rename the type or choose another top_name"],
            )])

        return self._renderer.render_unit(
            decls,
            translate(self._env, body),
            top_name=self._top_name,
            top_params=free_variables(self._env, body),
        )

    def render_declaration(self, name: str) -> str | None:
        """Rendered declaration of the type called *name*, if any."""
        for decl in self.declarations():
            if decl_name(decl) == name:
                return self._renderer.render(decl)
        return None

    def _is_top(self, body: TypeExpr) -> bool:
        # The top type already carries the synthetic name; ``type t = t;``
        # would be cyclic.
        return isinstance(body, (Recursive, Named)) and (
            type_name(body.name) == type_name(self._top_name)
        )
