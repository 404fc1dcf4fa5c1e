"""Shared test helpers for the typegen test suite."""

from __future__ import annotations

from typegen.algebra import UNIT, BoundVar, Product, Recursive
from typegen.errors import CompileError, Diagnostic
from typegen.parser import Description, parse_source
from typegen.reason_emitter import ReasonEmitter

# rec list { Nil, Cons: a * list } under params [a]
LIST = Recursive("list", (("Nil", UNIT), ("Cons", Product((BoundVar(1), BoundVar(0))))))


def parse(source: str) -> Description:
    """Parse source, asserting no errors. Warnings are ignored."""
    desc, _ = parse_source(source, "<test>")
    return desc


def parse_warnings(source: str) -> list[Diagnostic]:
    _, warnings = parse_source(source, "<test>")
    return warnings


def parse_fails(source: str, error_code: str) -> list[Diagnostic]:
    """Parse source, asserting the given error code appears."""
    try:
        parse_source(source, "<test>")
    except CompileError as e:
        matching = [d for d in e.diagnostics if d.code == error_code]
        assert matching, (
            f"Expected error {error_code} but got: "
            f"{[f'{d.code}: {d.message}' for d in e.diagnostics]}"
        )
        return matching
    raise AssertionError(f"Expected error {error_code} but parsing succeeded")


def emit(source: str, **options) -> str:
    """Parse and emit Reason source."""
    return ReasonEmitter(parse(source), **options).emit()
