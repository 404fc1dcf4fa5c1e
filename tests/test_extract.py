"""Tests for definition extraction."""

from __future__ import annotations

from typegen.algebra import (
    EMPTY_ENV,
    UNIT,
    VOID,
    BoundVar,
    Declaration,
    Environment,
    Named,
    Product,
    Recursive,
    Sum,
)
from typegen.extract import (
    EITHER_ENV,
    EITHER_HELPER,
    ExtractionState,
    extract_defs,
    extract_with_state,
)
from typegen.reason_types import (
    RE_UNIT,
    ReAlias,
    ReApp,
    ReTuple,
    ReVar,
    ReVariant,
    decl_name,
    referenced_names,
)
from tests.helpers import LIST

A = ReVar("a")
ENV_A = Environment.of_variables("a")

EITHER_DECL = ReVariant(
    Declaration("either", ("a", "b")),
    (("Left", ReVar("a")), ("Right", ReVar("b"))),
)

# rec tree { Node: a * rec forest { Nil, Cons: tree * forest } } under [a]
FOREST = Recursive("forest", (("Nil", UNIT), ("Cons", Product((BoundVar(1), BoundVar(0))))))
TREE = Recursive("tree", (("Node", Product((BoundVar(1), FOREST))),))


def names(decls) -> list[str]:
    return [decl_name(d) for d in decls]


class TestHelpers:
    def test_void_yields_one_empty_variant(self):
        assert extract_defs(EMPTY_ENV, VOID) == [ReVariant(Declaration("void"), ())]

    def test_void_twice_is_emitted_once(self):
        assert names(extract_defs(EMPTY_ENV, Product((VOID, VOID)))) == ["void"]

    def test_either_helper_has_two_parameters(self):
        assert extract_defs(EITHER_ENV, EITHER_HELPER) == [EITHER_DECL]

    def test_ternary_sum_emits_one_either(self):
        decls = extract_defs(ENV_A, Sum((LIST, UNIT, VOID)))
        assert sorted(names(decls)) == ["either", "list", "void"]

    def test_sum_helper_comes_after_elements_before_reversal(self):
        decls, _ = extract_with_state(ENV_A, Sum((LIST, VOID)), ExtractionState())
        assert names(decls) == ["list", "void", "either"]

    def test_top_level_order_is_reversed(self):
        assert names(extract_defs(ENV_A, Sum((LIST, VOID)))) == ["either", "void", "list"]


class TestScenarios:
    def test_unit_times_sum(self):
        expr = Product((UNIT, Sum((UNIT, UNIT))))
        assert extract_defs(EMPTY_ENV, expr) == [EITHER_DECL]

    def test_list(self):
        assert extract_defs(ENV_A, LIST) == [
            ReVariant(
                Declaration("list", ("a",)),
                (
                    ("Nil", RE_UNIT),
                    ("Cons", ReTuple((A, ReApp("list", (A,))))),
                ),
            )
        ]

    def test_leaves_need_nothing(self):
        assert extract_defs(EMPTY_ENV, UNIT) == []
        assert extract_defs(ENV_A, BoundVar(0)) == []

    def test_named_alias(self):
        expr = Named("pair", Product((BoundVar(0), BoundVar(0))))
        assert extract_defs(ENV_A, expr) == [
            ReAlias(Declaration("pair", ("a",)), ReTuple((A, A))),
        ]

    def test_named_with_sum_body_declares_helper_first(self):
        expr = Named("flag", Sum((UNIT, UNIT)))
        decls = extract_defs(EMPTY_ENV, expr)
        assert names(decls) == ["either", "flag"]
        assert decls[1] == ReAlias(
            Declaration("flag"), ReApp("either", (RE_UNIT, RE_UNIT)),
        )


class TestCycles:
    def test_mutual_recursion_terminates_with_two_declarations(self):
        decls = extract_defs(ENV_A, TREE)
        assert names(decls) == ["forest", "tree"]
        forest, tree = decls
        assert tree == ReVariant(
            Declaration("tree", ("a",)),
            (("Node", ReTuple((A, ReApp("forest", (A,))))),),
        )
        assert forest == ReVariant(
            Declaration("forest", ("a",)),
            (
                ("Nil", RE_UNIT),
                ("Cons", ReTuple((ReApp("tree", (A,)), ReApp("forest", (A,))))),
            ),
        )

    def test_unfolded_cycle_visits_each_name_once(self):
        ping = Recursive("ping", (("Ping", Recursive(
            "pong", (("Pong", Recursive("ping", (("Ping", BoundVar(1)),))),),
        )),))
        assert names(extract_defs(EMPTY_ENV, ping)) == ["pong", "ping"]

    def test_shared_siblings_are_deduplicated(self):
        assert names(extract_defs(ENV_A, Product((LIST, LIST, LIST)))) == ["list"]

    def test_self_reference_in_sibling_constructors(self):
        nat = Recursive("nat", (
            ("Z", UNIT),
            ("S", BoundVar(0)),
            ("Double", Product((BoundVar(0), BoundVar(0)))),
        ))
        assert names(extract_defs(EMPTY_ENV, nat)) == ["nat"]


class TestProperties:
    EXPR = Product((
        Named("pair", Product((LIST, Sum((BoundVar(0), VOID))))),
        Sum((LIST, UNIT, VOID)),
    ))

    def test_no_duplicates(self):
        found = names(extract_defs(ENV_A, self.EXPR))
        assert len(found) == len(set(found))
        assert set(found) == {"pair", "list", "either", "void"}

    def test_dependencies_come_first(self):
        decls = extract_defs(ENV_A, self.EXPR)
        position = {decl_name(d): i for i, d in enumerate(decls)}
        for i, decl in enumerate(decls):
            if isinstance(decl, ReAlias):
                refs = referenced_names(decl.body)
            else:
                refs = set()
                for _, payload in decl.constructors:
                    refs |= referenced_names(payload)
            for ref in refs - {decl_name(decl)}:
                assert position[ref] <= i, f"{ref} used by {decl_name(decl)} before it is declared"

    def test_deterministic(self):
        assert extract_defs(ENV_A, self.EXPR) == extract_defs(ENV_A, self.EXPR)


class TestState:
    def test_state_records_emitted_names(self):
        _, state = extract_with_state(ENV_A, Sum((LIST, UNIT)), ExtractionState())
        assert "list" in state
        assert "either" in state
        assert "void" not in state

    def test_reused_state_skips_known_names(self):
        _, state = extract_with_state(ENV_A, LIST, ExtractionState())
        again, same = extract_with_state(ENV_A, LIST, state)
        assert again == []
        assert same == state

    def test_fresh_state_per_request(self):
        first = extract_defs(ENV_A, LIST)
        second = extract_defs(ENV_A, LIST)
        assert first == second != []

    def test_names_compared_as_rendered(self):
        _, state = extract_with_state(EMPTY_ENV, Recursive("List", (("Nil", UNIT),)), ExtractionState())
        assert "list" in state
        assert "List" in state

    def test_case_variants_declared_once(self):
        expr = Product((Recursive("List", (("Nil", UNIT),)), Recursive("list", (("Nil", UNIT),))))
        assert [decl_name(d) for d in extract_defs(EMPTY_ENV, expr)] == ["List"]
