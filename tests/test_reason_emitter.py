"""End-to-end tests: description source -> Reason source."""

from __future__ import annotations

import pytest

from typegen.errors import CompileError
from typegen.reason_emitter import ReasonEmitter
from tests.helpers import emit, parse

LIST_SRC = "params a\nrec list { Nil, Cons: a * list }"
LIST_DECL = "type list('a) = Nil | Cons('a, list('a));"


class TestEmit:
    def test_list(self):
        assert emit(LIST_SRC) == LIST_DECL + "\n\ntype t('a) = list('a);\n"

    def test_sum_pulls_in_either(self):
        assert emit("unit * (unit + unit)") == (
            "type either('a, 'b) = Left('a) | Right('b);\n"
            "\n"
            "type t = (unit, either(unit, unit));\n"
        )

    def test_mutual_recursion_orders_dependencies_first(self):
        src = "params a\nrec tree { Node: a * rec forest { Nil, Cons: tree * forest } }"
        assert emit(src) == (
            "type forest('a) = Nil | Cons(tree('a), forest('a));\n"
            "\n"
            "type tree('a) = Node('a, forest('a));\n"
            "\n"
            "type t('a) = tree('a);\n"
        )

    def test_void(self):
        assert emit("void") == "type void;\n\ntype t = void;\n"

    def test_plain_unit(self):
        assert emit("unit") == "type t = unit;\n"

    def test_bare_parameter(self):
        assert emit("params a\na") == "type t('a) = 'a;\n"

    def test_alias(self):
        assert emit("alias pair { unit * unit }") == (
            "type pair = (unit, unit);\n\ntype t = pair;\n"
        )

    def test_three_way_sum_nests_either(self):
        assert emit("unit + unit + void").endswith(
            "type t = either(unit, either(unit, void));\n"
        )

    def test_either_declared_once(self):
        assert emit("(unit + unit) * (unit + void)").count("type either(") == 1

    def test_top_named_type_is_not_aliased(self):
        assert emit("rec t { A, B: t }") == "type t = A | B(t);\n"

    def test_no_top(self):
        assert emit(LIST_SRC, emit_top=False) == LIST_DECL + "\n"

    def test_custom_top_name(self):
        assert emit(LIST_SRC, top_name="root").endswith("type root('a) = list('a);\n")

    def test_line_width(self):
        assert emit(LIST_SRC, line_width=20, emit_top=False) == (
            "type list('a) =\n  | Nil\n  | Cons('a, list('a));\n"
        )

    def test_unused_parameter_not_in_top(self):
        assert emit("params a, b\na") == "type t('a) = 'a;\n"

    def test_deterministic(self):
        assert emit(LIST_SRC) == emit(LIST_SRC)


class TestTopNameClash:
    def test_clash_raises(self):
        with pytest.raises(CompileError) as exc:
            emit("rec t { A } * unit")
        diag = exc.value.diagnostics[0]
        assert diag.code == "E400"
        assert diag.labels[0].message == "declared here"

    def test_clash_avoided_with_other_name(self):
        assert emit("rec t { A } * unit", top_name="root") == (
            "type t = A;\n\ntype root = (t, unit);\n"
        )

    def test_no_clash_without_top(self):
        assert emit("rec t { A } * unit", emit_top=False) == "type t = A;\n"


class TestRenderDeclaration:
    def test_known_name(self):
        assert ReasonEmitter(parse(LIST_SRC)).render_declaration("list") == LIST_DECL

    def test_helper(self):
        assert ReasonEmitter(parse("void")).render_declaration("void") == "type void;"

    def test_unknown_name(self):
        assert ReasonEmitter(parse(LIST_SRC)).render_declaration("tree") is None


class TestNameNormalisation:
    @pytest.mark.parametrize(("source", "code"), [
        ("rec Either { A, B } * (unit + unit)", "E203"),
        ("rec Void { A } * void", "E203"),
        ("rec List { Nil } * rec list { Nil, X }", "E206"),
        ("params A, a\nA * a", "E202"),
        ("rec x { _a, B }", "E205"),
    ])
    def test_names_that_would_render_badly_are_rejected(self, source, code):
        with pytest.raises(CompileError) as exc:
            emit(source)
        assert code in [d.code for d in exc.value.diagnostics]

    def test_type_name_lowercased(self):
        assert emit("rec MyList { Nil }") == "type myList = Nil;\n\ntype t = myList;\n"

    def test_constructor_capitalised(self):
        assert emit("rec x { a, B }") == "type x = A | B;\n\ntype t = x;\n"

    def test_keyword_type_name(self):
        assert emit("rec type { A }") == "type type_ = A;\n\ntype t = type_;\n"
