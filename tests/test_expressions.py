import pytest

from builders import (
    array,
    assign,
    bigint,
    binary,
    call,
    ident,
    lit,
    logical,
    member,
    not_,
    regex,
    sequence,
    unary,
    update,
)

from esflow.utils.negator import negate_truthiness
from esflow.utils.stringifier import UNEXPECTED, stringify


def elements(*values):
    return array(*[None if value is None else lit(value) for value in values])


@pytest.mark.parametrize(
    "expression, expected",
    [
        (elements(), "[]"),
        (elements(1), "[1]"),
        (elements(1, 2), "[1,2]"),
        (elements(1, 2, 3, 4, 5), "[1,2,3,4,5]"),
        (elements(None), "[,]"),
        (elements(None, None), "[,,]"),
        (elements(None, None, None, None, None), "[,,,,,]"),
        (elements(1, None), "[1,,]"),
        (elements(1, None, 3), "[1,,3]"),
        (elements(1, 2, 3, None, None), "[1,2,3,,,]"),
    ],
)
def test_array_expressions(expression, expected):
    assert stringify(expression) == expected


@pytest.mark.parametrize(
    "expression, expected",
    [
        (lit("foo"), '"foo"'),
        (lit(None), "null"),
        (lit(True), "true"),
        (lit(False), "false"),
        (lit(42), "42"),
        (lit(42.0), "42"),
        (lit(1.5), "1.5"),
        (lit(float("inf")), "Infinity"),
        (regex("ab+c", "gi"), "/ab+c/gi"),
        (bigint("10"), "10n"),
        (lit('say "hi"\n'), '"say \\"hi\\"\\n"'),
        (lit("caf\u00e9"), '"caf\u00e9"'),
        (ident("x"), "x"),
        ({"type": "ThisExpression"}, "this"),
    ],
)
def test_literals_and_identifiers(expression, expected):
    assert stringify(expression) == expected


@pytest.mark.parametrize(
    "expression, expected",
    [
        (binary("+", ident("a"), lit(1)), "a + 1"),
        (binary("*", binary("+", ident("a"), ident("b")), ident("c")), "(a + b) * c"),
        (logical("&&", ident("a"), logical("||", ident("b"), ident("c"))), "a && (b || c)"),
        (assign(ident("x"), binary("-", ident("y"), lit(2)), "-="), "x -= y - 2"),
        (unary("-", ident("x")), "-x"),
        (unary("typeof", ident("x")), "typeof x"),
        (unary("void", lit(0)), "void 0"),
        (unary("-", unary("-", ident("x"))), "- -x"),
        (unary("+", update("++", ident("x"), prefix=True)), "+ ++x"),
        (unary("-", update("--", ident("x"))), "-x--"),
        (not_(not_(ident("x"))), "!!x"),
        (not_(binary("<", ident("i"), lit(10))), "!(i < 10)"),
        (update("++", ident("i")), "i++"),
        (update("--", ident("i"), prefix=True), "--i"),
        (call("f", ident("a"), lit(1)), "f(a, 1)"),
        (call(member(ident("console"), ident("log")), lit("hi")), 'console.log("hi")'),
        (member(ident("a"), lit(0), computed=True), "a[0]"),
        (member(ident("a"), ident("i"), computed=True), "a[i]"),
        ({"type": "NewExpression", "callee": ident("Foo"), "arguments": [lit(1)]}, "new Foo(1)"),
        (
            {"type": "ConditionalExpression", "test": ident("a"), "consequent": lit(1), "alternate": lit(2)},
            "a ? 1 : 2",
        ),
        (sequence(ident("a"), ident("b")), "a, b"),
        (
            {
                "type": "ObjectExpression",
                "properties": [
                    {"type": "Property", "key": ident("a"), "value": lit(1), "computed": False},
                    {"type": "Property", "key": ident("k"), "value": lit(2), "computed": True},
                ],
            },
            "{ a: 1, [k]: 2 }",
        ),
    ],
)
def test_compound_expressions(expression, expected):
    assert stringify(expression) == expected


def test_unsupported_expression():
    assert stringify({"type": "ArrowFunctionExpression"}) == UNEXPECTED
    assert stringify(None) == UNEXPECTED


class TestNegator:
    def test_boolean_literal_is_flipped(self):
        assert negate_truthiness(lit(True)) == lit(False)
        assert negate_truthiness(lit(False)) == lit(True)

    def test_logical_not_is_unwrapped(self):
        assert negate_truthiness(not_(ident("x"))) == ident("x")

    @pytest.mark.parametrize(
        "operator, negated",
        [("==", "!="), ("!=", "=="), ("===", "!=="), ("!==", "===")],
    )
    def test_equality_is_swapped(self, operator, negated):
        assert stringify(negate_truthiness(binary(operator, ident("a"), lit(1)))) == f"a {negated} 1"

    def test_de_morgan(self):
        expression = logical("&&", ident("a"), binary("===", ident("b"), lit(1)))

        assert stringify(negate_truthiness(expression)) == "!a || (b !== 1)"

    def test_nested_de_morgan(self):
        expression = logical("||", not_(ident("a")), logical("&&", ident("b"), ident("c")))

        assert stringify(negate_truthiness(expression)) == "a && (!b || !c)"

    def test_other_expressions_are_wrapped(self):
        assert stringify(negate_truthiness(ident("x"))) == "!x"
        assert stringify(negate_truthiness(binary("<", ident("a"), ident("b")))) == "!(a < b)"
        assert stringify(negate_truthiness(lit(0))) == "!0"

    def test_input_is_not_modified(self):
        expression = binary("===", ident("a"), lit(1))

        negate_truthiness(expression)

        assert expression["operator"] == "==="
