import pytest

from parcomb.Prim import regex, run, string
from parcomb.Expr import (
    Assoc, Infix, Operator, Postfix, Prefix, build_expression_parser,
    chainl, chainl1, chainr, chainr1,
)

integer = regex("[0-9]+").map(int)


def sub(x, y): return x - y
def power(x, y): return x ** y


minus = string("-").map(lambda _: sub)
caret = string("^").map(lambda _: power)


# --- Chains ---

def test_chainl1_associativity():
    # (9 - 3) - 2, not 9 - (3 - 2)
    res = run(chainl1(integer, minus), "9-3-2")
    assert res.value == 4
    assert res.stream.at_end


def test_chainr1_associativity():
    # 2 ^ (3 ^ 2), not (2 ^ 3) ^ 2
    res = run(chainr1(integer, caret), "2^3^2")
    assert res.value == 512
    assert res.stream.at_end


def test_chain_single_operand():
    assert run(chainl1(integer, minus), "7").value == 7
    assert run(chainr1(integer, caret), "7").value == 7


def test_chain_requires_an_operand():
    res = run(chainl1(integer, minus), "x")
    assert res.messages == ['expected pattern "[0-9]+"']
    assert not run(chainr1(integer, caret), "x").ok


def test_dangling_operator_is_not_consumed():
    res = run(chainl1(integer, minus), "9-3-")
    assert res.value == 6
    assert res.stream.remaining == "-"

    res = run(chainr1(integer, caret), "2^3^")
    assert res.value == 8
    assert res.stream.remaining == "^"


def test_chain_defaults():
    assert run(chainl(integer, minus, 0), "x").value == 0
    assert run(chainr(integer, caret, 1), "x").value == 1
    assert run(chainl(integer, minus, 0), "5-1").value == 4


def test_chainl1_long_input():
    n = 5000
    res = run(chainl1(integer, minus), "-".join(["1"] * n))
    assert res.value == 1 - (n - 1)


# --- Expression tables ---

def test_arithmetic_precedence():
    def add(x, y): return x + y
    def mul(x, y): return x * y
    def div(x, y): return x // y
    def neg(x): return -x

    # Highest precedence first
    table = [
        [Prefix(string("-").map(lambda _: neg))],
        [Infix(string("*").map(lambda _: mul), Assoc.LEFT),
         Infix(string("/").map(lambda _: div), Assoc.LEFT)],
        [Infix(string("+").map(lambda _: add), Assoc.LEFT),
         Infix(string("-").map(lambda _: sub), Assoc.LEFT)]
    ]

    expr_parser = build_expression_parser(table, integer)

    def calc(s):
        return run(expr_parser, s).value

    assert calc("1+2") == 3
    assert calc("2*3") == 6
    assert calc("2+3*4") == 14
    assert calc("2*3+4") == 10
    assert calc("10-5-2") == 3
    assert calc("-3*2") == -6
    assert calc("-2+3") == 1


def test_right_associativity():
    expr = build_expression_parser([[Infix(caret, Assoc.RIGHT)]], integer)
    assert run(expr, "2^3^2").value == 512


def test_postfix():
    fact = string("!").map(lambda _: lambda n: n * 10)
    expr = build_expression_parser([[Postfix(fact)]], integer)
    assert run(expr, "3!").value == 30
    assert run(expr, "3").value == 3


def test_non_associative():
    eq = string("=").map(lambda _: lambda x, y: x == y)
    expr = build_expression_parser([[Infix(eq, Assoc.NONE)]], integer)

    assert run(expr, "1=1").value is True
    res = run(expr, "1=1=1")
    assert res.value is True
    assert res.stream.remaining == "=1"


def test_unknown_operator_kind():
    with pytest.raises(ValueError):
        build_expression_parser([[Operator()]], integer)


def test_mixed_associativity_level():
    # Left operators bind tighter than right ones sharing a level.
    table = [[Infix(minus, Assoc.LEFT), Infix(caret, Assoc.RIGHT)]]
    expr = build_expression_parser(table, integer)

    assert run(expr, "2^3^2").value == 512
    assert run(expr, "8-3^2").value == 25     # (8-3)^2
    assert run(expr, "2^3-1").value == 4      # 2^(3-1)
    assert run(expr, "9-3-2^2").value == 16   # ((9-3)-2)^2


def test_prefix_and_postfix_on_one_level():
    neg = string("-").map(lambda _: lambda n: -n)
    tens = string("!").map(lambda _: lambda n: n * 10)
    expr = build_expression_parser([[Prefix(neg), Postfix(tens)]], integer)

    res = run(expr, "-3!")
    assert res.value == -30
    assert res.stream.at_end
    assert run(expr, "-3").value == -3
