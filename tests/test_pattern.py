from __future__ import annotations

from dataclasses import dataclass

import pytest

from slotgraph.lang import Bind, Language
from slotgraph.pattern import (
    ENodePattern,
    ParseError,
    Pattern,
    PVar,
    RecExpr,
    SubstPattern,
    pattern_to_re,
    re_to_pattern,
)
from slotgraph.slot import Slot
from slotgraph.types import AppliedId


class Arith(Language):
    pass


@dataclass(frozen=True)
class Lam(Arith, op="lam"):
    body: Bind[AppliedId]


@dataclass(frozen=True)
class App(Arith, op="app"):
    fun: AppliedId
    arg: AppliedId


@dataclass(frozen=True)
class Var(Arith, op="var"):
    slot: Slot


@dataclass(frozen=True)
class Let(Arith, op="let"):
    body: Bind[AppliedId]
    value: AppliedId


@dataclass(frozen=True)
class Add(Arith, op="add"):
    left: AppliedId
    right: AppliedId


@dataclass(frozen=True)
class Mul(Arith, op="mul"):
    left: AppliedId
    right: AppliedId


@dataclass(frozen=True)
class Number(Arith):
    value: int


@dataclass(frozen=True)
class Sym(Arith):
    name: str


NULL = AppliedId.null()


@pytest.mark.parametrize(
    "text",
    [
        "(add 2 (mul 2 3))",
        "(lam $0 (var $0))",
        "(app (lam $1 (var $1)) x)",
        "(let $x (var $x) 42)",
        "(var $f7)",
        "a",
    ],
)
def test_rec_expr_round_trip(text):
    assert str(RecExpr.parse(text, Arith)) == text


def test_rec_expr_structure():
    re = RecExpr.parse("(add 2 (mul 2 3))", Arith)
    assert re.node == Add(NULL, NULL)
    assert re.children[0] == RecExpr(Number(2), ())
    assert re.children[1].node == Mul(NULL, NULL)
    assert [c.node for c in re.children[1].children] == [Number(2), Number(3)]


def test_whitespace_is_normalised():
    re = RecExpr.parse("  (add\t2\n   (mul 2 3))  ", Arith)
    assert str(re) == "(add 2 (mul 2 3))"


def test_binder_slot_is_kept():
    re = RecExpr.parse("(lam $0 (var $0))", Arith)
    assert re.node == Lam(Bind(Slot.numeric(0), NULL))
    assert re.children[0].node == Var(Slot.numeric(0))


@pytest.mark.parametrize(
    "text",
    [
        "(app (lam $1 ?b) ?t)",
        "(let $1 (app ?a ?b) ?e)",
        "?b[(var $1) := ?t]",
        "?a[?x := ?y][?u := ?v]",
    ],
)
def test_pattern_round_trip(text):
    assert str(Pattern.parse(text, Arith)) == text


def test_pattern_structure():
    pat = Pattern.parse("(app (lam $1 ?b) ?t)", Arith)
    assert isinstance(pat, ENodePattern)
    assert pat.node == App(NULL, NULL)
    assert pat.children[1] == PVar("t")
    lam = pat.children[0]
    assert lam.node == Lam(Bind(Slot.numeric(1), NULL))
    assert lam.children == (PVar("b"),)


def test_subst_pattern_structure():
    pat = Pattern.parse("?b[(var $1) := ?t]", Arith)
    assert isinstance(pat, SubstPattern)
    assert pat.body == PVar("b")
    assert pat.var == ENodePattern(Var(Slot.numeric(1)), ())
    assert pat.term == PVar("t")


def test_chained_substs_nest_left():
    pat = Pattern.parse("?a[?x := ?y][?u := ?v]", Arith)
    assert isinstance(pat, SubstPattern)
    assert pat.body == SubstPattern(PVar("a"), PVar("x"), PVar("y"))
    assert pat.term == PVar("v")


def test_pvar_display():
    assert str(PVar("x")) == "?x"
    assert repr(PVar("x")) == "?x"


def test_pattern_re_round_trip():
    re = RecExpr.parse("(app (lam $0 (add (var $0) 1)) 2)", Arith)
    assert pattern_to_re(re_to_pattern(re)) == re
    assert str(re_to_pattern(re)) == str(re)


def test_pattern_to_re_rejects_pvar():
    pat = Pattern.parse("(add ?a 1)", Arith)
    with pytest.raises(ValueError):
        pattern_to_re(pat)


def test_rec_expr_rejects_pattern_variable():
    with pytest.raises(ValueError):
        RecExpr.parse("?x", Arith)


@pytest.mark.parametrize(
    "text, kind",
    [
        ("(add 2 3) x", ParseError.REMAINING_REST),
        ("?", ParseError.TOKEN_STATE),
        ("$ x", ParseError.TOKEN_STATE),
        ("(foo 1)", ParseError.FROM_SYNTAX_FAILED),
        ("($x)", ParseError.PARSE_STATE),
        (")", ParseError.PARSE_STATE),
        ("", ParseError.PARSE_STATE),
        ("(add 2", ParseError.PARSE_STATE),
        ("?b[?x ?t]", ParseError.EXPECTED_COLON_EQUALS),
        ("?b[?x := ?t ?u]", ParseError.EXPECTED_RBRACKET),
    ],
)
def test_parse_errors(text, kind):
    with pytest.raises(ParseError) as info:
        Pattern.parse(text, Arith)
    assert info.value.kind == kind


def test_remaining_rest_payload():
    with pytest.raises(ParseError) as info:
        RecExpr.parse("(add 2 3) x", Arith)
    assert [str(t) for t in info.value.rest] == ["x"]


def test_from_syntax_failed_payload():
    with pytest.raises(ParseError) as info:
        RecExpr.parse("(foo 1)", Arith)
    assert info.value.rest == ("foo", NULL)