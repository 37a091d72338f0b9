import pytest

import engine
from contracts import Environment, LexError, RuleSyntaxError, UndefinedVariableError


def test_single_clause_rule():
    rule = "IF (x == 99) RETURN 10 ELSE RETURN 8"

    assert engine.evaluate(rule, {"x": 99}) == 10
    assert engine.evaluate(rule, {"x": 1}) == 8


def test_last_truthy_clause_wins():
    rule = """
    IF (x == 99) RETURN 10
    IF (x == 99) RETURN 2
    ELSE RETURN 8
    """

    assert engine.evaluate(rule, {"x": 99}) == 2


def test_and_short_circuit_tolerates_undefined_right_side():
    assert engine.evaluate("IF (x == 1 AND y > 1) RETURN 1 ELSE RETURN 0", {"x": 0}) == 0


def test_or_short_circuit_tolerates_undefined_right_side():
    assert engine.evaluate("IF (x == 1 OR y > 1) RETURN 1 ELSE RETURN 0", {"x": 1}) == 1


@pytest.mark.parametrize("values, expected", [
    ({}, 1),
    ({"x": 99}, 1),
    ({"x": 999}, 1),
    ({"x": 5}, 0),
])
def test_missing_sentinels(values, expected):
    assert engine.evaluate("IF (IS-MISSING(x)) RETURN 1 ELSE RETURN 0", values) == expected


def test_redundant_parentheses_parse_to_equal_canonical_programs():
    a = engine.parse("IF ((x > 0)) RETURN 1 ELSE RETURN 0")
    b = engine.parse("IF (x > 0) RETURN 1 ELSE RETURN 0")

    assert a.clauses[0].condition == b.clauses[0].condition


def test_undefined_variable_names_identifier():
    with pytest.raises(UndefinedVariableError) as exc:
        engine.evaluate("IF (x > 1) RETURN 1 ELSE RETURN 0", {})

    assert exc.value.identifier == "x"


@pytest.mark.parametrize("rule", [
    "IF (x > 1) RETURN 1",
    "IF ((x > 1) RETURN 1 ELSE RETURN 0",
    "IF (x > 1)) RETURN 1 ELSE RETURN 0",
    "",
])
def test_malformed_rules_raise_instead_of_defaulting(rule):
    with pytest.raises(RuleSyntaxError):
        engine.evaluate(rule, {"x": 5})


def test_lex_error_propagates_from_evaluate():
    with pytest.raises(LexError):
        engine.evaluate("IF (x != 1) RETURN 1 ELSE RETURN 0", {"x": 5})


def test_accepts_environment_instance_and_none():
    rule = "IF (IS-MISSING(x)) RETURN 4 ELSE RETURN 0"

    assert engine.evaluate(rule, Environment.of({"x": 3})) == 0
    assert engine.evaluate(rule, None) == 4


def test_evaluate_rule_exposes_selection():
    result = engine.evaluate_rule(
        "IF (x > 0) RETURN 1 IF (x > 100) RETURN 2 ELSE RETURN 0", {"x": 3}
    )

    assert result.value == 1
    assert result.selected == 0


def test_calls_do_not_share_state():
    rule = "IF (x > 0) RETURN 1 ELSE RETURN 0"

    assert engine.evaluate(rule, {"x": 1}) == 1
    assert engine.evaluate(rule, {"x": 0}) == 0
    assert engine.parse(rule) == engine.parse(rule)
    assert engine.parse(rule) is not engine.parse(rule)


def test_tokenize_exposes_lexer():
    assert [t.text for t in engine.tokenize("ELSE RETURN 3")] == ["ELSE", "RETURN", "3"]
