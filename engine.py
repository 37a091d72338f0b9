"""
engine.py — fasada rdzenia DecisionRules.

  tekst → RegexLexer → RecursiveDescentRuleParser → ASTReducer → RuleEvaluator

Funkcje są czyste: każde wywołanie buduje własne tokeny i AST,
nic nie jest cache'owane między wywołaniami.
"""
from __future__ import annotations

from typing import Mapping, Optional, Union

from adapters.evaluator.rule_evaluator import RuleEvaluator, TraceHook
from adapters.lexer.regex_lexer import RegexLexer
from adapters.reducer.ast_reducer import ASTReducer
from adapters.rule_parser.recursive_descent_parser import RecursiveDescentRuleParser
from contracts import Environment, EvalResult, Number, RuleProgram, Token

EnvLike = Union[Environment, Mapping[str, Optional[Number]], None]

_LEXER = RegexLexer()
_PARSER = RecursiveDescentRuleParser(lexer=_LEXER)
_REDUCER = ASTReducer()


def as_environment(env: EnvLike) -> Environment:
    if isinstance(env, Environment):
        return env
    return Environment.of(dict(env or {}))


def tokenize(rule_text: str) -> list[Token]:
    return _LEXER.tokenize(rule_text)


def parse(rule_text: str) -> RuleProgram:
    """Parsuje i redukuje regułę. Zwraca kanoniczny RuleProgram."""
    return _REDUCER.reduce_program(_PARSER.parse(rule_text))


def evaluate_rule(
    rule_text: str,
    env: EnvLike = None,
    trace: Optional[TraceHook] = None,
) -> EvalResult:
    program = _PARSER.parse(rule_text)
    evaluator = RuleEvaluator(reducer=_REDUCER, trace=trace)
    return evaluator.evaluate_program(program, as_environment(env))


def evaluate(
    rule_text: str,
    env: EnvLike = None,
    trace: Optional[TraceHook] = None,
) -> int:
    return evaluate_rule(rule_text, env, trace=trace).value
