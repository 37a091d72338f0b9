"""
Adapter: RuleEvaluator
Implementuje port Evaluator — iteracyjne przejście AST warunków (jawny stos).

Zasady:
  - porównanie wymaga zdefiniowanej zmiennej (inaczej UndefinedVariableError)
  - IS-MISSING(x) jest prawdziwe dla braku x oraz dla wartości 99 i 999
  - AND/OR z krótkim spięciem: prawa strona nie jest liczona,
    gdy lewa rozstrzyga wynik
  - liczone są WSZYSTKIE klauzule IF, wygrywa OSTATNIA prawdziwa
    w kolejności tekstu; gdy żadna, wartość z ELSE

evaluate()          — sam wynik (int)
evaluate_program()  — EvalResult z wynikami klauzul i krokami
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from contracts import (
    MISSING_SENTINELS,
    ClauseOutcome,
    ElseClause,
    Environment,
    EvalResult,
    Expression,
    GroupNode,
    IfClause,
    LogicalNode,
    MalformedClauseError,
    MissingNode,
    RelationalNode,
    ReturnStatement,
    RuleProgram,
    TokenKind,
    UndefinedVariableError,
)
from ports.reducer import Reducer

logger = logging.getLogger("decision_rules.evaluator")

# Mapowanie operatorów relacyjnych na porównania liczbowe
_OP_FUNCS = {
    ">":  lambda a, b: a > b,
    ">=": lambda a, b: a >= b,
    "<":  lambda a, b: a < b,
    "<=": lambda a, b: a <= b,
    "==": lambda a, b: a == b,
}

TraceHook = Callable[[str], None]


class RuleEvaluator:
    """Deterministyczny ewaluator programów reguł."""

    def __init__(self, reducer: Reducer, trace: Optional[TraceHook] = None) -> None:
        self._reducer = reducer
        self._trace = trace

    # -- Evaluator protocol ------------------------------------------------

    def evaluate(self, program: RuleProgram, env: Environment) -> int:
        return self.evaluate_program(program, env).value

    def evaluate_program(
        self,
        program: RuleProgram,
        env: Environment,
    ) -> EvalResult:
        program = self._reducer.reduce_program(program)
        steps: list[str] = []

        outcomes: list[ClauseOutcome] = []
        for index, clause in enumerate(program.clauses):
            value = self._if_value(clause)
            matched = self.eval_condition(clause.condition, env, steps)
            self._step(steps, f"IF #{index}: {'true' if matched else 'false'} -> {value}")
            outcomes.append(ClauseOutcome(index=index, matched=matched, value=value))

        else_value = self._else_value(program.otherwise)

        # Ostatnia prawdziwa klauzula w kolejności tekstu wygrywa
        for outcome in reversed(outcomes):
            if outcome.matched:
                self._step(steps, f"selected IF #{outcome.index} -> {outcome.value}")
                return EvalResult(
                    value=outcome.value,
                    selected=outcome.index,
                    outcomes=outcomes,
                    steps=steps,
                )

        self._step(steps, f"selected ELSE -> {else_value}")
        return EvalResult(value=else_value, selected=None, outcomes=outcomes, steps=steps)

    def eval_condition(
        self,
        expr: Expression,
        env: Environment,
        steps: Optional[list[str]] = None,
    ) -> bool:
        if steps is None:
            steps = []

        # (węzeł, lewa strona już policzona); wynik ostatniego węzła w `result`
        stack: list[tuple[Expression, bool]] = [(expr, False)]
        result = False

        while stack:
            node, left_done = stack.pop()

            if isinstance(node, RelationalNode):
                result = self._eval_relational(node, env, steps)
            elif isinstance(node, MissingNode):
                result = self._eval_missing(node, env, steps)
            elif isinstance(node, LogicalNode):
                if not left_done:
                    stack.append((node, True))
                    stack.append((node.left, False))
                elif node.op == "AND":
                    if result:
                        stack.append((node.right, False))
                    else:
                        self._step(steps, "AND: left side false, right side skipped")
                elif node.op == "OR":
                    if result:
                        self._step(steps, "OR: left side true, right side skipped")
                    else:
                        stack.append((node.right, False))
                else:
                    raise MalformedClauseError(f"nieznany operator logiczny {node.op!r}")
            elif isinstance(node, GroupNode):
                raise MalformedClauseError("nawias w warunku nie został zredukowany")
            else:
                raise MalformedClauseError(f"nieznany typ węzła AST: {type(node).__name__}")

        return result

    # -- Prywatne ----------------------------------------------------------

    def _eval_relational(
        self,
        node: RelationalNode,
        env: Environment,
        steps: list[str],
    ) -> bool:
        binding = env.lookup(node.identifier)
        if not binding.present:
            raise UndefinedVariableError(
                node.identifier,
                expression=f"{node.identifier} {node.op} {node.value}",
            )

        fn = _OP_FUNCS.get(node.op)
        if fn is None:
            raise MalformedClauseError(f"nieobsługiwany operator {node.op!r}")

        result = fn(binding.value, node.value)
        self._step(
            steps,
            f"{node.identifier} {node.op} {node.value}: "
            f"{_fmt(binding.value)} {node.op} {node.value} = {result}",
        )
        return result

    def _eval_missing(
        self,
        node: MissingNode,
        env: Environment,
        steps: list[str],
    ) -> bool:
        binding = env.lookup(node.identifier)
        result = not binding.present or binding.value in MISSING_SENTINELS
        shown = _fmt(binding.value) if binding.present else "absent"
        self._step(steps, f"IS-MISSING({node.identifier}): {shown} = {result}")
        return result

    def _if_value(self, clause: IfClause) -> int:
        if clause.keyword.kind != TokenKind.IF or clause.keyword.text != "IF":
            raise MalformedClauseError(
                f"oczekiwano słowa IF, otrzymano {clause.keyword.text!r}"
            )
        return self._return_value(clause.returns)

    def _else_value(self, clause: ElseClause) -> int:
        if clause.keyword.kind != TokenKind.ELSE or clause.keyword.text != "ELSE":
            raise MalformedClauseError(
                f"oczekiwano słowa ELSE, otrzymano {clause.keyword.text!r}"
            )
        return self._return_value(clause.returns)

    def _return_value(self, returns: ReturnStatement) -> int:
        if returns.keyword.kind != TokenKind.RETURN or returns.keyword.text != "RETURN":
            raise MalformedClauseError(
                f"oczekiwano słowa RETURN, otrzymano {returns.keyword.text!r}"
            )
        if returns.value_token.kind != TokenKind.NUMBER:
            raise MalformedClauseError(
                f"RETURN wymaga liczby, otrzymano {returns.value_token.text!r}"
            )
        return returns.value

    def _step(self, steps: list[str], message: str) -> None:
        steps.append(message)
        logger.debug(message)
        if self._trace is not None:
            self._trace(message)


def _fmt(v: object) -> str:
    """Liczby całkowite bez części ułamkowej (5.0 → 5)."""
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)
