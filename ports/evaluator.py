"""
Port: Evaluator
Odpowiedzialność: deterministyczne wyliczenie wyniku programu reguł.
"""
from typing import Optional, Protocol, runtime_checkable

from contracts import Environment, EvalResult, Expression, RuleProgram


@runtime_checkable
class Evaluator(Protocol):
    def evaluate(self, program: RuleProgram, env: Environment) -> int:
        """
        Evaluates every IfClause condition in source order, then returns the
        value of the LAST clause whose condition was true. Falls back to the
        ElseClause value when no condition holds.
        Raises UndefinedVariableError when a relational comparison needs a
        variable absent from env. Errors abort the whole call.
        """
        ...

    def evaluate_program(
        self,
        program: RuleProgram,
        env: Environment,
    ) -> EvalResult:
        """
        Same as evaluate(), but returns EvalResult with:
          - value: selected integer
          - selected: index of the winning IfClause (None for ELSE)
          - outcomes: (matched, value) for every IfClause
          - steps: human-readable evaluation steps
        """
        ...

    def eval_condition(
        self,
        expr: Expression,
        env: Environment,
        steps: Optional[list[str]] = None,
    ) -> bool:
        """
        Evaluates a single condition with short-circuit AND/OR.
        IS-MISSING(x) is true when x is absent or equals 99 or 999, and
        never raises.
        """
        ...
