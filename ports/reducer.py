"""
Port: Reducer
Odpowiedzialność: normalizacja AST do kanonicznego drzewa binarnego.
"""
from typing import Protocol, runtime_checkable

from contracts import Expression, RuleProgram


@runtime_checkable
class Reducer(Protocol):
    def reduce(self, expr: Expression) -> Expression:
        """
        Removes redundant GroupNode wrappers, descending into both branches
        of every LogicalNode. Every node of the result is a RelationalNode,
        a MissingNode or a binary LogicalNode.
        Idempotent: reduce(reduce(e)) == reduce(e). Never mutates its input.
        """
        ...

    def reduce_program(self, program: RuleProgram) -> RuleProgram:
        """Returns a new RuleProgram with every clause condition reduced."""
        ...
