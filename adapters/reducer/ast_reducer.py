"""
Adapter: ASTReducer
Implementuje port Reducer — usuwa nadmiarowe nawiasy z AST warunku.

  ((((x > 0)))) AND y > 0   →   AND(x > 0, y > 0)

Każdy krok buduje nowe węzły; wejściowe drzewo pozostaje nietknięte.
Przejście iteracyjne (post-order na jawnym stosie): długie łańcuchy
i głębokie nawiasy nie są ograniczone limitem rekursji.
"""
from __future__ import annotations

from contracts import (
    Expression,
    GroupNode,
    IfClause,
    LogicalNode,
    MalformedClauseError,
    MissingNode,
    RelationalNode,
    RuleProgram,
)


class ASTReducer:
    """Normalizacja do kanonicznego drzewa binarnego."""

    # -- Reducer protocol --------------------------------------------------

    def reduce(self, expr: Expression) -> Expression:
        stack: list[tuple[Expression, bool]] = [(expr, False)]
        done: list[Expression] = []

        while stack:
            node, children_done = stack.pop()
            while isinstance(node, GroupNode):
                node = node.expression

            if isinstance(node, (RelationalNode, MissingNode)):
                done.append(node)
            elif isinstance(node, LogicalNode):
                if children_done:
                    right = done.pop()
                    left = done.pop()
                    done.append(LogicalNode(op=node.op, left=left, right=right))
                else:
                    stack.append((node, True))
                    stack.append((node.right, False))
                    stack.append((node.left, False))
            else:
                raise MalformedClauseError(f"nieznany typ węzła AST: {type(node).__name__}")

        return done.pop()

    def reduce_program(self, program: RuleProgram) -> RuleProgram:
        clauses = [
            IfClause(
                keyword=clause.keyword,
                condition=self.reduce(clause.condition),
                returns=clause.returns,
            )
            for clause in program.clauses
        ]
        return RuleProgram(clauses=clauses, otherwise=program.otherwise)


def expression_depth(expr: Expression) -> int:
    """Liczba poziomów drzewa warunku (liść = 1, nawias też liczy się jako poziom)."""
    deepest = 0
    stack: list[tuple[Expression, int]] = [(expr, 1)]
    while stack:
        node, depth = stack.pop()
        deepest = max(deepest, depth)
        if isinstance(node, LogicalNode):
            stack.append((node.left, depth + 1))
            stack.append((node.right, depth + 1))
        elif isinstance(node, GroupNode):
            stack.append((node.expression, depth + 1))
    return deepest
