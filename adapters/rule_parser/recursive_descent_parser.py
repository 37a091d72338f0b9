"""
Adapter: RecursiveDescentRuleParser
Implementuje port RuleParser.

Gramatyka:
  program    = if_clause+ else_clause
  if_clause  = IF condition return
  else       = ELSE return
  return     = RETURN NUMBER
  condition  = '(' cond ')'
  cond       = (term | missing | '(' cond ')') [ (AND|OR) cond ]
  term       = IDENTIFIER relop NUMBER
  missing    = IS-MISSING '(' IDENTIFIER ')'
  relop      = '>' | '>=' | '<' | '<=' | '==' | IGUALQUE

Alternatywy `cond` próbowane w stałej kolejności: term, missing, grupa.
Wystarcza jeden token podglądu: każda zaczyna się innym tokenem.

AND i OR nie mają priorytetów: łańcuch jest prawostronny, operator obejmuje
wszystko po swojej prawej stronie:
  a AND b OR c  →  AND(a, OR(b, c))

Zagnieżdżony nawias daje GroupNode; usuwa go dopiero reducer.
"""
from __future__ import annotations

from typing import Optional

from contracts import (
    ElseClause,
    Expression,
    GroupNode,
    IfClause,
    LogicalNode,
    MissingNode,
    RelationalNode,
    ReturnStatement,
    RuleProgram,
    RuleSyntaxError,
    Token,
    TokenKind,
)
from ports.lexer import Lexer

_RELATIONAL_KINDS = {
    TokenKind.GT: ">",
    TokenKind.GTE: ">=",
    TokenKind.LT: "<",
    TokenKind.LTE: "<=",
    TokenKind.EQ: "==",
}

_LOGICAL_KINDS = {
    TokenKind.AND: "AND",
    TokenKind.OR: "OR",
}

_DISPLAY: dict[TokenKind, str] = {
    TokenKind.LPAREN: "'('",
    TokenKind.RPAREN: "')'",
    TokenKind.IF: "IF",
    TokenKind.ELSE: "ELSE",
    TokenKind.RETURN: "RETURN",
    TokenKind.IS_MISSING: "IS-MISSING",
    TokenKind.NUMBER: "integer literal",
    TokenKind.IDENTIFIER: "identifier",
}

_END = "end of input"


class _Chain:
    """Operandy i operatory jednego poziomu nawiasów."""

    def __init__(self) -> None:
        self.operands: list[Expression] = []
        self.ops: list[str] = []

    def fold(self) -> Expression:
        # a AND b OR c → AND(a, OR(b, c))
        node = self.operands[-1]
        for op, left in zip(reversed(self.ops), reversed(self.operands[:-1])):
            node = LogicalNode(op=op, left=left, right=node)  # type: ignore[arg-type]
        return node


class _Parser:
    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._pos = 0
        if tokens:
            last = tokens[-1]
            self._end_offset = last.offset + len(last.text)
        else:
            self._end_offset = 0

    # -- Nawigacja ------------------------------------------------------------

    def _peek(self) -> Optional[Token]:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _peek_kind(self) -> Optional[TokenKind]:
        tok = self._peek()
        return tok.kind if tok is not None else None

    def _consume(self) -> Token:
        t = self._tokens[self._pos]
        self._pos += 1
        return t

    def _error(self, expected: str) -> RuleSyntaxError:
        tok = self._peek()
        if tok is None:
            return RuleSyntaxError(position=self._end_offset, expected=expected, found=_END)
        return RuleSyntaxError(position=tok.offset, expected=expected, found=repr(tok.text))

    def _expect(self, kind: TokenKind) -> Token:
        if self._peek_kind() != kind:
            raise self._error(_DISPLAY.get(kind, kind.value))
        return self._consume()

    # -- Program --------------------------------------------------------------

    def parse(self) -> RuleProgram:
        if not self._tokens:
            raise self._error("IF")

        clauses = [self._if_clause()]
        while self._peek_kind() == TokenKind.IF:
            clauses.append(self._if_clause())

        if self._peek_kind() != TokenKind.ELSE:
            raise self._error("IF or ELSE")
        otherwise = self._else_clause()

        if self._pos < len(self._tokens):
            raise self._error(_END)

        return RuleProgram(clauses=clauses, otherwise=otherwise)

    def _if_clause(self) -> IfClause:
        keyword = self._expect(TokenKind.IF)
        condition = self._condition()
        returns = self._return()
        return IfClause(keyword=keyword, condition=condition, returns=returns)

    def _else_clause(self) -> ElseClause:
        keyword = self._expect(TokenKind.ELSE)
        return ElseClause(keyword=keyword, returns=self._return())

    def _return(self) -> ReturnStatement:
        keyword = self._expect(TokenKind.RETURN)
        value_token = self._expect(TokenKind.NUMBER)
        return ReturnStatement(keyword=keyword, value_token=value_token)

    # -- Warunki --------------------------------------------------------------

    def _condition(self) -> Expression:
        self._expect(TokenKind.LPAREN)
        node = self._conditional()
        self._expect(TokenKind.RPAREN)
        return node

    def _conditional(self) -> Expression:
        # Jawny stos zamiast rekursji: jedna ramka na poziom nawiasu,
        # łańcuch AND/OR zbierany płasko i składany od prawej.
        frames: list[_Chain] = [_Chain()]
        while True:
            kind = self._peek_kind()
            if kind == TokenKind.LPAREN:
                self._consume()
                frames.append(_Chain())
                continue
            if kind == TokenKind.IDENTIFIER:
                node: Expression = self._logical_term()
            elif kind == TokenKind.IS_MISSING:
                node = self._missing()
            else:
                raise self._error("identifier, IS-MISSING or '('")

            while True:
                frames[-1].operands.append(node)
                op = _LOGICAL_KINDS.get(self._peek_kind())  # type: ignore[arg-type]
                if op is not None:
                    self._consume()
                    frames[-1].ops.append(op)
                    break
                if len(frames) == 1:
                    return frames.pop().fold()
                self._expect(TokenKind.RPAREN)
                node = GroupNode(expression=frames.pop().fold())

    def _logical_term(self) -> RelationalNode:
        identifier = self._expect(TokenKind.IDENTIFIER)
        op = _RELATIONAL_KINDS.get(self._peek_kind())  # type: ignore[arg-type]
        if op is None:
            raise self._error("relational operator (>, >=, <, <=, ==)")
        self._consume()
        number = self._expect(TokenKind.NUMBER)
        return RelationalNode(
            identifier=identifier.text,
            op=op,  # type: ignore[arg-type]
            value=int(number.text),
        )

    def _missing(self) -> MissingNode:
        self._expect(TokenKind.IS_MISSING)
        self._expect(TokenKind.LPAREN)
        identifier = self._expect(TokenKind.IDENTIFIER)
        self._expect(TokenKind.RPAREN)
        return MissingNode(identifier=identifier.text)


# ──────────────────────────────────────────────────────────────────────────────
# Adapter
# ──────────────────────────────────────────────────────────────────────────────

class RecursiveDescentRuleParser:
    """
    Parsuje tekst reguły do surowego RuleProgram.
    Błędy rzucane jako LexError / RuleSyntaxError, bez wartości domyślnych.
    """

    def __init__(self, lexer: Lexer) -> None:
        self._lexer = lexer

    # -- RuleParser protocol ----------------------------------------------

    def parse_tokens(self, tokens: list[Token]) -> RuleProgram:
        return _Parser(tokens).parse()

    def parse(self, text: str) -> RuleProgram:
        return self.parse_tokens(self._lexer.tokenize(text))
