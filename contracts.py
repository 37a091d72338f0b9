"""
contracts.py — Jedyne źródło prawdy dla typów danych w DecisionRules.

Zawiera:
  - tokeny leksera
  - węzły AST (zamrożone modele pydantic; porównywalne przez ==)
  - program reguł (klauzule IF + obowiązkowe ELSE)
  - środowisko zmiennych z rozróżnieniem "brak" / "wartość"
  - hierarchię błędów zwracanych wywołującemu
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Wartości, które predykat IS-MISSING traktuje jak brak zmiennej.
MISSING_SENTINELS: tuple[int, ...] = (99, 999)

Number = Union[int, float]


# ─────────────────────────── Lexer ───────────────────────────────────────

class TokenKind(str, Enum):
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    GTE = "GTE"
    LTE = "LTE"
    GT = "GT"
    LT = "LT"
    EQ = "EQ"                  # "==" lub IGUALQUE
    AND = "AND"
    OR = "OR"
    IF = "IF"
    ELSE = "ELSE"
    RETURN = "RETURN"
    IS_MISSING = "IS_MISSING"
    NUMBER = "NUMBER"
    IDENTIFIER = "IDENTIFIER"


class Token(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: TokenKind
    text: str
    offset: int   # 0-based, w znakach
    line: int     # 1-based
    col: int      # 1-based


# ─────────────────────────── AST ─────────────────────────────────────────

RelationalOp = Literal[">", ">=", "<", "<=", "=="]
LogicalOp = Literal["AND", "OR"]


class RelationalNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    node_type: Literal["relational"] = "relational"
    identifier: str
    op: RelationalOp
    value: int = Field(ge=0)


class MissingNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    node_type: Literal["missing"] = "missing"
    identifier: str


class LogicalNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    node_type: Literal["logical"] = "logical"
    op: LogicalOp
    left: "Expression"
    right: "Expression"


class GroupNode(BaseModel):
    """Nawias wokół podwyrażenia. Artefakt parsera, usuwany przez reducer."""
    model_config = ConfigDict(frozen=True)

    node_type: Literal["group"] = "group"
    expression: "Expression"


Expression = Union[RelationalNode, MissingNode, LogicalNode, GroupNode]
LogicalNode.model_rebuild()
GroupNode.model_rebuild()


# ─────────────────────────── Program ─────────────────────────────────────

class ReturnStatement(BaseModel):
    model_config = ConfigDict(frozen=True)

    keyword: Token
    value_token: Token

    @property
    def value(self) -> int:
        return int(self.value_token.text)


class IfClause(BaseModel):
    model_config = ConfigDict(frozen=True)

    keyword: Token
    condition: Expression
    returns: ReturnStatement

    @property
    def value(self) -> int:
        return self.returns.value


class ElseClause(BaseModel):
    model_config = ConfigDict(frozen=True)

    keyword: Token
    returns: ReturnStatement

    @property
    def value(self) -> int:
        return self.returns.value


class RuleProgram(BaseModel):
    model_config = ConfigDict(frozen=True)

    clauses: list[IfClause] = Field(min_length=1)
    otherwise: ElseClause


# ─────────────────────────── Environment ─────────────────────────────────

class Binding(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    present: bool
    value: Optional[Number] = None


class Environment(BaseModel):
    """
    Wartości zmiennych przekazane do ewaluatora.
    None oznacza brak wartości; nigdy nie jest utożsamiane z zerem.
    """
    values: dict[str, Optional[Number]] = Field(default_factory=dict)

    @classmethod
    def of(cls, values: Optional[dict[str, Optional[Number]]] = None) -> "Environment":
        return cls(values=dict(values or {}))

    def lookup(self, name: str) -> Binding:
        value = self.values.get(name)
        if value is None:
            return Binding(name=name, present=False)
        return Binding(name=name, present=True, value=value)

    def merged(self, other: "Environment") -> "Environment":
        """Nowe środowisko; wartości z `other` nadpisują bieżące."""
        return Environment(values={**self.values, **other.values})

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name).present

    def __len__(self) -> int:
        return len(self.values)


# ─────────────────────────── Evaluator ───────────────────────────────────

class ClauseOutcome(BaseModel):
    index: int        # pozycja klauzuli IF w tekście reguły (od 0)
    matched: bool
    value: int


class EvalResult(BaseModel):
    value: int
    selected: Optional[int] = None   # None = wybrano ELSE
    outcomes: list[ClauseOutcome] = Field(default_factory=list)
    steps: list[str] = Field(default_factory=list)  # czytelne kroki


# ─────────────────────────── Błędy ───────────────────────────────────────

class RuleError(Exception):
    """Bazowy błąd języka reguł. Każdy błąd kończy bieżące wywołanie."""

    kind = "rule_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict[str, Any]:
        return {"error": self.kind, "message": self.message}


class LexError(RuleError):
    kind = "lex_error"

    def __init__(self, position: int, line: int, col: int, char: str) -> None:
        super().__init__(
            f"Nierozpoznany znak {char!r} w linii {line}, kolumnie {col}"
        )
        self.position = position
        self.line = line
        self.col = col
        self.char = char

    def to_detail(self) -> dict[str, Any]:
        return {
            **super().to_detail(),
            "position": self.position,
            "line": self.line,
            "col": self.col,
        }


class RuleSyntaxError(RuleError):
    kind = "syntax_error"

    def __init__(self, position: int, expected: str, found: str) -> None:
        super().__init__(
            f"Błąd składni na pozycji {position}: oczekiwano {expected}, otrzymano {found}"
        )
        self.position = position
        self.expected = expected
        self.found = found

    def to_detail(self) -> dict[str, Any]:
        return {
            **super().to_detail(),
            "position": self.position,
            "expected": self.expected,
            "found": self.found,
        }


class UndefinedVariableError(RuleError):
    kind = "undefined_variable"

    def __init__(self, identifier: str, expression: str = "") -> None:
        where = f" w wyrażeniu {expression!r}" if expression else ""
        super().__init__(f"Zmienna {identifier!r} nie jest zdefiniowana{where}")
        self.identifier = identifier

    def to_detail(self) -> dict[str, Any]:
        return {**super().to_detail(), "identifier": self.identifier}


class MalformedClauseError(RuleError):
    kind = "malformed_clause"

    def __init__(self, detail: str) -> None:
        super().__init__(f"Niepoprawna klauzula: {detail}")
        self.detail = detail

    def to_detail(self) -> dict[str, Any]:
        return {**super().to_detail(), "detail": self.detail}


class AssignmentError(RuleError):
    kind = "assignment_error"

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"Niepoprawne przypisanie {line!r}: {reason}")
        self.line = line

    def to_detail(self) -> dict[str, Any]:
        return {**super().to_detail(), "line": self.line}
