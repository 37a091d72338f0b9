"""
schemas.py — Request/Response modele FastAPI.
Oddzielone od contracts.py żeby API mogło ewoluować niezależnie.
"""
from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, Field

from contracts import ClauseOutcome, RuleProgram, Token


# ─────────────────────────── /evaluate ───────────────────────────

class EvaluateRequest(BaseModel):
    rule: str = Field(..., min_length=1)
    variables: dict[str, Optional[Union[int, float]]] = {}
    assignments: Optional[str] = None  # "x=1; y=2", łączone z variables
    trace: bool = False                # dołącza kroki ewaluacji do odpowiedzi


class EvaluateResponse(BaseModel):
    result: int
    selected: Optional[int]            # indeks klauzuli IF; None = ELSE
    outcomes: list[ClauseOutcome]
    steps: list[str] = []


# ─────────────────────────── /parse, /tokenize ───────────────────

class RuleRequest(BaseModel):
    rule: str = Field(..., min_length=1)


class ParseResponse(BaseModel):
    program: RuleProgram


class TokenizeResponse(BaseModel):
    tokens: list[Token]


# ─────────────────────────── /health ─────────────────────────────

class HealthResponse(BaseModel):
    status: str
    version: str
