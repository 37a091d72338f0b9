"""
dependencies.py — FastAPI Dependency Injection.
Każda zależność zwraca odpowiedni adapter przez Request.app.state.
"""
from __future__ import annotations

from fastapi import Request

from adapters.evaluator.rule_evaluator import RuleEvaluator
from adapters.lexer.regex_lexer import RegexLexer
from adapters.reducer.ast_reducer import ASTReducer
from adapters.rule_parser.recursive_descent_parser import RecursiveDescentRuleParser
from config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_lexer(request: Request) -> RegexLexer:
    return request.app.state.lexer


def get_rule_parser(request: Request) -> RecursiveDescentRuleParser:
    return request.app.state.rule_parser


def get_evaluator(request: Request) -> RuleEvaluator:
    return request.app.state.evaluator


def get_reducer(request: Request) -> ASTReducer:
    return request.app.state.reducer
