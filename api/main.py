"""
api/main.py — punkt wejścia FastAPI.

Lifespan:
  - Inicjalizuje bezstanowe adaptery (Lexer, RuleParser, Reducer, Evaluator)
    współdzielone przez wszystkie żądania

Błędy języka reguł (RuleError) mapowane są na 422 ze strukturalnym opisem:
  {"error": "<kind>", "message": "...", ...kontekst (position / identifier)}
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from adapters.evaluator.rule_evaluator import RuleEvaluator
from adapters.lexer.regex_lexer import RegexLexer
from adapters.reducer.ast_reducer import ASTReducer
from adapters.rule_parser.recursive_descent_parser import RecursiveDescentRuleParser
from api.routers import evaluate, parse
from api.schemas import HealthResponse
from config import Settings
from contracts import RuleError

logger = logging.getLogger("decision_rules")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Adaptery bezstanowe, tworzone raz
    app.state.lexer = RegexLexer()
    app.state.rule_parser = RecursiveDescentRuleParser(lexer=app.state.lexer)
    app.state.reducer = ASTReducer()
    app.state.evaluator = RuleEvaluator(reducer=app.state.reducer)

    logger.info("DecisionRules API ready.")
    yield
    logger.info("Shutting down.")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Routers
    app.include_router(evaluate.router)
    app.include_router(parse.router)

    # Health
    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health():
        return HealthResponse(status="ok", version=settings.app_version)

    # Globalny handler błędów języka reguł
    @app.exception_handler(RuleError)
    async def rule_error_handler(request: Request, exc: RuleError):
        logger.info("Rule rejected (%s): %s", exc.kind, exc.message)
        return JSONResponse(status_code=422, content=exc.to_detail())

    return app


app = create_app()
