"""
Router: POST /parse, POST /tokenize
Podgląd tokenów i kanonicznego AST reguły, bez ewaluacji.
"""
from fastapi import APIRouter, Depends, HTTPException

from adapters.reducer.ast_reducer import expression_depth
from api.dependencies import get_lexer, get_reducer, get_rule_parser, get_settings
from api.schemas import ParseResponse, RuleRequest, TokenizeResponse

router = APIRouter(tags=["parse"])


def _check_length(rule: str, limit: int) -> None:
    if len(rule) > limit:
        raise HTTPException(status_code=413, detail=f"Rule exceeds {limit} characters.")


@router.post("/parse", response_model=ParseResponse)
async def parse(
    body: RuleRequest,
    parser=Depends(get_rule_parser),
    reducer=Depends(get_reducer),
    settings=Depends(get_settings),
) -> ParseResponse:
    _check_length(body.rule, settings.max_rule_length)
    program = reducer.reduce_program(parser.parse(body.rule))

    # Serializer JSON schodzi rekurencyjnie po drzewie
    depth = max(expression_depth(c.condition) for c in program.clauses)
    if depth > settings.max_condition_depth:
        raise HTTPException(
            status_code=413,
            detail=f"Condition tree is {depth} levels deep "
                   f"(limit {settings.max_condition_depth}).",
        )
    return ParseResponse(program=program)


@router.post("/tokenize", response_model=TokenizeResponse)
async def tokenize(
    body: RuleRequest,
    lexer=Depends(get_lexer),
    settings=Depends(get_settings),
) -> TokenizeResponse:
    _check_length(body.rule, settings.max_rule_length)
    return TokenizeResponse(tokens=lexer.tokenize(body.rule))
