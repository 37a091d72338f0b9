"""
Router: POST /evaluate
Parsuje regułę, buduje środowisko zmiennych i zwraca wybraną wartość.
"""
from fastapi import APIRouter, Depends, HTTPException

from adapters.assignment_parser import parse_assignments
from api.dependencies import get_evaluator, get_rule_parser, get_settings
from api.schemas import EvaluateRequest, EvaluateResponse
from contracts import Environment

router = APIRouter(prefix="/evaluate", tags=["evaluate"])


@router.post("", response_model=EvaluateResponse)
async def evaluate(
    body: EvaluateRequest,
    parser=Depends(get_rule_parser),
    evaluator=Depends(get_evaluator),
    settings=Depends(get_settings),
) -> EvaluateResponse:
    if len(body.rule) > settings.max_rule_length:
        raise HTTPException(
            status_code=413,
            detail=f"Rule exceeds {settings.max_rule_length} characters.",
        )

    env = Environment.of(body.variables)
    if body.assignments:
        # Jawne variables mają pierwszeństwo przed listą przypisań
        env = parse_assignments(body.assignments).merged(env)

    program = parser.parse(body.rule)
    result = evaluator.evaluate_program(program, env)

    return EvaluateResponse(
        result=result.value,
        selected=result.selected,
        outcomes=result.outcomes,
        steps=result.steps if (body.trace or settings.trace_evaluation) else [],
    )
