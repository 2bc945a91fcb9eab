"""
Trade-off and recommendation endpoints for a chosen variable assignment
"""

from fastapi import APIRouter, HTTPException
import logging

from app.schemas.analysis import (
    AnalysisRequest,
    RecommendationRequest,
    RecommendationResponse,
    TradeOffRequest,
    TradeOffResponse
)
from app.schemas.optimize import (
    RecommendationResult,
    SolutionResult,
    TradeOffResult
)
from app.optimization import (
    OptimizationInputError,
    OptimizationResult,
    calculate_trade_offs,
    evaluate_solution,
    generate_recommendations,
    validate_problem
)

logger = logging.getLogger(__name__)
router = APIRouter()


def resolve_problem(request: AnalysisRequest):
    """
    Build and validate the problem of an analysis request and evaluate
    its variable assignment

    Returns:
        objectives, variables, constraints, baseline, solution

    Raises:
        HTTPException: 400 for invalid problems or unknown variable ids
    """
    try:
        objectives, variables, constraints, baseline = request.build_problem()
    except OptimizationInputError as e:
        raise HTTPException(status_code=400, detail=str(e))

    is_valid, errors, _ = validate_problem(objectives, variables, constraints)
    if not is_valid:
        raise HTTPException(status_code=400, detail=f"Invalid optimization problem: {'; '.join(errors)}")

    assignment = {v.id: v.current_value for v in variables}
    if request.assignment:
        unknown = sorted(set(request.assignment) - set(assignment))
        if unknown:
            raise HTTPException(status_code=400, detail=f"Unknown variables: {', '.join(unknown)}")
        assignment.update(request.assignment)

    solution = evaluate_solution(assignment, variables, objectives, constraints, baseline)
    return objectives, variables, constraints, baseline, solution


@router.post("/tradeoffs", response_model=TradeOffResponse, tags=["analysis"])
async def compute_trade_offs(request: TradeOffRequest):
    """
    Correlation between every pair of objectives around a variable assignment
    """
    objectives, variables, _, baseline, solution = resolve_problem(request)

    trade_offs = calculate_trade_offs(
        solution, variables, objectives, baseline,
        perturbation_pct=request.perturbation_pct
    )

    return TradeOffResponse(
        solution=SolutionResult.from_solution(solution),
        trade_offs=[TradeOffResult.from_trade_off(t) for t in trade_offs]
    )


@router.post("/recommendations", response_model=RecommendationResponse, tags=["analysis"])
async def compute_recommendations(request: RecommendationRequest):
    """
    Prioritized actions for moving from current values to a chosen assignment

    Useful for turning a Pareto alternative picked by the user into guidance.
    """
    objectives, variables, _, baseline, solution = resolve_problem(request)

    trade_offs = calculate_trade_offs(solution, variables, objectives, baseline)
    result = OptimizationResult(
        optimal=solution,
        pareto_front=[solution],
        trade_offs=trade_offs,
        convergence_history=[],
        iterations=0,
        execution_time=0.0
    )
    recommendations = generate_recommendations(result, variables, objectives)

    logger.info(f"Generated {len(recommendations)} recommendations")

    return RecommendationResponse(
        solution=SolutionResult.from_solution(solution),
        trade_offs=[TradeOffResult.from_trade_off(t) for t in trade_offs],
        recommendations=[RecommendationResult.from_recommendation(r) for r in recommendations]
    )
