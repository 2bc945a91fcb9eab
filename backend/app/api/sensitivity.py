"""
Sensitivity Analysis API
Computes local sensitivity of business metrics to variable changes
"""

from fastapi import APIRouter
import time
import logging

from app.api.analysis import resolve_problem
from app.schemas.analysis import (
    SensitivityRequest,
    SensitivityResponse,
    VariableSensitivity
)
from app.schemas.optimize import SolutionResult
from app.optimization import variable_sensitivities

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/sensitivity", response_model=SensitivityResponse, tags=["analysis"])
async def compute_sensitivity(request: SensitivityRequest):
    """
    Compute local sensitivity analysis around a variable assignment.

    Perturbs each variable by the specified percentage and measures
    the change in all business metrics.
    """
    start_time = time.time()

    _, variables, _, baseline, solution = resolve_problem(request)

    perturbations = variable_sensitivities(
        solution, variables, baseline,
        perturbation_pct=request.perturbation_pct
    )

    sensitivities = [
        VariableSensitivity(
            variable_id=p['variable_id'],
            variable_name=p['variable_name'],
            base_value=p['base_value'],
            perturbed_value=p['perturbed_value'],
            deltas=p['deltas']
        )
        for p in perturbations
    ]

    computation_time_ms = (time.time() - start_time) * 1000

    return SensitivityResponse(
        solution=SolutionResult.from_solution(solution),
        perturbation_pct=request.perturbation_pct,
        sensitivities=sensitivities,
        computation_time_ms=computation_time_ms
    )
