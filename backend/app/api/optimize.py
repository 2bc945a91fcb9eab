"""
Optimization endpoint for multi-objective business scenarios
"""

from fastapi import APIRouter, HTTPException
import logging
import time

from app.core.config import settings
from app.core.runner import run_optimization_in_thread
from app.schemas.optimize import (
    OptimizationConfigSchema,
    OptimizeRequest,
    OptimizeResponse,
    RecommendationResult,
    SolutionResult,
    TradeOffResult
)
from app.optimization import (
    ConstraintHandler,
    OptimizationInputError,
    generate_recommendations,
    multi_objective_optimize,
    select_diverse_subset,
    validate_problem
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/optimize", response_model=OptimizeResponse, tags=["optimization"])
async def optimize_scenario(request_data: OptimizeRequest):
    """
    Find the best variable settings for weighted business objectives

    Args:
        request_data: Objectives, variables, constraints and search parameters

    Returns:
        OptimizeResponse with optimal solution, Pareto alternatives,
        trade-offs and recommendations
    """
    try:
        start_time = time.time()

        objectives, variables, constraints, baseline = request_data.build_problem()
        config = (request_data.config or OptimizationConfigSchema()).to_config(settings)

        logger.info(
            f"Running optimization: {len(objectives)} objectives, "
            f"{len(variables)} variables, {len(constraints)} constraints"
        )

        # Validate problem
        is_valid, errors, warnings = validate_problem(objectives, variables, constraints, config)

        if not is_valid:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid optimization problem: {'; '.join(errors)}"
            )

        # Log warnings but continue
        if warnings:
            logger.warning(f"Problem warnings: {'; '.join(warnings)}")

        result = await run_optimization_in_thread(
            multi_objective_optimize,
            timeout=settings.max_optimization_time,
            objectives=objectives,
            variables=variables,
            constraints=constraints,
            config=config,
            baseline=baseline
        )

        constraint_relaxation_applied = None

        if constraints and result.feasible_count == 0 and request_data.relax_on_infeasible:
            logger.warning("No feasible solution found. Attempting constraint relaxation...")

            handler = ConstraintHandler(constraints)
            relaxation_result = handler.relax_constraints(relaxation_factor=0.10)

            logger.info(f"Relaxation: {relaxation_result['relaxation_description']}")

            result = await run_optimization_in_thread(
                multi_objective_optimize,
                timeout=settings.max_optimization_time,
                objectives=objectives,
                variables=variables,
                constraints=relaxation_result['relaxed_constraints'],
                config=config,
                baseline=baseline
            )

            constraint_relaxation_applied = {
                'original': relaxation_result['original_limits'],
                'relaxed': relaxation_result['relaxed_limits'],
                'description': relaxation_result['relaxation_description'],
                'feasible_after_relaxation': result.feasible_count > 0
            }

        # Select diverse subset of the Pareto front
        n_alternatives = request_data.n_alternatives or settings.default_n_alternatives
        alternatives, selected_idx = select_diverse_subset(
            result.pareto_front,
            objectives,
            n_select=n_alternatives,
            method='crowding'
        )

        logger.info(f"Selected {len(selected_idx)} of {len(result.pareto_front)} Pareto alternatives")

        recommendations = generate_recommendations(result, variables, objectives)

        optimization_time_s = time.time() - start_time

        logger.info(f"Optimization complete in {optimization_time_s:.2f}s")

        return OptimizeResponse(
            optimal=SolutionResult.from_solution(result.optimal),
            pareto_alternatives=[SolutionResult.from_solution(s) for s in alternatives],
            n_pareto=len(result.pareto_front),
            trade_offs=[TradeOffResult.from_trade_off(t) for t in result.trade_offs],
            recommendations=[RecommendationResult.from_recommendation(r) for r in recommendations],
            convergence_history=result.convergence_history,
            iterations=result.iterations,
            converged=result.converged,
            cancelled=result.cancelled,
            feasible=result.optimal.feasible,
            feasible_count=result.feasible_count,
            hypervolume=result.hypervolume,
            execution_time_s=result.execution_time,
            optimization_time_s=optimization_time_s,
            constraint_relaxation=constraint_relaxation_applied,
            warnings=warnings if warnings else None
        )

    except HTTPException:
        raise
    except OptimizationInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Optimization error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Optimization failed: {str(e)}")
