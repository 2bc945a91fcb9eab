"""
Hill climbing refinement for single candidate solutions
"""

from typing import Sequence

from app.optimization.models import (
    BusinessBaseline,
    Constraint,
    FeasibilityPolicy,
    Objective,
    Solution,
    Variable
)
from app.optimization.objectives import evaluate_solution


def is_improvement(candidate: Solution, incumbent: Solution, feasibility_policy: FeasibilityPolicy = 'soft') -> bool:
    """
    Whether `candidate` strictly beats `incumbent`

    Under the hard policy feasibility is compared first, so a move never
    trades a feasible solution for an infeasible one.
    """
    if feasibility_policy == 'hard' and candidate.feasible != incumbent.feasible:
        return candidate.feasible
    return candidate.score > incumbent.score


def hill_climb(
    initial: Solution,
    variables: Sequence[Variable],
    objectives: Sequence[Objective],
    constraints: Sequence[Constraint],
    baseline: BusinessBaseline,
    max_iterations: int = 100,
    feasibility_policy: FeasibilityPolicy = 'soft'
) -> Solution:
    """
    Discrete coordinate ascent on the weighted score

    Each pass tries a -step and a +step move for every variable (clamped
    to its bounds) and keeps any neighbor that strictly improves on the
    best so far. Stops after `max_iterations` passes or on the first pass
    without an improving move.

    Args:
        initial: Evaluated starting solution
        variables: Decision variables with bounds and step sizes
        objectives: Objectives used for scoring
        constraints: Feasibility predicates (re-checked for every neighbor)
        baseline: Baseline business metrics
        max_iterations: Maximum number of passes
        feasibility_policy: 'soft' compares scores only, 'hard' prefers
                            feasible neighbors

    Returns:
        Best solution found (may be `initial` itself)
    """
    current = initial

    for _ in range(max_iterations):
        improved = False

        for variable in variables:
            start_value = current.variables.get(variable.id, variable.current_value)

            for delta in (-variable.step_size, variable.step_size):
                new_value = variable.clamp(start_value + delta)
                if new_value == current.variables.get(variable.id, variable.current_value):
                    continue

                neighbor = evaluate_solution(
                    current.with_variable(variable.id, new_value),
                    variables,
                    objectives,
                    constraints,
                    baseline
                )

                if is_improvement(neighbor, current, feasibility_policy):
                    current = neighbor
                    improved = True

        if not improved:
            break

    return current
