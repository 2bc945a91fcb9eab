"""
Objective Functions for Multi-Objective Business Optimization
Maps decision-variable assignments to business metrics and scores them
"""

import numpy as np
from typing import Dict, Mapping, Sequence, Union

from app.optimization.models import (
    BusinessBaseline,
    Constraint,
    Objective,
    Solution,
    Variable
)
from app.optimization.constraints import check_feasibility


def fractional_change(value: float, current: float) -> float:
    """Relative change of `value` against `current` (0 when current is 0)"""
    if current == 0:
        return 0.0
    return (value - current) / current


def evaluate_objectives(
    assignment: Mapping[str, float],
    variables: Sequence[Variable],
    baseline: BusinessBaseline
) -> Dict[str, float]:
    """
    Evaluate all business metrics for a variable assignment

    Each variable contributes baseline * change * impact to every metric,
    where change is its fractional change from its current value. Impacts
    are linear and independent, so contributions add up across variables.

    Args:
        assignment: Variable id -> chosen value (missing ids use current value)
        variables: Decision variables with impact coefficients
        baseline: Baseline business metrics

    Returns:
        Dictionary with revenue, costs, profit, margin, quality, customers
    """
    revenue = baseline.revenue
    costs = baseline.costs
    quality = baseline.quality
    customers = baseline.customers

    for v in variables:
        change = fractional_change(assignment.get(v.id, v.current_value), v.current_value)

        revenue += baseline.revenue * change * v.impact.revenue
        costs += baseline.costs * change * v.impact.cost
        quality += baseline.quality * change * v.impact.quality
        customers += baseline.customers * change * v.impact.customers

    profit = revenue - costs
    margin = (profit / revenue) * 100 if revenue != 0 else 0.0

    return {
        'revenue': revenue,
        'costs': costs,
        'profit': profit,
        'margin': margin,
        'quality': quality,
        'customers': customers
    }


def normalize(value: float, min_val: float, max_val: float) -> float:
    """
    Linear position of a value within (min_val, max_val)

    0 at min_val and 1 at max_val. Values outside the range map outside
    [0, 1] so that ordering is kept beyond the bounds. Equal bounds give 0.5.
    """
    if max_val == min_val:
        return 0.5
    return (value - min_val) / (max_val - min_val)


def objective_satisfaction(value: float, objective: Objective) -> float:
    """
    How well a metric value satisfies one objective

    Args:
        value: Metric value of a solution
        objective: Objective definition

    Returns:
        1.0 at the upper end of the range, 0.0 at the lower end. Maximize
        and minimize objectives extend past [0, 1] outside their range;
        target objectives are clamped to [0, 1]
    """
    lower, upper = objective.normalization_range()
    if lower > upper:
        lower, upper = upper, lower

    if objective.type == 'maximize':
        return normalize(value, lower, upper)
    if objective.type == 'minimize':
        return 1.0 - normalize(value, lower, upper)

    # target: penalize distance from the target symmetrically
    distance = abs(value - objective.target)
    max_distance = max(abs(upper - objective.target), abs(lower - objective.target))
    if max_distance == 0:
        return 0.5
    return min(1.0, max(0.0, 1.0 - distance / max_distance))


def calculate_weighted_score(
    solution: Union[Solution, Mapping[str, float]],
    objectives: Sequence[Objective]
) -> float:
    """
    Combine all objectives into a single score via weighted sum

    Args:
        solution: Solution, or its metric values (objective id -> value)
        objectives: Objectives with weights

    Returns:
        Weighted score clamped to [0, 100]; 0 when the total weight is 0
    """
    metrics = solution.objectives if isinstance(solution, Solution) else solution
    total_score = 0.0
    total_weight = 0.0

    for obj in objectives:
        value = metrics.get(obj.id, obj.current)
        total_score += objective_satisfaction(value, obj) * obj.weight
        total_weight += obj.weight

    if total_weight <= 0:
        return 0.0

    return min(100.0, max(0.0, (total_score / total_weight) * 100))


def evaluate_solution(
    assignment: Mapping[str, float],
    variables: Sequence[Variable],
    objectives: Sequence[Objective],
    constraints: Sequence[Constraint],
    baseline: BusinessBaseline
) -> Solution:
    """
    Build a fully evaluated solution: metrics, score and feasibility

    Args:
        assignment: Variable id -> value
        variables: Decision variables
        objectives: Objectives used for scoring
        constraints: Feasibility predicates
        baseline: Baseline business metrics

    Returns:
        New immutable Solution
    """
    metrics = evaluate_objectives(assignment, variables, baseline)
    draft = Solution(
        variables=assignment,
        objectives=metrics,
        score=calculate_weighted_score(metrics, objectives)
    )

    if not constraints:
        return draft

    feasible, _ = check_feasibility(draft, constraints)
    return Solution(
        variables=draft.variables,
        objectives=draft.objectives,
        score=draft.score,
        feasible=feasible
    )


def objective_matrix(
    solutions: Sequence[Solution],
    objectives: Sequence[Objective]
) -> np.ndarray:
    """
    Stack objective values of many solutions

    Returns:
        Array (n_solutions, n_objectives)
    """
    if not solutions:
        return np.zeros((0, len(objectives)))
    return np.array([
        [s.objectives.get(obj.id, obj.current) for obj in objectives]
        for s in solutions
    ], dtype=float)


def loss_matrix(
    solutions: Sequence[Solution],
    objectives: Sequence[Objective]
) -> np.ndarray:
    """
    Objective values in minimization form, clipped to [0, 1]

    Each entry is 1 - satisfaction, so lower is better for every
    objective type. Clipping keeps hypervolumes comparable between runs. Used for hypervolume and crowding computations.

    Returns:
        Array (n_solutions, n_objectives)
    """
    if not solutions:
        return np.zeros((0, len(objectives)))
    losses = np.array([
        [1.0 - objective_satisfaction(s.objectives.get(obj.id, obj.current), obj) for obj in objectives]
        for s in solutions
    ], dtype=float)
    return np.clip(losses, 0.0, 1.0)
