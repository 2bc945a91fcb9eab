"""
Pareto Front Extraction and Analysis
Dominance checks, front extraction and diversity metrics for optimizer populations
"""

import numpy as np
from pymoo.indicators.hv import HV
from typing import List, Tuple, Sequence
import logging

from app.optimization.models import Objective, Solution
from app.optimization.objectives import loss_matrix

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def solution_label(index: int) -> str:
    """Identifier of a population member used in dominance reports"""
    return f"solution-{index}"


def minimization_form(
    solutions: Sequence[Solution],
    objectives: Sequence[Objective]
) -> np.ndarray:
    """
    Objective values converted so that lower is better for every objective

    maximize -> -value, minimize -> value, target -> |value - target|

    Returns:
        Array (n_solutions, n_objectives)
    """
    obj_min = np.zeros((len(solutions), len(objectives)))

    for k, obj in enumerate(objectives):
        values = np.array([s.objectives.get(obj.id, 0.0) for s in solutions], dtype=float)
        if obj.type == 'maximize':
            obj_min[:, k] = -values
        elif obj.type == 'minimize':
            obj_min[:, k] = values
        else:
            obj_min[:, k] = np.abs(values - obj.target)

    return obj_min


def dominates(a: Solution, b: Solution, objectives: Sequence[Objective]) -> bool:
    """
    Check whether solution `a` Pareto-dominates solution `b`

    `a` dominates `b` if it is at least as good on every objective and
    strictly better on at least one. "Better" is higher for maximize,
    lower for minimize and closer to the target for target objectives.
    """
    obj_min = minimization_form([a, b], objectives)
    return bool(np.all(obj_min[0] <= obj_min[1]) and np.any(obj_min[0] < obj_min[1]))


def is_pareto_optimal(obj_min: np.ndarray) -> np.ndarray:
    """
    Find Pareto-optimal points for N-dimensional objectives

    Args:
        obj_min: Objective values in minimization form (n_points, n_objectives)

    Returns:
        Boolean array indicating Pareto-optimal points (n_points,)
    """
    n_points = obj_min.shape[0]
    is_optimal = np.ones(n_points, dtype=bool)

    for i in range(n_points):
        # Check if any other point dominates this one
        for j in range(n_points):
            if i == j:
                continue

            # Point j dominates i if:
            # - j is better or equal in all objectives
            # - j is strictly better in at least one objective
            if np.all(obj_min[j] <= obj_min[i]) and np.any(obj_min[j] < obj_min[i]):
                is_optimal[i] = False
                break

    return is_optimal


def annotate_dominance(
    solutions: Sequence[Solution],
    objectives: Sequence[Objective]
) -> List[Solution]:
    """
    Record which population members dominate each solution

    O(n^2) pairwise comparison; fine for populations of a few hundred.

    Args:
        solutions: Population
        objectives: Objectives defining dominance

    Returns:
        Copies of the solutions; dominated ones carry `dominated_by`
        labels of every dominator, non-dominated ones keep None
    """
    obj_min = minimization_form(solutions, objectives)
    annotated = []

    for i, solution in enumerate(solutions):
        dominators = [
            solution_label(j)
            for j in range(len(solutions))
            if j != i and np.all(obj_min[j] <= obj_min[i]) and np.any(obj_min[j] < obj_min[i])
        ]
        annotated.append(solution.with_dominators(dominators) if dominators else solution)

    return annotated


def find_pareto_front(
    solutions: Sequence[Solution],
    objectives: Sequence[Objective],
    return_indices: bool = False
):
    """
    Extract the non-dominated subset of a population

    Args:
        solutions: Population
        objectives: Objectives defining dominance
        return_indices: If True, also return indices of Pareto-optimal solutions

    Returns:
        pareto_front: Non-dominated solutions in population order
        (optional) pareto_indices: Their indices
    """
    if not solutions:
        return ([], np.array([], dtype=int)) if return_indices else []

    is_optimal = is_pareto_optimal(minimization_form(solutions, objectives))
    pareto_indices = np.where(is_optimal)[0]
    pareto_front = [solutions[i] for i in pareto_indices]

    if return_indices:
        return pareto_front, pareto_indices
    return pareto_front


def compute_crowding_distance(objectives: np.ndarray) -> np.ndarray:
    """
    Compute crowding distance for Pareto front points (diversity metric)

    Args:
        objectives: Objective values (n_points, n_objectives)

    Returns:
        Crowding distances (n_points,)
    """
    n_points = objectives.shape[0]
    n_objectives = objectives.shape[1]

    if n_points <= 2:
        # Boundary points get infinite distance
        return np.full(n_points, np.inf)

    crowding = np.zeros(n_points)

    for m in range(n_objectives):
        # Sort by objective m
        sorted_indices = np.argsort(objectives[:, m], kind='stable')

        # Boundary points get infinite distance
        crowding[sorted_indices[0]] = np.inf
        crowding[sorted_indices[-1]] = np.inf

        obj_range = objectives[sorted_indices[-1], m] - objectives[sorted_indices[0], m]

        if obj_range == 0:
            continue

        for i in range(1, n_points - 1):
            crowding[sorted_indices[i]] += (
                objectives[sorted_indices[i + 1], m] - objectives[sorted_indices[i - 1], m]
            ) / obj_range

    return crowding


def select_diverse_subset(
    solutions: Sequence[Solution],
    objectives: Sequence[Objective],
    n_select: int,
    method: str = 'crowding'
) -> Tuple[List[Solution], np.ndarray]:
    """
    Select a diverse subset of solutions from a Pareto front

    Args:
        solutions: Pareto-front solutions
        objectives: Objectives of the problem
        n_select: Number of solutions to select
        method: Selection method ('crowding' or 'uniform')

    Returns:
        selected_solutions: Selected solutions, in their original order
        selected_indices: Indices of selected solutions
    """
    n_points = len(solutions)

    if n_select >= n_points:
        return list(solutions), np.arange(n_points)

    if method == 'crowding':
        crowding = compute_crowding_distance(loss_matrix(solutions, objectives))
        # Most isolated first; stable sort keeps population order among ties
        selected_indices = np.sort(np.argsort(-crowding, kind='stable')[:n_select])
    elif method == 'uniform':
        selected_indices = np.linspace(0, n_points - 1, n_select, dtype=int)
    else:
        raise ValueError(f"Unknown selection method: {method}")

    return [solutions[i] for i in selected_indices], selected_indices


def compute_hypervolume_indicator(
    pareto_front: Sequence[Solution],
    objectives: Sequence[Objective],
    reference_point: float = 1.1
) -> float:
    """
    Compute hypervolume indicator for Pareto front quality

    Objectives are mapped to normalized loss space (0 best, 1 worst), so
    the value is comparable between runs over the same objective set.

    Args:
        pareto_front: Pareto-front solutions
        objectives: Objectives of the problem
        reference_point: Nadir coordinate used for every objective

    Returns:
        Hypervolume value (higher is better)
    """
    if not pareto_front or not objectives:
        return 0.0

    losses = loss_matrix(pareto_front, objectives)
    ind = HV(ref_point=np.full(len(objectives), reference_point))

    return float(ind(losses))
