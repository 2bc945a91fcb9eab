"""
Trade-off Analysis Between Competing Objectives
Local sensitivity of business metrics and pairwise objective correlation
"""

import numpy as np
from typing import Dict, List, Sequence

from app.optimization.models import (
    BusinessBaseline,
    Objective,
    Solution,
    TradeOff,
    Variable
)
from app.optimization.objectives import evaluate_objectives


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson correlation coefficient of two equally long series

    Returns:
        Correlation in [-1, 1]; 0 when either series has no variance
        or fewer than two samples are given
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)

    if x.shape != y.shape:
        raise ValueError(f"Series lengths differ: {len(x)} vs {len(y)}")
    if len(x) < 2:
        return 0.0

    dx = x - x.mean()
    dy = y - y.mean()
    denominator = np.sqrt(np.sum(dx * dx) * np.sum(dy * dy))

    if denominator == 0 or not np.isfinite(denominator):
        return 0.0

    return float(np.clip(np.sum(dx * dy) / denominator, -1.0, 1.0))


def variable_sensitivities(
    solution: Solution,
    variables: Sequence[Variable],
    baseline: BusinessBaseline,
    perturbation_pct: float = 10.0
) -> List[Dict]:
    """
    Perturb each variable individually and re-evaluate the business metrics

    The perturbed value is not clamped to the variable's bounds; this is
    a local perturbation, not a candidate solution.

    Args:
        solution: Solution to perturb around
        variables: Decision variables
        baseline: Baseline business metrics
        perturbation_pct: Relative perturbation applied to each variable

    Returns:
        One entry per variable with base/perturbed value, perturbed
        metrics and metric deltas
    """
    factor = 1.0 + perturbation_pct / 100.0
    base_metrics = evaluate_objectives(solution.variables, variables, baseline)
    results = []

    for v in variables:
        base_value = solution.variables.get(v.id, v.current_value)
        perturbed_value = base_value * factor
        metrics = evaluate_objectives(
            solution.with_variable(v.id, perturbed_value),
            variables,
            baseline
        )
        results.append({
            'variable_id': v.id,
            'variable_name': v.name,
            'base_value': base_value,
            'perturbed_value': perturbed_value,
            'metrics': metrics,
            'deltas': {k: metrics[k] - base_metrics[k] for k in metrics}
        })

    return results


def calculate_trade_offs(
    solution: Solution,
    variables: Sequence[Variable],
    objectives: Sequence[Objective],
    baseline: BusinessBaseline,
    perturbation_pct: float = 10.0
) -> List[TradeOff]:
    """
    Quantify how each pair of objectives moves together near a solution

    Every variable is perturbed by +10% on its own; the values of both
    objectives under each perturbation form one sample, and the Pearson
    correlation over those samples describes the pair. Near -1 means the
    objectives conflict, near +1 means they reinforce each other.

    Args:
        solution: Solution to analyze (usually the optimum)
        variables: Decision variables
        objectives: Objectives of the problem
        baseline: Baseline business metrics
        perturbation_pct: Relative perturbation applied to each variable

    Returns:
        One TradeOff per unordered objective pair
    """
    perturbations = variable_sensitivities(solution, variables, baseline, perturbation_pct)
    trade_offs = []

    for i in range(len(objectives)):
        for j in range(i + 1, len(objectives)):
            obj1 = objectives[i]
            obj2 = objectives[j]

            samples_1 = [p['metrics'].get(obj1.id, 0.0) for p in perturbations]
            samples_2 = [p['metrics'].get(obj2.id, 0.0) for p in perturbations]
            correlation = pearson_correlation(samples_1, samples_2)

            trade_offs.append(TradeOff(
                objective1=obj1.name,
                objective2=obj2.name,
                objective1_id=obj1.id,
                objective2_id=obj2.id,
                correlation=correlation,
                sensitivity=abs(correlation) * ((obj1.weight + obj2.weight) / 200),
                optimal_balance={
                    'obj1_value': solution.objectives.get(obj1.id, 0.0),
                    'obj2_value': solution.objectives.get(obj2.id, 0.0)
                }
            ))

    return trade_offs
