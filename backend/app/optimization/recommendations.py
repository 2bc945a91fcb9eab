"""
Recommendation synthesis from an optimization result
"""

from typing import List, Sequence

from app.optimization.models import (
    Objective,
    OptimizationResult,
    Recommendation,
    Variable
)
from app.optimization.objectives import fractional_change

PRIORITY_ORDER = {'high': 0, 'medium': 1, 'low': 2}

TIMEFRAMES = {
    'high': '1-2 weeks',
    'medium': '2-4 weeks',
    'low': '1-2 months'
}

RESOURCES = {
    'price': ['Market analysis', 'Customer communication', 'Menu reprinting'],
    'staff': ['Human resources', 'Training', 'Shift reorganization'],
    'marketing': ['Advertising budget', 'Agency or consultant', 'Digital tools'],
    'inventory': ['Inventory system', 'Suppliers', 'Storage'],
    'menu': ['Chef and kitchen', 'Suppliers', 'Recipe costing']
}

DEFAULT_RESOURCES = ['Internal team', 'Operating budget']

CORRELATION_THRESHOLD = 0.7


def determine_resources(variable_id: str) -> List[str]:
    return list(RESOURCES.get(variable_id, DEFAULT_RESOURCES))


def assess_risk(change_pct: float, variable_id: str) -> str:
    """
    Risk of changing a variable by `change_pct` percent
    """
    abs_change = abs(change_pct)

    if variable_id == 'price' and abs_change > 15:
        return 'High - a large price change can hurt demand'
    if variable_id == 'staff' and change_pct < -10:
        return 'High - cutting staff can degrade service'
    if abs_change > 20:
        return 'High - drastic change needs careful management'
    if abs_change > 10:
        return 'Medium - moderate change with controllable impact'

    return 'Low - incremental adjustment with minimal risk'


def _format_value(value: float) -> str:
    return f"{value:g}"


def percent_change(variable: Variable, value: float) -> float:
    """
    Percent change of `value` from the variable's current value

    A current value of 0 has no relative scale, so the move is measured
    against the width of the variable's range instead.
    """
    if variable.current_value != 0:
        return fractional_change(value, variable.current_value) * 100
    span = variable.max_value - variable.min_value
    if span == 0:
        return 0.0
    return (value - variable.current_value) / span * 100


def generate_recommendations(
    result: OptimizationResult,
    variables: Sequence[Variable],
    objectives: Sequence[Objective]
) -> List[Recommendation]:
    """
    Turn the optimal solution into prioritized, actionable guidance

    Variables that move more than 5% from their current value get one
    recommendation each (high > 15%, medium > 10%, low > 5%); variables
    currently at 0 are measured against their range width. Strongly
    correlated objective pairs (|r| > 0.7) get a medium-priority
    balancing recommendation.

    Args:
        result: Optimization result
        variables: Decision variables of the run
        objectives: Objectives of the run

    Returns:
        Recommendations sorted high, medium, low
    """
    recommendations = []
    solution = result.optimal

    for v in variables:
        optimal_value = solution.variables.get(v.id, v.current_value)
        change = percent_change(v, optimal_value)

        if abs(change) <= 5:
            continue

        if abs(change) > 15:
            priority = 'high'
        elif abs(change) > 10:
            priority = 'medium'
        else:
            priority = 'low'

        direction = 'Increase' if change > 0 else 'Reduce'
        recommendations.append(Recommendation(
            priority=priority,
            action=(f"{direction} {v.name} from {_format_value(v.current_value)}{v.unit} "
                    f"to {optimal_value:.1f}{v.unit}"),
            impact=(f"{abs(change):.1f}% change in {v.name}" if v.current_value != 0
                    else f"{abs(change):.1f}% of the {v.name} range"),
            timeframe=TIMEFRAMES[priority],
            resources=determine_resources(v.id),
            risk=assess_risk(change, v.id)
        ))

    for t in result.trade_offs:
        if abs(t.correlation) <= CORRELATION_THRESHOLD:
            continue

        relation = 'conflict' if t.correlation < 0 else 'synergy'
        recommendations.append(Recommendation(
            priority='medium',
            action=f"Balance {t.objective1} and {t.objective2} ({relation} detected)",
            impact=f"Correlation of {t.correlation:.2f} between objectives",
            timeframe='2-3 weeks',
            resources=['Detailed analysis', 'Strategy adjustment'],
            risk=('Medium - objectives in conflict' if relation == 'conflict'
                  else 'Low - objectives reinforce each other')
        ))

    return sorted(recommendations, key=lambda r: PRIORITY_ORDER[r.priority])
