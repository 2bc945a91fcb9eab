"""
Constraint Handling, Relaxation and Input Validation for Business Optimization
Checks feasibility of solutions and validates problems before a run
"""

import numpy as np
from typing import Dict, List, Tuple, Optional, Any, Sequence
import logging

from app.optimization.models import (
    METRIC_NAMES,
    Constraint,
    ConstraintType,
    Objective,
    OptimizationConfig,
    OptimizationInputError,
    Solution,
    Variable
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Metric and comparison used when a threshold constraint gives none
DEFAULT_THRESHOLDS = {
    'budget': ('costs', '<='),
    'capacity': ('customers', '<='),
    'quality': ('quality', '>='),
}

OPERATORS = ('<=', '>=')


def _metric_value(solution: Solution, metric: str) -> float:
    if metric in solution.objectives:
        return solution.objectives[metric]
    if metric in solution.variables:
        return solution.variables[metric]
    raise KeyError(f"Unknown metric or variable: {metric}")


def threshold_constraint(
    id: str,
    name: str,
    type: ConstraintType,
    limit: float,
    metric: Optional[str] = None,
    operator: Optional[str] = None
) -> Constraint:
    """
    Build a constraint comparing one metric (or variable) against a limit

    Args:
        id: Constraint identifier
        name: Display name
        type: budget, capacity, quality or dependency
        limit: Threshold value
        metric: Business metric or variable id. Defaults by type:
                budget -> costs, capacity -> customers, quality -> quality
        operator: '<=' or '>=' (default by type)

    Returns:
        Constraint with a `validate` predicate
    """
    default_metric, default_operator = DEFAULT_THRESHOLDS.get(type, (None, '<='))
    metric = metric or default_metric
    operator = operator or default_operator

    if metric is None:
        raise OptimizationInputError(f"Constraint {id}: {type} constraints need an explicit metric")
    if operator not in OPERATORS:
        raise OptimizationInputError(f"Constraint {id}: unknown operator {operator!r}")

    if operator == '<=':
        def validate(solution: Solution) -> bool:
            return _metric_value(solution, metric) <= limit
    else:
        def validate(solution: Solution) -> bool:
            return _metric_value(solution, metric) >= limit

    return Constraint(
        id=id,
        name=name,
        type=type,
        validate=validate,
        limit=limit,
        metric=metric,
        operator=operator
    )


def check_feasibility(
    solution: Solution,
    constraints: Sequence[Constraint]
) -> Tuple[bool, List[str]]:
    """
    Check a solution against every constraint

    A predicate that raises counts as violated; the error is logged and
    the run continues.

    Args:
        solution: Evaluated solution
        constraints: Feasibility predicates

    Returns:
        feasible: True if all predicates hold
        violated: Ids of violated constraints
    """
    violated = []
    for constraint in constraints:
        try:
            ok = bool(constraint.validate(solution))
        except Exception as e:
            logger.debug(f"Constraint {constraint.id} raised {e!r}; treating solution as infeasible")
            ok = False
        if not ok:
            violated.append(constraint.id)

    return len(violated) == 0, violated


class ConstraintHandler:
    """
    Handles feasibility reporting and relaxation for a set of constraints
    """

    def __init__(self, constraints: Optional[Sequence[Constraint]] = None):
        """
        Initialize constraint handler

        Args:
            constraints: Constraints of the problem; only threshold
                         constraints (with metric and limit) can be relaxed
        """
        self.constraints = list(constraints or [])
        self.original_constraints = list(self.constraints)

    def feasibility_report(self, solutions: Sequence[Solution]) -> Dict[str, Any]:
        """
        Summarize feasibility over a set of solutions

        Args:
            solutions: Evaluated solutions

        Returns:
            Dictionary with feasible mask, count, rate and per-constraint
            violation counts
        """
        feasible_mask = np.ones(len(solutions), dtype=bool)
        violation_counts = {c.id: 0 for c in self.constraints}

        for i, solution in enumerate(solutions):
            feasible, violated = check_feasibility(solution, self.constraints)
            feasible_mask[i] = feasible
            for constraint_id in violated:
                violation_counts[constraint_id] += 1

        n_feasible = int(np.sum(feasible_mask))
        return {
            'feasible_mask': feasible_mask,
            'n_feasible': n_feasible,
            'feasibility_rate': n_feasible / len(solutions) if len(solutions) > 0 else 0.0,
            'violation_counts': violation_counts
        }

    def violation_amounts(self, solution: Solution) -> Dict[str, float]:
        """
        Relative amount by which a solution misses each threshold constraint

        Returns:
            Constraint id -> violation (0 when satisfied), normalized by
            the limit when the limit is non-zero
        """
        violations = {}
        for c in self.constraints:
            if c.metric is None or c.limit is None:
                continue
            try:
                value = _metric_value(solution, c.metric)
            except KeyError:
                continue
            if c.operator == '<=':
                raw = max(0.0, value - c.limit)
            else:
                raw = max(0.0, c.limit - value)
            violations[c.id] = raw / abs(c.limit) if c.limit != 0 else raw
        return violations

    def relax_constraints(self, relaxation_factor: float = 0.10) -> Dict[str, Any]:
        """
        Relax every threshold constraint by a fraction of its limit

        Upper limits ('<=') are raised and lower limits ('>=') are lowered.
        Predicate-only constraints are kept unchanged.

        Args:
            relaxation_factor: Fraction of the limit to relax by

        Returns:
            Dictionary with:
                - relaxed_constraints: New constraint list
                - original_limits / relaxed_limits: id -> limit
                - relaxation_description: Human-readable description
        """
        relaxed = []
        original_limits = {}
        relaxed_limits = {}
        descriptions = []

        for c in self.constraints:
            if c.metric is None or c.limit is None:
                relaxed.append(c)
                continue

            delta = abs(c.limit) * relaxation_factor
            new_limit = c.limit + delta if c.operator == '<=' else c.limit - delta
            relaxed.append(threshold_constraint(
                id=c.id,
                name=c.name,
                type=c.type,
                limit=new_limit,
                metric=c.metric,
                operator=c.operator
            ))
            original_limits[c.id] = c.limit
            relaxed_limits[c.id] = new_limit
            direction = "raised" if c.operator == '<=' else "lowered"
            descriptions.append(
                f"{c.name}: limit {direction} from {c.limit:,.2f} to {new_limit:,.2f} "
                f"({relaxation_factor:+.0%})"
            )

        self.constraints = relaxed

        return {
            'relaxed_constraints': relaxed,
            'original_limits': original_limits,
            'relaxed_limits': relaxed_limits,
            'relaxation_description': descriptions
        }

    def reset_constraints(self):
        """Reset constraints to original values"""
        self.constraints = list(self.original_constraints)


def validate_problem(
    objectives: Sequence[Objective],
    variables: Sequence[Variable],
    constraints: Sequence[Constraint] = (),
    config: Optional[OptimizationConfig] = None
) -> Tuple[bool, List[str], List[str]]:
    """
    Validate an optimization problem before running it

    Args:
        objectives: Objectives to optimize
        variables: Decision variables
        constraints: Feasibility constraints
        config: Search parameters

    Returns:
        is_valid: True if the problem can be optimized
        errors: List of error messages
        warnings: List of warning messages (don't affect validity)
    """
    errors = []
    warnings = []

    if not objectives:
        errors.append("At least one objective is required")
    if not variables:
        errors.append("At least one decision variable is required")

    seen = set()
    for obj in objectives:
        if obj.id in seen:
            errors.append(f"Duplicate objective id: {obj.id}")
        seen.add(obj.id)

        if obj.id not in METRIC_NAMES:
            errors.append(f"Objective {obj.id}: unknown metric (expected one of {', '.join(METRIC_NAMES)})")
        if obj.type not in ('maximize', 'minimize', 'target'):
            errors.append(f"Objective {obj.id}: unknown type {obj.type!r}")
        if obj.type == 'target' and obj.target is None:
            errors.append(f"Objective {obj.id}: target objectives must define a target")
        if obj.weight < 0:
            errors.append(f"Objective {obj.id}: weight must be non-negative")
        if obj.constraints is not None and obj.constraints.min is not None and obj.constraints.max is not None:
            if obj.constraints.min > obj.constraints.max:
                errors.append(f"Objective {obj.id}: min exceeds max")

    if objectives:
        total_weight = sum(obj.weight for obj in objectives)
        if total_weight == 0:
            warnings.append("All objective weights are zero; every solution scores 0")
        elif not np.isclose(total_weight, 100.0):
            warnings.append(f"Objective weights sum to {total_weight:g} (100 recommended)")

    seen = set()
    for v in variables:
        if v.id in seen:
            errors.append(f"Duplicate variable id: {v.id}")
        seen.add(v.id)

        if v.min_value > v.max_value:
            errors.append(f"Variable {v.id}: min_value exceeds max_value")
        elif not (v.min_value <= v.current_value <= v.max_value):
            errors.append(f"Variable {v.id}: current_value outside [min_value, max_value]")
        if v.step_size <= 0:
            errors.append(f"Variable {v.id}: step_size must be positive")
        if v.current_value == 0:
            warnings.append(f"Variable {v.id}: current_value is 0, its changes have no modeled impact")

    variable_ids = {v.id for v in variables}
    seen = set()
    for c in constraints:
        if c.id in seen:
            errors.append(f"Duplicate constraint id: {c.id}")
        seen.add(c.id)
        if not callable(c.validate):
            errors.append(f"Constraint {c.id}: validate must be callable")
        if c.metric is not None and c.metric not in METRIC_NAMES and c.metric not in variable_ids:
            errors.append(f"Constraint {c.id}: unknown metric or variable {c.metric!r}")

    if config is not None:
        if config.population_size < 1:
            errors.append("population_size must be at least 1")
        if config.max_iterations < 0:
            errors.append("max_iterations must be non-negative")
        if config.convergence_threshold < 0:
            errors.append("convergence_threshold must be non-negative")
        if not (0.0 <= config.elite_fraction <= 1.0):
            errors.append("elite_fraction must be within [0, 1]")
        if not (0.0 <= config.mutation_rate <= 1.0):
            errors.append("mutation_rate must be within [0, 1]")
        if config.tournament_size < 1:
            errors.append("tournament_size must be at least 1")
        if config.feasibility_policy not in ('soft', 'hard'):
            errors.append(f"Unknown feasibility policy: {config.feasibility_policy}")

    return len(errors) == 0, errors, warnings


def ensure_valid_problem(
    objectives: Sequence[Objective],
    variables: Sequence[Variable],
    constraints: Sequence[Constraint] = (),
    config: Optional[OptimizationConfig] = None
) -> List[str]:
    """
    Validate a problem and raise on errors

    Returns:
        Warning messages

    Raises:
        OptimizationInputError: If the problem is malformed
    """
    is_valid, errors, warnings = validate_problem(objectives, variables, constraints, config)
    if not is_valid:
        raise OptimizationInputError(f"Invalid optimization problem: {'; '.join(errors)}")
    for warning in warnings:
        logger.warning(f"Problem warning: {warning}")
    return warnings
