"""
Tests for constraint handling and validation
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(backend_dir))

from app.optimization.constraints import (
    ConstraintHandler,
    check_feasibility,
    ensure_valid_problem,
    threshold_constraint,
    validate_problem
)
from app.optimization.models import (
    Constraint,
    Objective,
    ObjectiveBounds,
    OptimizationConfig,
    OptimizationInputError,
    Solution,
    Variable
)
from app.optimization.presets import (
    default_constraints,
    default_objectives,
    default_variables
)


def make_solution(**metrics):
    base = {'revenue': 125000.0, 'costs': 82000.0, 'profit': 43000.0,
            'margin': 34.4, 'quality': 85.0, 'customers': 2850.0}
    base.update(metrics)
    return Solution(variables={'price': 42.0}, objectives=base)


def raising_predicate(solution):
    raise RuntimeError("lookup failed")


class TestThresholdConstraint:
    """Tests for declarative threshold constraints"""

    def test_budget_defaults_to_costs_upper_limit(self):
        budget = threshold_constraint('budget', 'Budget', 'budget', limit=90000)

        assert budget.metric == 'costs'
        assert budget.operator == '<='
        assert budget.validate(make_solution(costs=85000))
        assert not budget.validate(make_solution(costs=95000))

    def test_quality_defaults_to_lower_limit(self):
        quality = threshold_constraint('min_quality', 'Quality', 'quality', limit=80)

        assert quality.operator == '>='
        assert quality.validate(make_solution(quality=85))
        assert not quality.validate(make_solution(quality=75))

    def test_capacity_defaults_to_customers(self):
        capacity = threshold_constraint('seats', 'Seats', 'capacity', limit=3000)
        assert capacity.metric == 'customers'
        assert not capacity.validate(make_solution(customers=3100))

    def test_limit_is_inclusive(self):
        budget = threshold_constraint('budget', 'Budget', 'budget', limit=82000)
        assert budget.validate(make_solution(costs=82000))

    def test_dependency_on_variable(self):
        """Thresholds can read decision variables as well as metrics"""
        max_price = threshold_constraint('max_price', 'Max price', 'dependency', limit=45, metric='price')
        assert max_price.validate(make_solution())

    def test_dependency_requires_metric(self):
        with pytest.raises(OptimizationInputError):
            threshold_constraint('dep', 'Dependency', 'dependency', limit=1)

    def test_rejects_unknown_operator(self):
        with pytest.raises(OptimizationInputError):
            threshold_constraint('budget', 'Budget', 'budget', limit=1, operator='<')


class TestCheckFeasibility:
    """Tests for feasibility checks over constraint lists"""

    def test_reports_violated_ids(self):
        feasible, violated = check_feasibility(
            make_solution(costs=105000, quality=70),
            default_constraints()
        )
        assert not feasible
        assert violated == ['budget', 'min_quality']

    def test_no_constraints_is_feasible(self):
        assert check_feasibility(make_solution(), []) == (True, [])

    def test_raising_predicate_counts_as_violation(self):
        """A predicate that raises marks the solution infeasible without propagating"""
        broken = Constraint(id='broken', name='Broken', type='dependency', validate=raising_predicate)
        feasible, violated = check_feasibility(make_solution(), [broken])

        assert not feasible
        assert violated == ['broken']

    def test_unknown_metric_counts_as_violation(self):
        typo = threshold_constraint('typo', 'Typo', 'dependency', limit=1, metric='revenu')
        feasible, _ = check_feasibility(make_solution(), [typo])
        assert not feasible


class TestProblemValidation:
    """Tests for validate_problem"""

    def test_default_problem_is_valid(self):
        is_valid, errors, warnings = validate_problem(
            default_objectives(), default_variables(), default_constraints(), OptimizationConfig()
        )
        assert is_valid
        assert len(errors) == 0
        assert len(warnings) == 0

    def test_target_without_target_value(self):
        objectives = [Objective(id='margin', name='Margin', type='target', weight=100, current=30)]
        is_valid, errors, _ = validate_problem(objectives, default_variables())

        assert not is_valid
        assert any('must define a target' in error for error in errors)

    def test_unknown_objective_metric(self):
        objectives = [Objective(id='happiness', name='Happiness', type='maximize', weight=100, current=1)]
        is_valid, errors, _ = validate_problem(objectives, default_variables())

        assert not is_valid
        assert any('unknown metric' in error for error in errors)

    def test_negative_weight(self):
        objectives = [Objective(id='revenue', name='Revenue', type='maximize', weight=-5, current=1)]
        is_valid, errors, _ = validate_problem(objectives, default_variables())
        assert not is_valid
        assert any('weight must be non-negative' in error for error in errors)

    def test_inverted_objective_bounds(self):
        objectives = [Objective(
            id='revenue', name='Revenue', type='maximize', weight=100, current=1,
            constraints=ObjectiveBounds(min=10, max=5)
        )]
        is_valid, errors, _ = validate_problem(objectives, default_variables())
        assert not is_valid

    def test_variable_bounds(self):
        variables = [
            Variable(id='price', name='Price', current_value=42, min_value=55, max_value=35, step_size=1),
            Variable(id='staff', name='Staff', current_value=30, min_value=10, max_value=25, step_size=1),
            Variable(id='menu', name='Menu', current_value=45, min_value=30, max_value=70, step_size=0),
        ]
        is_valid, errors, _ = validate_problem(default_objectives(), variables)

        assert not is_valid
        assert any('price: min_value exceeds max_value' in error for error in errors)
        assert any('staff: current_value outside' in error for error in errors)
        assert any('menu: step_size must be positive' in error for error in errors)

    def test_duplicate_ids(self):
        variables = default_variables() + default_variables()[:1]
        is_valid, errors, _ = validate_problem(default_objectives(), variables)
        assert not is_valid
        assert any('Duplicate variable id: price' in error for error in errors)

    def test_empty_problem(self):
        is_valid, errors, _ = validate_problem([], [])
        assert not is_valid
        assert len(errors) == 2

    def test_invalid_config(self):
        config = OptimizationConfig(population_size=0, elite_fraction=1.5)
        is_valid, errors, _ = validate_problem(default_objectives(), default_variables(), config=config)

        assert not is_valid
        assert any('population_size' in error for error in errors)
        assert any('elite_fraction' in error for error in errors)

    def test_weight_sum_warning(self):
        """Weights not summing to 100 only warn"""
        objectives = [Objective(id='revenue', name='Revenue', type='maximize', weight=60, current=125000)]
        is_valid, _, warnings = validate_problem(objectives, default_variables())

        assert is_valid
        assert any('sum to 60' in warning for warning in warnings)

    def test_threshold_metric_typo(self):
        """A threshold on an unknown metric fails validation instead of making every solution infeasible"""
        constraints = [threshold_constraint('b', 'Budget', 'dependency', limit=10, metric='revnue')]
        is_valid, errors, _ = validate_problem(default_objectives(), default_variables(), constraints)

        assert not is_valid
        assert any("unknown metric or variable 'revnue'" in error for error in errors)

    def test_threshold_on_variable_is_valid(self):
        constraints = [threshold_constraint('max_price', 'Max price', 'dependency', limit=50, metric='price')]
        is_valid, _, _ = validate_problem(default_objectives(), default_variables(), constraints)
        assert is_valid

    def test_ensure_valid_problem_raises(self):
        objectives = [Objective(id='margin', name='Margin', type='target', weight=100, current=30)]
        with pytest.raises(OptimizationInputError):
            ensure_valid_problem(objectives, default_variables())

    def test_input_error_is_value_error(self):
        assert issubclass(OptimizationInputError, ValueError)


class TestConstraintHandler:
    """Tests for ConstraintHandler class"""

    def test_relax_constraints(self):
        """Upper limits rise and lower limits fall by the relaxation factor"""
        handler = ConstraintHandler(default_constraints())
        result = handler.relax_constraints(relaxation_factor=0.10)

        assert result['original_limits'] == {'budget': 100000, 'min_quality': 75}
        assert result['relaxed_limits']['budget'] == pytest.approx(110000)
        assert result['relaxed_limits']['min_quality'] == pytest.approx(67.5)
        assert len(result['relaxation_description']) == 2

        relaxed_budget = result['relaxed_constraints'][0]
        assert relaxed_budget.validate(make_solution(costs=105000))

    def test_relax_keeps_predicate_constraints(self):
        custom = Constraint(id='custom', name='Custom', type='dependency', validate=lambda s: True)
        handler = ConstraintHandler([custom])
        result = handler.relax_constraints()

        assert result['relaxed_constraints'] == [custom]
        assert result['relaxed_limits'] == {}

    def test_reset_constraints(self):
        handler = ConstraintHandler(default_constraints())
        handler.relax_constraints()
        handler.reset_constraints()

        assert [c.limit for c in handler.constraints] == [100000, 75]

    def test_feasibility_report(self):
        handler = ConstraintHandler(default_constraints())
        solutions = [
            make_solution(),
            make_solution(costs=105000),
            make_solution(costs=105000, quality=70),
        ]
        report = handler.feasibility_report(solutions)

        assert report['n_feasible'] == 1
        assert report['feasibility_rate'] == pytest.approx(1 / 3)
        assert report['violation_counts'] == {'budget': 2, 'min_quality': 1}
        np.testing.assert_array_equal(report['feasible_mask'], [True, False, False])

    def test_feasibility_report_empty(self):
        report = ConstraintHandler(default_constraints()).feasibility_report([])
        assert report['feasibility_rate'] == 0.0

    def test_violation_amounts(self):
        handler = ConstraintHandler(default_constraints())
        violations = handler.violation_amounts(make_solution(costs=110000, quality=80))

        assert violations['budget'] == pytest.approx(0.10)
        assert violations['min_quality'] == 0.0
