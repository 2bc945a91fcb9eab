"""
Tests for trade-off analysis and local sensitivity perturbations
"""

import pytest
import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent.resolve()
sys.path.insert(0, str(backend_dir))

from app.optimization.models import BusinessBaseline, Impact, Objective, Variable
from app.optimization.objectives import evaluate_solution
from app.optimization.presets import default_objectives, default_variables
from app.optimization.tradeoffs import (
    calculate_trade_offs,
    pearson_correlation,
    variable_sensitivities
)


def current_solution(variables, objectives):
    return evaluate_solution(
        {v.id: v.current_value for v in variables},
        variables, objectives, [], BusinessBaseline()
    )


class TestPearsonCorrelation:
    """Tests for the correlation helper"""

    def test_self_correlation(self):
        x = [1.0, 4.0, 2.0, 8.0]
        assert pearson_correlation(x, x) == pytest.approx(1.0)

    def test_negated_series(self):
        x = [1.0, 4.0, 2.0, 8.0]
        assert pearson_correlation(x, [-v for v in x]) == pytest.approx(-1.0)

    def test_symmetry(self):
        x = [1.0, 4.0, 2.0, 8.0]
        y = [3.0, 1.0, 5.0, 2.0]
        assert pearson_correlation(x, y) == pytest.approx(pearson_correlation(y, x))

    def test_invariant_to_offset(self):
        """Centered computation ignores large constant offsets"""
        x = [1.0, 2.0, 3.0]
        y = [125001.0, 125002.0, 125003.0]
        assert pearson_correlation(x, y) == pytest.approx(1.0)

    def test_zero_variance(self):
        assert pearson_correlation([1.0, 2.0, 3.0], [5.0, 5.0, 5.0]) == 0.0

    def test_too_few_samples(self):
        assert pearson_correlation([1.0], [2.0]) == 0.0
        assert pearson_correlation([], []) == 0.0

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            pearson_correlation([1.0, 2.0], [1.0, 2.0, 3.0])


class TestVariableSensitivities:
    """Tests for one-at-a-time perturbation"""

    def test_one_perturbation_per_variable(self):
        variables = default_variables()
        perturbations = variable_sensitivities(current_solution(variables, default_objectives()), variables, BusinessBaseline())

        assert [p['variable_id'] for p in perturbations] == [v.id for v in variables]
        price = perturbations[0]
        assert price['perturbed_value'] == pytest.approx(42 * 1.1)
        # revenue impact 0.8 on a 10% change
        assert price['deltas']['revenue'] == pytest.approx(125000 * 0.1 * 0.8)

    def test_perturbation_is_not_clamped(self):
        variables = default_variables()
        solution = evaluate_solution(
            {'price': 55, 'staff': 15, 'marketing': 5000, 'inventory': 7, 'menu': 45},
            variables, default_objectives(), [], BusinessBaseline()
        )
        perturbations = variable_sensitivities(solution, variables, BusinessBaseline())
        assert perturbations[0]['perturbed_value'] == pytest.approx(60.5)


class TestTradeOffs:
    """Tests for pairwise objective trade-offs"""

    def test_one_trade_off_per_pair(self):
        variables = default_variables()
        objectives = default_objectives()
        trade_offs = calculate_trade_offs(current_solution(variables, objectives), variables, objectives, BusinessBaseline())

        assert len(trade_offs) == 10
        pairs = {(t.objective1_id, t.objective2_id) for t in trade_offs}
        assert ('profit', 'costs') in pairs
        for t in trade_offs:
            assert -1.0 <= t.correlation <= 1.0
            assert t.sensitivity >= 0

    def test_conflicting_objectives(self):
        """Revenue and customers move in opposite directions across these levers"""
        variables = [
            Variable(id='price', name='Price', current_value=42, min_value=35, max_value=55, step_size=1,
                     impact=Impact(revenue=0.8, customers=-0.3)),
            Variable(id='staff', name='Staff', current_value=15, min_value=10, max_value=25, step_size=1,
                     impact=Impact(revenue=0.3, customers=0.2)),
            Variable(id='menu', name='Menu', current_value=45, min_value=30, max_value=70, step_size=5,
                     impact=Impact(revenue=0.2, customers=0.4)),
        ]
        objectives = [
            Objective(id='revenue', name='Revenue', type='maximize', weight=60, current=125000),
            Objective(id='customers', name='Customers', type='maximize', weight=40, current=2850),
        ]
        solution = current_solution(variables, objectives)
        (trade_off,) = calculate_trade_offs(solution, variables, objectives, BusinessBaseline())

        assert trade_off.correlation < -0.9
        assert trade_off.sensitivity == pytest.approx(abs(trade_off.correlation) * 0.5)
        assert trade_off.optimal_balance == {
            'obj1_value': pytest.approx(125000),
            'obj2_value': pytest.approx(2850)
        }

    def test_single_variable_gives_zero_correlation(self):
        variables = default_variables()[:1]
        objectives = default_objectives()
        trade_offs = calculate_trade_offs(current_solution(variables, objectives), variables, objectives, BusinessBaseline())
        assert all(t.correlation == 0.0 for t in trade_offs)

    def test_single_objective_has_no_pairs(self):
        variables = default_variables()
        objectives = default_objectives()[:1]
        assert calculate_trade_offs(current_solution(variables, objectives), variables, objectives, BusinessBaseline()) == []
