"""
Multi-Objective Optimization Engine for Restaurant Business Scenarios
Weighted-sum genetic search with hill climbing, Pareto fronts and trade-off analysis
"""

from app.optimization.models import (
    BusinessBaseline,
    Constraint,
    Impact,
    Objective,
    ObjectiveBounds,
    OptimizationConfig,
    OptimizationInputError,
    OptimizationResult,
    Recommendation,
    Solution,
    TradeOff,
    Variable
)
from app.optimization.genetic import (
    PopulationSearch,
    multi_objective_optimize,
    select_optimal
)
from app.optimization.objectives import (
    evaluate_objectives,
    evaluate_solution,
    calculate_weighted_score,
    normalize
)
from app.optimization.local_search import hill_climb
from app.optimization.pareto import (
    dominates,
    annotate_dominance,
    find_pareto_front,
    compute_crowding_distance,
    select_diverse_subset,
    compute_hypervolume_indicator
)
from app.optimization.tradeoffs import (
    pearson_correlation,
    variable_sensitivities,
    calculate_trade_offs
)
from app.optimization.recommendations import generate_recommendations
from app.optimization.presets import (
    default_constraints,
    default_objectives,
    default_variables
)
from app.optimization.constraints import (
    ConstraintHandler,
    threshold_constraint,
    check_feasibility,
    validate_problem
)

__all__ = [
    # Data model
    "BusinessBaseline",
    "Constraint",
    "Impact",
    "Objective",
    "ObjectiveBounds",
    "OptimizationConfig",
    "OptimizationInputError",
    "OptimizationResult",
    "Recommendation",
    "Solution",
    "TradeOff",
    "Variable",

    # Search
    "PopulationSearch",
    "multi_objective_optimize",
    "select_optimal",
    "hill_climb",

    # Objectives
    "evaluate_objectives",
    "evaluate_solution",
    "calculate_weighted_score",
    "normalize",

    # Pareto extraction
    "dominates",
    "annotate_dominance",
    "find_pareto_front",
    "compute_crowding_distance",
    "select_diverse_subset",
    "compute_hypervolume_indicator",

    # Trade-offs and recommendations
    "pearson_correlation",
    "variable_sensitivities",
    "calculate_trade_offs",
    "generate_recommendations",

    # Constraints
    "ConstraintHandler",
    "threshold_constraint",
    "check_feasibility",
    "validate_problem",

    # Restaurant presets
    "default_constraints",
    "default_objectives",
    "default_variables"
]
