"""
Core data types for the multi-objective business optimizer
Objectives, decision variables, constraints, candidate solutions and results
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Callable, Dict, List, Literal, Mapping, Optional, Tuple

ObjectiveType = Literal['maximize', 'minimize', 'target']
ConstraintType = Literal['budget', 'capacity', 'quality', 'dependency']
FeasibilityPolicy = Literal['soft', 'hard']

# Business metrics produced by the evaluation model.
# Objective ids must name one of these.
METRIC_NAMES = ('revenue', 'costs', 'profit', 'margin', 'quality', 'customers')


class OptimizationInputError(ValueError):
    """Raised when objectives, variables or config violate the caller contract"""


@dataclass(frozen=True)
class BusinessBaseline:
    """Baseline business metrics the variable impacts are applied to"""
    revenue: float = 125000.0
    costs: float = 82000.0
    quality: float = 85.0
    customers: float = 2850.0


@dataclass(frozen=True)
class Impact:
    """
    Fractional change in each business metric per unit fractional
    change in a decision variable
    """
    revenue: float = 0.0
    cost: float = 0.0
    quality: float = 0.0
    customers: float = 0.0


@dataclass(frozen=True)
class ObjectiveBounds:
    min: Optional[float] = None
    max: Optional[float] = None


@dataclass(frozen=True)
class Objective:
    """A weighted criterion over one business metric"""
    id: str
    name: str
    type: ObjectiveType
    weight: float
    current: float
    target: Optional[float] = None
    unit: str = ''
    constraints: Optional[ObjectiveBounds] = None

    def normalization_range(self) -> Tuple[float, float]:
        """
        Range used to normalize this objective's values

        Returns:
            (min, max), explicit bounds where given, otherwise current ± 50%
        """
        lower = self.current * 0.5
        upper = self.current * 1.5
        if self.constraints is not None:
            if self.constraints.min is not None:
                lower = self.constraints.min
            if self.constraints.max is not None:
                upper = self.constraints.max
        return lower, upper


@dataclass(frozen=True)
class Variable:
    """A bounded decision variable (business lever)"""
    id: str
    name: str
    current_value: float
    min_value: float
    max_value: float
    step_size: float
    unit: str = ''
    impact: Impact = field(default_factory=Impact)

    def clamp(self, value: float) -> float:
        return max(self.min_value, min(self.max_value, value))


@dataclass(frozen=True)
class Solution:
    """
    Candidate point in variable space

    Mappings are read-only; derive new solutions with `with_variable`
    rather than editing one in place.
    """
    variables: Mapping[str, float]
    objectives: Mapping[str, float]
    score: float = 0.0
    feasible: bool = True
    dominated_by: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        object.__setattr__(self, 'variables', MappingProxyType(dict(self.variables)))
        object.__setattr__(self, 'objectives', MappingProxyType(dict(self.objectives)))

    def with_variable(self, variable_id: str, value: float) -> Dict[str, float]:
        """Copy of the variable assignment with one value changed"""
        assignment = dict(self.variables)
        assignment[variable_id] = value
        return assignment

    def with_dominators(self, dominators: List[str]) -> 'Solution':
        return replace(self, dominated_by=tuple(dominators))

    def to_dict(self) -> Dict:
        return {
            'variables': dict(self.variables),
            'objectives': dict(self.objectives),
            'score': self.score,
            'feasible': self.feasible,
            'dominated_by': list(self.dominated_by) if self.dominated_by is not None else None
        }


@dataclass(frozen=True)
class Constraint:
    """A feasibility predicate over a solution"""
    id: str
    name: str
    type: ConstraintType
    validate: Callable[[Solution], bool]
    limit: Optional[float] = None
    # Set for declarative threshold constraints so they can be relaxed
    metric: Optional[str] = None
    operator: Optional[str] = None


@dataclass(frozen=True)
class OptimizationConfig:
    """Search parameters for `multi_objective_optimize`"""
    population_size: int = 50
    max_iterations: int = 200
    convergence_threshold: float = 0.001
    elite_fraction: float = 0.2
    mutation_rate: float = 0.1
    tournament_size: int = 2
    initial_local_search_iterations: int = 20
    offspring_local_search_iterations: int = 10
    feasibility_policy: FeasibilityPolicy = 'soft'
    seed: Optional[int] = None


@dataclass(frozen=True)
class TradeOff:
    """Relationship between two objectives near a solution"""
    objective1: str
    objective2: str
    objective1_id: str
    objective2_id: str
    correlation: float
    sensitivity: float
    optimal_balance: Dict[str, float]

    def to_dict(self) -> Dict:
        return {
            'objective1': self.objective1,
            'objective2': self.objective2,
            'objective1_id': self.objective1_id,
            'objective2_id': self.objective2_id,
            'correlation': self.correlation,
            'sensitivity': self.sensitivity,
            'optimal_balance': dict(self.optimal_balance)
        }


@dataclass(frozen=True)
class Recommendation:
    priority: Literal['high', 'medium', 'low']
    action: str
    impact: str
    timeframe: str
    resources: List[str]
    risk: str


@dataclass
class OptimizationResult:
    """Terminal output of one optimization run"""
    optimal: Solution
    pareto_front: List[Solution]
    trade_offs: List[TradeOff]
    convergence_history: List[float]
    iterations: int
    execution_time: float
    population: List[Solution] = field(default_factory=list)
    converged: bool = False
    cancelled: bool = False
    feasible_count: int = 0
    hypervolume: float = 0.0
