"""
Pydantic schemas for optimization endpoint
"""

from pydantic import BaseModel, Field
from typing import List, Dict, Optional, Literal, Tuple

from app.core.config import Settings
from app.optimization.models import (
    BusinessBaseline,
    Constraint,
    Impact,
    Objective,
    ObjectiveBounds,
    OptimizationConfig,
    Recommendation,
    Solution,
    TradeOff,
    Variable
)
from app.optimization.constraints import threshold_constraint
from app.optimization.presets import (
    default_constraints,
    default_objectives,
    default_variables
)


class ImpactSchema(BaseModel):
    """Fractional metric change per unit fractional variable change"""
    revenue: float = Field(0.0, description="Revenue sensitivity")
    cost: float = Field(0.0, description="Cost sensitivity")
    quality: float = Field(0.0, description="Quality sensitivity")
    customers: float = Field(0.0, description="Customer count sensitivity")


class ObjectiveBoundsSchema(BaseModel):
    min: Optional[float] = Field(None, description="Lower normalization bound")
    max: Optional[float] = Field(None, description="Upper normalization bound")


class ObjectiveSchema(BaseModel):
    """A weighted objective over one business metric"""
    id: Literal['revenue', 'costs', 'profit', 'margin', 'quality', 'customers'] = Field(
        ..., description="Business metric this objective reads"
    )
    name: str = Field(..., description="Display name")
    type: Literal['maximize', 'minimize', 'target'] = Field(..., description="Optimization direction")
    weight: float = Field(..., ge=0, description="Relative importance (100 total recommended)")
    current: float = Field(..., description="Current value of the metric")
    target: Optional[float] = Field(None, description="Target value (required for target objectives)")
    unit: str = Field("", description="Display unit")
    constraints: Optional[ObjectiveBoundsSchema] = Field(None, description="Normalization bounds")

    def to_objective(self) -> Objective:
        bounds = None
        if self.constraints is not None:
            bounds = ObjectiveBounds(min=self.constraints.min, max=self.constraints.max)
        return Objective(
            id=self.id,
            name=self.name,
            type=self.type,
            weight=self.weight,
            current=self.current,
            target=self.target,
            unit=self.unit,
            constraints=bounds
        )


class VariableSchema(BaseModel):
    """A bounded decision variable"""
    id: str = Field(..., description="Variable identifier (price, staff, marketing, ...)")
    name: str = Field(..., description="Display name")
    current_value: float = Field(..., description="Current value")
    min_value: float = Field(..., description="Lower bound")
    max_value: float = Field(..., description="Upper bound")
    step_size: float = Field(..., gt=0, description="Search step size")
    unit: str = Field("", description="Display unit")
    impact: ImpactSchema = Field(default_factory=ImpactSchema, description="Metric sensitivities")

    def to_variable(self) -> Variable:
        return Variable(
            id=self.id,
            name=self.name,
            current_value=self.current_value,
            min_value=self.min_value,
            max_value=self.max_value,
            step_size=self.step_size,
            unit=self.unit,
            impact=Impact(**self.impact.model_dump())
        )


class ConstraintSchema(BaseModel):
    """
    Threshold constraint on a business metric or variable.
    Defaults by type: budget -> costs <= limit, capacity -> customers <= limit,
    quality -> quality >= limit. Dependency constraints need a metric.
    """
    id: str = Field(..., description="Constraint identifier")
    name: str = Field(..., description="Display name")
    type: Literal['budget', 'capacity', 'quality', 'dependency'] = Field(..., description="Constraint type")
    limit: float = Field(..., description="Threshold value")
    metric: Optional[str] = Field(None, description="Business metric or variable id")
    operator: Optional[Literal['<=', '>=']] = Field(None, description="Comparison")

    def to_constraint(self) -> Constraint:
        return threshold_constraint(
            id=self.id,
            name=self.name,
            type=self.type,
            limit=self.limit,
            metric=self.metric,
            operator=self.operator
        )


class BaselineSchema(BaseModel):
    """Baseline business metrics"""
    revenue: float = Field(125000.0, description="Monthly revenue ($)")
    costs: float = Field(82000.0, description="Monthly costs ($)")
    quality: float = Field(85.0, description="Quality score (pts)")
    customers: float = Field(2850.0, description="Monthly customers")

    def to_baseline(self) -> BusinessBaseline:
        return BusinessBaseline(**self.model_dump())


class OptimizationConfigSchema(BaseModel):
    """Search parameter overrides; unset fields use server defaults"""
    population_size: Optional[int] = Field(None, ge=2, le=500, description="Population size")
    max_iterations: Optional[int] = Field(None, ge=0, le=1000, description="Maximum generations")
    convergence_threshold: Optional[float] = Field(None, ge=0, description="Stop when best score moves less")
    elite_fraction: Optional[float] = Field(None, ge=0, le=1, description="Fraction kept unchanged")
    mutation_rate: Optional[float] = Field(None, ge=0, le=1, description="Per-variable mutation probability")
    feasibility_policy: Optional[Literal['soft', 'hard']] = Field(None, description="Constraint handling")
    seed: Optional[int] = Field(None, description="Random seed for reproducible runs")

    def to_config(self, settings: Settings) -> OptimizationConfig:
        """Merge overrides with server defaults"""
        values = {
            'population_size': settings.default_population_size,
            'max_iterations': settings.default_max_iterations,
            'convergence_threshold': settings.default_convergence_threshold,
            'feasibility_policy': settings.default_feasibility_policy,
            'seed': settings.default_seed
        }
        values.update(self.model_dump(exclude_none=True))
        return OptimizationConfig(**values)


class ProblemRequest(BaseModel):
    """Problem definition shared by optimization and analysis endpoints"""
    objectives: Optional[List[ObjectiveSchema]] = Field(None, description="Objectives (restaurant defaults if omitted)")
    variables: Optional[List[VariableSchema]] = Field(None, description="Decision variables (restaurant defaults if omitted)")
    constraints: Optional[List[ConstraintSchema]] = Field(None, description="Constraints (restaurant defaults if omitted)")
    baseline: Optional[BaselineSchema] = Field(None, description="Baseline business metrics")

    def build_problem(self) -> Tuple[List[Objective], List[Variable], List[Constraint], BusinessBaseline]:
        """Domain objects for this request, falling back to the restaurant presets"""
        baseline = self.baseline.to_baseline() if self.baseline else BusinessBaseline()
        objectives = (
            [o.to_objective() for o in self.objectives]
            if self.objectives is not None else default_objectives(baseline)
        )
        variables = (
            [v.to_variable() for v in self.variables]
            if self.variables is not None else default_variables()
        )
        constraints = (
            [c.to_constraint() for c in self.constraints]
            if self.constraints is not None else default_constraints()
        )
        return objectives, variables, constraints, baseline


class OptimizeRequest(ProblemRequest):
    """Request schema for optimization endpoint"""
    config: Optional[OptimizationConfigSchema] = Field(None, description="Search parameters (optional)")
    n_alternatives: Optional[int] = Field(None, ge=1, le=200, description="Number of Pareto alternatives to return")
    relax_on_infeasible: bool = Field(False, description="Retry once with constraints relaxed 10% if nothing is feasible")

    class Config:
        json_schema_extra = {
            "example": {
                "objectives": [
                    {"id": "revenue", "name": "Maximize Revenue", "type": "maximize",
                     "weight": 50, "current": 125000, "constraints": {"min": 60000, "max": 250000}},
                    {"id": "costs", "name": "Minimize Costs", "type": "minimize",
                     "weight": 50, "current": 82000}
                ],
                "variables": [
                    {"id": "price", "name": "Average Price", "current_value": 42, "min_value": 35,
                     "max_value": 55, "step_size": 1, "unit": "$",
                     "impact": {"revenue": 2.5, "cost": 0, "quality": 0, "customers": 0}}
                ],
                "constraints": [
                    {"id": "budget", "name": "Monthly budget", "type": "budget", "limit": 100000}
                ],
                "config": {"population_size": 50, "max_iterations": 200, "seed": 42},
                "n_alternatives": 10
            }
        }


class SolutionResult(BaseModel):
    """One candidate solution"""
    variables: Dict[str, float] = Field(..., description="Variable id -> value")
    objectives: Dict[str, float] = Field(..., description="Business metric -> value")
    score: float = Field(..., description="Weighted score (0-100)")
    feasible: bool = Field(..., description="Whether all constraints hold")
    dominated_by: Optional[List[str]] = Field(None, description="Dominating population members")

    @classmethod
    def from_solution(cls, solution: Solution) -> 'SolutionResult':
        return cls(**solution.to_dict())


class TradeOffResult(BaseModel):
    """Relationship between two objectives"""
    objective1: str
    objective2: str
    objective1_id: str
    objective2_id: str
    correlation: float = Field(..., ge=-1, le=1, description="Pearson correlation")
    sensitivity: float = Field(..., description="|correlation| scaled by the pair's weights")
    optimal_balance: Dict[str, float] = Field(..., description="Objective values at the solution")

    @classmethod
    def from_trade_off(cls, trade_off: TradeOff) -> 'TradeOffResult':
        return cls(**trade_off.to_dict())


class RecommendationResult(BaseModel):
    """Prioritized action derived from the optimal solution"""
    priority: Literal['high', 'medium', 'low']
    action: str
    impact: str
    timeframe: str
    resources: List[str]
    risk: str

    @classmethod
    def from_recommendation(cls, rec: Recommendation) -> 'RecommendationResult':
        return cls(
            priority=rec.priority,
            action=rec.action,
            impact=rec.impact,
            timeframe=rec.timeframe,
            resources=list(rec.resources),
            risk=rec.risk
        )


class OptimizeResponse(BaseModel):
    """Response schema for optimization endpoint"""
    optimal: SolutionResult = Field(..., description="Best solution found")
    pareto_alternatives: List[SolutionResult] = Field(..., description="Diverse Pareto-optimal alternatives")
    n_pareto: int = Field(..., description="Total Pareto front size")
    trade_offs: List[TradeOffResult] = Field(..., description="Pairwise objective relationships")
    recommendations: List[RecommendationResult] = Field(..., description="Prioritized actions")
    convergence_history: List[float] = Field(..., description="Best score per generation")
    iterations: int = Field(..., description="Generations executed")
    converged: bool = Field(..., description="Whether the convergence threshold was reached")
    cancelled: bool = Field(..., description="Whether the time budget stopped the run early")
    feasible: bool = Field(..., description="Whether the optimal solution satisfies all constraints")
    feasible_count: int = Field(..., description="Feasible solutions in the final population")
    hypervolume: float = Field(..., description="Pareto front hypervolume (normalized loss space)")
    execution_time_s: float = Field(..., description="Engine run time (seconds)")
    optimization_time_s: float = Field(..., description="Total request time (seconds)")

    # Optional constraint relaxation info
    constraint_relaxation: Optional[Dict] = Field(None, description="Applied constraint relaxation")
    warnings: Optional[List[str]] = Field(None, description="Validation warnings")
