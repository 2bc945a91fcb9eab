"""
Pydantic schemas for trade-off, sensitivity and recommendation endpoints
"""

from pydantic import BaseModel, Field
from typing import List, Dict, Optional

from app.schemas.optimize import (
    ProblemRequest,
    RecommendationResult,
    SolutionResult,
    TradeOffResult
)


class AnalysisRequest(ProblemRequest):
    """Problem definition plus the variable assignment to analyze"""
    assignment: Optional[Dict[str, float]] = Field(
        None, description="Variable id -> value (current values if omitted)"
    )


class TradeOffRequest(AnalysisRequest):
    perturbation_pct: float = Field(default=10.0, ge=1.0, le=50.0, description="Relative perturbation per variable")


class TradeOffResponse(BaseModel):
    solution: SolutionResult
    trade_offs: List[TradeOffResult]


class SensitivityRequest(AnalysisRequest):
    """Request for sensitivity analysis"""
    perturbation_pct: float = Field(default=10.0, ge=1.0, le=50.0)


class VariableSensitivity(BaseModel):
    """Sensitivity of business metrics to a single variable"""
    variable_id: str
    variable_name: str
    base_value: float
    perturbed_value: float
    deltas: Dict[str, float] = Field(..., description="Metric -> change under the perturbation")


class SensitivityResponse(BaseModel):
    """Response with sensitivity results"""
    solution: SolutionResult
    perturbation_pct: float
    sensitivities: List[VariableSensitivity]
    computation_time_ms: float


class RecommendationRequest(AnalysisRequest):
    """Recommendations for a chosen variable assignment (e.g. a Pareto alternative)"""


class RecommendationResponse(BaseModel):
    solution: SolutionResult
    trade_offs: List[TradeOffResult]
    recommendations: List[RecommendationResult]
