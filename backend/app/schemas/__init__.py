"""Pydantic schemas for request/response validation"""

from app.schemas.optimize import OptimizeRequest, OptimizeResponse, SolutionResult
from app.schemas.analysis import (
    SensitivityRequest,
    SensitivityResponse,
    TradeOffRequest,
    TradeOffResponse,
    RecommendationRequest,
    RecommendationResponse
)
from app.schemas.health import HealthResponse

__all__ = [
    "OptimizeRequest",
    "OptimizeResponse",
    "SolutionResult",
    "SensitivityRequest",
    "SensitivityResponse",
    "TradeOffRequest",
    "TradeOffResponse",
    "RecommendationRequest",
    "RecommendationResponse",
    "HealthResponse"
]
