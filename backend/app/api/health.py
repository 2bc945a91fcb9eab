"""
Health check endpoint
"""

from fastapi import APIRouter
from datetime import datetime, timezone

from app.core.config import settings
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check():
    """
    Health check endpoint

    Returns:
        HealthResponse with status, timestamp and engine defaults
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.app_version,
        engine_defaults={
            "population_size": settings.default_population_size,
            "max_iterations": settings.default_max_iterations,
            "convergence_threshold": settings.default_convergence_threshold,
            "feasibility_policy": settings.default_feasibility_policy,
            "max_optimization_time": settings.max_optimization_time
        }
    )
