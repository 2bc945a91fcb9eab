"""
Pydantic schemas for health check endpoint
"""

from pydantic import BaseModel, Field
from typing import Dict, Optional


class HealthResponse(BaseModel):
    """Response schema for health check endpoint"""
    status: str = Field(..., description="API status (healthy/unhealthy)")
    timestamp: str = Field(..., description="Current server timestamp (ISO format)")
    version: str = Field(..., description="API version")
    engine_defaults: Optional[Dict] = Field(None, description="Default optimization parameters")

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "timestamp": "2025-01-03T12:00:00Z",
                "version": "1.0.0",
                "engine_defaults": {
                    "population_size": 50,
                    "max_iterations": 200,
                    "convergence_threshold": 0.001,
                    "feasibility_policy": "soft"
                }
            }
        }
