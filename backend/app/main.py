"""
FastAPI Application for the Restaurant Scenario Optimizer
Provides REST API for multi-objective business optimization and trade-off analysis
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from app.api import health, optimize, analysis, sensitivity
from app.core.config import settings

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifecycle manager for FastAPI application
    Handles startup and shutdown events
    """
    logger.info("Starting Restaurant Scenario Optimizer API...")
    logger.info(
        f"Engine defaults: population={settings.default_population_size}, "
        f"generations={settings.default_max_iterations}, "
        f"policy={settings.default_feasibility_policy}"
    )
    logger.info("API ready to accept requests")

    yield

    # Shutdown
    logger.info("Shutting down API...")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Multi-objective optimization API for restaurant business scenarios",
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan
)

# Configure CORS with environment-based origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(optimize.router, prefix="/api", tags=["optimization"])
app.include_router(analysis.router, prefix="/api", tags=["analysis"])
app.include_router(sensitivity.router, prefix="/api", tags=["analysis"])


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "health": "/health"
    }


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    # Only show details in debug mode to prevent information leakage
    content = {"error": "Internal server error"}
    if settings.show_error_details:
        content["detail"] = str(exc)

    return JSONResponse(
        status_code=500,
        content=content
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
