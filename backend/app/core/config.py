"""
Configuration management for FastAPI application
"""

from pydantic_settings import BaseSettings
from typing import List, Literal, Optional


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Environment
    environment: str = "development"  # development, staging, production

    # API Configuration
    app_name: str = "Restaurant Scenario Optimizer API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # CORS Configuration
    # In production, set CORS_ORIGINS env var to your domain(s)
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]
    cors_allow_credentials: bool = True
    cors_allow_methods: List[str] = ["*"]
    cors_allow_headers: List[str] = ["*"]

    # Optimization defaults
    default_population_size: int = 50
    default_max_iterations: int = 200
    default_convergence_threshold: float = 0.001
    default_feasibility_policy: Literal["soft", "hard"] = "soft"
    default_seed: Optional[int] = None
    default_n_alternatives: int = 10
    max_optimization_time: float = 60.0  # seconds

    # Security
    show_error_details: bool = False  # Set to False in production

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Singleton settings instance
settings = Settings()
