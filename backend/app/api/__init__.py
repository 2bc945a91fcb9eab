"""
API endpoints for the Restaurant Scenario Optimizer
"""

from . import health, optimize, analysis, sensitivity

__all__ = ["health", "optimize", "analysis", "sensitivity"]
