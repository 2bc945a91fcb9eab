"""
Core application components
"""

from .config import settings, Settings
from .runner import run_optimization_in_thread

__all__ = ["settings", "Settings", "run_optimization_in_thread"]
