"""
Utilities package for infra-load.

Exports shared helpers for logging and profiling. Keep this package
lightweight and free of scenario-specific logic.
"""

from infra_load.utils.logging import configure_logging, get_logger
from infra_load.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]
