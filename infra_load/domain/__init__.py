"""
Domain package for infra-load.

Exports the load profile model shared by scenarios, the Locust runner and the
orchestrator.
"""

from infra_load.domain.models import LoadProfile, parse_duration

__all__ = [
    "LoadProfile",
    "parse_duration",
]
