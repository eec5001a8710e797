"""
Infrastructure package for infra-load.

Centralizes the I/O-facing pieces: the Locust runner adapter, load shapes for
standalone locustfiles, and the preflight probe. Keep this layer decoupled
from scenario/orchestrator logic.
"""

from infra_load.infrastructure.locust_runner import LoadStats, iteration_limited, run_load
from infra_load.infrastructure.shapes import ProfileShape, shape_for
from infra_load.infrastructure.target import TargetUnavailableError, probe_target

__all__ = [
    "LoadStats",
    "ProfileShape",
    "TargetUnavailableError",
    "iteration_limited",
    "probe_target",
    "run_load",
    "shape_for",
]
