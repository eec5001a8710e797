"""
infra-load - load-test scenarios for the block number proxy service.

Each scenario pairs a Locust user (one HTTP call per iteration) with a default
load profile. The package wraps them in configuration, structured logging,
load-generator profiling, result persistence, and a rich console report:

- blocknumber: 100 users hammering GET /blocknumber for 30 minutes
- health: a single GET /health followed by a one second sleep
- gasprice, ws_blocknumber, ws_gasprice, blockbynumber, txbyblockandindex:
  the proxy's remaining read endpoints
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from infra_load.config import Settings, get_settings
from infra_load.domain.models import LoadProfile, parse_duration
from infra_load.orchestrator import RunConfig, available_scenarios, run_scenarios
from infra_load.scenarios.abstract import BaseLoadScenario, LoadScenario, ScenarioResult
from infra_load.utils.logging import configure_logging, get_logger
from infra_load.utils.profiler import ProfileStats, profile_block

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "LoadProfile",
    "parse_duration",
    # Orchestration
    "RunConfig",
    "available_scenarios",
    "run_scenarios",
    # Scenario abstractions
    "BaseLoadScenario",
    "LoadScenario",
    "ScenarioResult",
    # Logging
    "configure_logging",
    "get_logger",
    # Profiling
    "ProfileStats",
    "profile_block",
]
