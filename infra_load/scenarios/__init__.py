"""
Scenarios package for infra-load.

Re-exports the scenario contract and the concrete scenarios so downstream code
can import from `infra_load.scenarios` directly.
"""

from infra_load.scenarios.abstract import BaseLoadScenario, LoadScenario, ScenarioResult
from infra_load.scenarios.blocknumber import BlockNumberScenario
from infra_load.scenarios.health import HealthCheckScenario
from infra_load.scenarios.rpc_proxy import (
    BlockByNumberScenario,
    GasPriceScenario,
    TxByBlockAndIndexScenario,
    WsBlockByNumberScenario,
    WsBlockNumberScenario,
    WsGasPriceScenario,
    WsTxByBlockAndIndexScenario,
)

__all__ = [
    # Abstracts
    "BaseLoadScenario",
    "LoadScenario",
    "ScenarioResult",
    # Concrete scenarios
    "BlockByNumberScenario",
    "BlockNumberScenario",
    "GasPriceScenario",
    "HealthCheckScenario",
    "TxByBlockAndIndexScenario",
    "WsBlockByNumberScenario",
    "WsBlockNumberScenario",
    "WsGasPriceScenario",
    "WsTxByBlockAndIndexScenario",
]
