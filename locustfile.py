"""
Every scenario user in one locustfile, for the Locust web UI.

    locust -f locustfile.py

Pick users and spawn rate in the UI; each class maps to one scenario.
"""

from infra_load.scenarios.blocknumber import BlockNumberUser
from infra_load.scenarios.health import HealthCheckUser
from infra_load.scenarios.rpc_proxy import (
    BlockByNumberUser,
    GasPriceUser,
    TxByBlockAndIndexUser,
    WsBlockByNumberUser,
    WsBlockNumberUser,
    WsGasPriceUser,
    WsTxByBlockAndIndexUser,
)

__all__ = [
    "BlockByNumberUser",
    "BlockNumberUser",
    "GasPriceUser",
    "HealthCheckUser",
    "TxByBlockAndIndexUser",
    "WsBlockByNumberUser",
    "WsBlockNumberUser",
    "WsGasPriceUser",
    "WsTxByBlockAndIndexUser",
]
