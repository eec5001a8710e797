"""
Scenarios for the proxy's remaining read endpoints.

The proxy forwards each call to an Ethereum JSON-RPC upstream, either over
HTTP or over a shared websocket (the ``/ws/...`` routes). These scenarios share
one default profile: 10 users for a minute, no think time.
"""

from __future__ import annotations

from locust import HttpUser, constant, task

from infra_load.config import DEFAULT_TARGET_HOST
from infra_load.domain.models import LoadProfile
from infra_load.scenarios.abstract import BaseLoadScenario

PROXY_DEFAULT_PROFILE = LoadProfile(users=10, duration="1m")

BLOCK_BY_NUMBER_BODY = {"block": "latest", "txdetails": "false"}
TX_BY_BLOCK_AND_INDEX_BODY = {"block": "latest", "index": "0x0"}


class _ProxyUser(HttpUser):
    abstract = True
    host = DEFAULT_TARGET_HOST
    wait_time = constant(0)


class GasPriceUser(_ProxyUser):
    @task
    def gas_price(self) -> None:
        self.client.get("/gasprice")


class WsBlockNumberUser(_ProxyUser):
    @task
    def ws_block_number(self) -> None:
        self.client.get("/ws/blocknumber")


class WsGasPriceUser(_ProxyUser):
    @task
    def ws_gas_price(self) -> None:
        self.client.get("/ws/gasprice")


class BlockByNumberUser(_ProxyUser):
    @task
    def block_by_number(self) -> None:
        self.client.post("/blockbynumber", json=BLOCK_BY_NUMBER_BODY)


class TxByBlockAndIndexUser(_ProxyUser):
    @task
    def tx_by_block_and_index(self) -> None:
        self.client.post("/txbyblockandindex", json=TX_BY_BLOCK_AND_INDEX_BODY)


class WsBlockByNumberUser(_ProxyUser):
    @task
    def ws_block_by_number(self) -> None:
        self.client.post("/ws/blockbynumber", json=BLOCK_BY_NUMBER_BODY)


class WsTxByBlockAndIndexUser(_ProxyUser):
    @task
    def ws_tx_by_block_and_index(self) -> None:
        self.client.post("/ws/txbyblockandindex", json=TX_BY_BLOCK_AND_INDEX_BODY)


class GasPriceScenario(BaseLoadScenario):
    name = "gasprice"
    description = "GET /gasprice over the HTTP upstream."
    user_class = GasPriceUser
    profile = PROXY_DEFAULT_PROFILE


class WsBlockNumberScenario(BaseLoadScenario):
    name = "ws_blocknumber"
    description = "GET /ws/blocknumber; all users share the proxy's single upstream websocket."
    user_class = WsBlockNumberUser
    profile = PROXY_DEFAULT_PROFILE
    notes = "Upstream websocket is shared; concurrent users serialize on it."


class WsGasPriceScenario(BaseLoadScenario):
    name = "ws_gasprice"
    description = "GET /ws/gasprice; all users share the proxy's single upstream websocket."
    user_class = WsGasPriceUser
    profile = PROXY_DEFAULT_PROFILE
    notes = "Upstream websocket is shared; concurrent users serialize on it."


class BlockByNumberScenario(BaseLoadScenario):
    name = "blockbynumber"
    description = "POST /blockbynumber for the latest block, without transaction details."
    user_class = BlockByNumberUser
    profile = PROXY_DEFAULT_PROFILE


class TxByBlockAndIndexScenario(BaseLoadScenario):
    name = "txbyblockandindex"
    description = "POST /txbyblockandindex for the first transaction of the latest block."
    user_class = TxByBlockAndIndexUser
    profile = PROXY_DEFAULT_PROFILE


class WsBlockByNumberScenario(BaseLoadScenario):
    name = "ws_blockbynumber"
    description = "POST /ws/blockbynumber; all users share the proxy's single upstream websocket."
    user_class = WsBlockByNumberUser
    profile = PROXY_DEFAULT_PROFILE
    notes = "Upstream websocket is shared; concurrent users serialize on it."


class WsTxByBlockAndIndexScenario(BaseLoadScenario):
    name = "ws_txbyblockandindex"
    description = "POST /ws/txbyblockandindex; all users share the proxy's single upstream websocket."
    user_class = WsTxByBlockAndIndexUser
    profile = PROXY_DEFAULT_PROFILE
    notes = "Upstream websocket is shared; concurrent users serialize on it."


__all__ = [
    "BLOCK_BY_NUMBER_BODY",
    "PROXY_DEFAULT_PROFILE",
    "TX_BY_BLOCK_AND_INDEX_BODY",
    "BlockByNumberScenario",
    "BlockByNumberUser",
    "GasPriceScenario",
    "GasPriceUser",
    "TxByBlockAndIndexScenario",
    "TxByBlockAndIndexUser",
    "WsBlockByNumberScenario",
    "WsBlockByNumberUser",
    "WsBlockNumberScenario",
    "WsBlockNumberUser",
    "WsGasPriceScenario",
    "WsGasPriceUser",
    "WsTxByBlockAndIndexScenario",
    "WsTxByBlockAndIndexUser",
]
