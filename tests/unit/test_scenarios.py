"""
Scenario configuration facts: endpoints, user counts, durations, think times.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from infra_load.scenarios.blocknumber import BlockNumberScenario, BlockNumberUser
from infra_load.scenarios.health import HealthCheckScenario, HealthCheckUser
from infra_load.scenarios.rpc_proxy import (
    BLOCK_BY_NUMBER_BODY,
    TX_BY_BLOCK_AND_INDEX_BODY,
    BlockByNumberUser,
    GasPriceUser,
    TxByBlockAndIndexUser,
    WsBlockByNumberUser,
    WsBlockNumberUser,
    WsGasPriceUser,
    WsTxByBlockAndIndexUser,
)

TARGET = "http://host.docker.internal:8000"


def _run_single_task(user_class) -> MagicMock:
    """Invoke the user's only task against a mock HTTP client."""
    assert len(user_class.tasks) == 1
    client = MagicMock()
    user_class.tasks[0](SimpleNamespace(client=client))
    return client


class TestBlockNumberScenario:
    def test_profile_is_100_users_for_30_minutes(self):
        profile = BlockNumberScenario.profile
        assert profile.users == 100
        assert profile.duration == "30m"
        assert profile.duration_seconds == 30 * 60
        assert profile.iterations is None

    def test_no_sleep_between_iterations(self):
        assert BlockNumberScenario.profile.think_time_seconds is None
        assert BlockNumberUser.wait_time(None) == 0

    def test_each_iteration_gets_blocknumber(self):
        client = _run_single_task(BlockNumberUser)
        client.get.assert_called_once_with("/blocknumber")
        assert client.post.call_count == 0
        assert BlockNumberUser.host == TARGET

    def test_response_is_not_inspected(self):
        client = _run_single_task(BlockNumberUser)
        assert client.get.return_value.method_calls == []


class TestHealthCheckScenario:
    def test_defaults_to_one_user_one_iteration(self):
        profile = HealthCheckScenario.profile
        assert profile.users == 1
        assert profile.iterations == 1
        assert profile.duration is None

    def test_sleeps_one_second_after_each_iteration(self):
        assert HealthCheckScenario.profile.think_time_seconds == 1.0
        assert HealthCheckUser.wait_time(None) == 1.0

    def test_each_iteration_gets_health(self):
        client = _run_single_task(HealthCheckUser)
        client.get.assert_called_once_with("/health")
        assert client.get.return_value.method_calls == []
        assert HealthCheckUser.host == TARGET


@pytest.mark.parametrize(
    ("user_class", "path"),
    [
        (GasPriceUser, "/gasprice"),
        (WsBlockNumberUser, "/ws/blocknumber"),
        (WsGasPriceUser, "/ws/gasprice"),
    ],
)
def test_proxy_get_users(user_class, path):
    client = _run_single_task(user_class)
    client.get.assert_called_once_with(path)
    assert user_class.wait_time(None) == 0


@pytest.mark.parametrize(
    ("user_class", "path", "body"),
    [
        (BlockByNumberUser, "/blockbynumber", BLOCK_BY_NUMBER_BODY),
        (TxByBlockAndIndexUser, "/txbyblockandindex", TX_BY_BLOCK_AND_INDEX_BODY),
        (WsBlockByNumberUser, "/ws/blockbynumber", BLOCK_BY_NUMBER_BODY),
        (WsTxByBlockAndIndexUser, "/ws/txbyblockandindex", TX_BY_BLOCK_AND_INDEX_BODY),
    ],
)
def test_proxy_post_users(user_class, path, body):
    client = _run_single_task(user_class)
    client.post.assert_called_once_with(path, json=body)
    assert client.get.call_count == 0


def test_block_by_number_body_matches_proxy_contract():
    assert BLOCK_BY_NUMBER_BODY == {"block": "latest", "txdetails": "false"}
    assert set(TX_BY_BLOCK_AND_INDEX_BODY) == {"block", "index"}
