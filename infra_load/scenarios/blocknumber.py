"""
Block number soak: 100 users calling GET /blocknumber for 30 minutes.

Users do not pause between iterations, so request rate is bounded only by
the target's latency.
"""

from __future__ import annotations

from locust import HttpUser, constant, task

from infra_load.config import DEFAULT_TARGET_HOST
from infra_load.domain.models import LoadProfile
from infra_load.scenarios.abstract import BaseLoadScenario


class BlockNumberUser(HttpUser):
    host = DEFAULT_TARGET_HOST
    # No sleep between iterations. Set think_time_seconds on the profile to add one.
    wait_time = constant(0)

    @task
    def block_number(self) -> None:
        self.client.get("/blocknumber")


class BlockNumberScenario(BaseLoadScenario):
    name = "blocknumber"
    description = "100 users, 30 minutes, GET /blocknumber with no think time."
    user_class = BlockNumberUser
    profile = LoadProfile(users=100, duration="30m")


__all__ = ["BlockNumberScenario", "BlockNumberUser"]
