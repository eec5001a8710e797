"""
Health probe: GET /health, then sleep one second.

No options are set, so the defaults of a bare load script apply: a single
virtual user running a single iteration.
"""

from __future__ import annotations

from locust import HttpUser, constant, task

from infra_load.config import DEFAULT_TARGET_HOST
from infra_load.domain.models import LoadProfile
from infra_load.scenarios.abstract import BaseLoadScenario

HEALTH_THINK_TIME_SECONDS = 1.0


class HealthCheckUser(HttpUser):
    host = DEFAULT_TARGET_HOST
    wait_time = constant(HEALTH_THINK_TIME_SECONDS)

    @task
    def health(self) -> None:
        self.client.get("/health")


class HealthCheckScenario(BaseLoadScenario):
    name = "health"
    description = "1 user, 1 iteration, GET /health followed by a 1s sleep."
    user_class = HealthCheckUser
    profile = LoadProfile(users=1, iterations=1, think_time_seconds=HEALTH_THINK_TIME_SECONDS)


__all__ = ["HEALTH_THINK_TIME_SECONDS", "HealthCheckScenario", "HealthCheckUser"]
