"""
Standalone locustfile: one user, one iteration of GET /health then sleep 1s.

    locust -f scripts/load_tests/health_check.py --headless
"""

from infra_load.infrastructure.locust_runner import iteration_limited
from infra_load.infrastructure.shapes import shape_for
from infra_load.scenarios import health

__all__ = ["HealthCheckUser", "HealthCheckShape"]

PROFILE = health.HealthCheckScenario.profile

HealthCheckShape = shape_for(PROFILE, name="HealthCheckShape")

HealthCheckUser = iteration_limited(health.HealthCheckUser, PROFILE.iterations, PROFILE.wait_seconds)
