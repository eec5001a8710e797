"""
Standalone locustfile: 100 users, 30 minutes, GET /blocknumber, no sleep.

    locust -f scripts/load_tests/blocknumber_100_users.py --headless
"""

from infra_load.infrastructure.shapes import shape_for
from infra_load.scenarios.blocknumber import BlockNumberScenario, BlockNumberUser

__all__ = ["BlockNumberUser", "BlockNumberShape"]

BlockNumberShape = shape_for(BlockNumberScenario.profile, name="BlockNumberShape")
