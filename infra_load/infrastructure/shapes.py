"""
Load shapes that replay a `LoadProfile` inside a plain `locust -f` run.
"""

from __future__ import annotations

from typing import Optional, Tuple, Type

from locust import LoadTestShape

from infra_load.domain.models import LoadProfile


class ProfileShape(LoadTestShape):
    """
    Flat load: hold the profile's users until its duration elapses.
    """

    abstract = True
    profile: LoadProfile

    def tick(self) -> Optional[Tuple[int, float]]:
        limit = self.profile.duration_seconds
        if limit is not None and self.get_run_time() > limit:
            return None
        return (self.profile.users, self.profile.effective_spawn_rate)


def shape_for(profile: LoadProfile, name: str = "ScenarioShape") -> Type[ProfileShape]:
    """Build a concrete shape class bound to `profile`."""
    return type(name, (ProfileShape,), {"profile": profile, "abstract": False})


__all__ = ["ProfileShape", "shape_for"]
