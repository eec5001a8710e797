"""
Scenario interfaces and result contracts for infra-load.

A scenario pairs a Locust `HttpUser` subclass (what each virtual user does on
every iteration) with a default `LoadProfile` (how many users, for how long).
Concrete scenarios subclass `BaseLoadScenario` and return a `ScenarioResult`
TypedDict so orchestration and reporting stay uniform.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Type, TypedDict, runtime_checkable

from locust import HttpUser

from infra_load.domain.models import LoadProfile
from infra_load.infrastructure.locust_runner import run_load


class ScenarioResult(TypedDict, total=False):
    """
    Metrics contract returned by scenarios.

    Fields are optional; the orchestrator and reporter tolerate missing values.
    """

    requests: int
    failures: int
    failure_ratio: float
    duration_seconds: float
    requests_per_sec: float
    avg_response_ms: float
    median_response_ms: float
    p95_response_ms: float
    max_response_ms: float
    users: int
    errors: List[Dict[str, Any]]
    error: Optional[str]
    notes: Optional[str]
    extra: Dict[str, Any]


@runtime_checkable
class LoadScenario(Protocol):
    """
    Common interface all load scenarios implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier.
    description : str
        A human-friendly summary.
    user_class : type[HttpUser]
        Locust user whose task is one scenario iteration.
    profile : LoadProfile
        Default load profile.
    """

    name: str
    description: str
    user_class: Type[HttpUser]
    profile: LoadProfile

    def execute(self, host: str, profile: Optional[LoadProfile] = None) -> ScenarioResult:
        """
        Drive load against `host` and return the aggregated metrics.

        Parameters
        ----------
        host : str
            Base URL of the target, e.g. ``http://host.docker.internal:8000``.
        profile : LoadProfile, optional
            Overrides the scenario's default profile.
        """
        ...


class BaseLoadScenario:
    """
    Class-based helper: set the four attributes, inherit `execute`.
    """

    name: str
    description: str
    user_class: Type[HttpUser]
    profile: LoadProfile
    notes: Optional[str] = None

    def execute(self, host: str, profile: Optional[LoadProfile] = None) -> ScenarioResult:
        effective = profile or self.profile
        stats = run_load(self.user_class, effective, host)
        result = ScenarioResult(**stats.as_dict())
        if self.notes:
            result["notes"] = self.notes
        return result


__all__ = [
    "BaseLoadScenario",
    "LoadScenario",
    "ScenarioResult",
]
