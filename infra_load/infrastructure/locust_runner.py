"""
Locust runner adapter for infra-load.

Virtual-user scheduling, spawning, HTTP pooling and request statistics all
live in Locust. This module only wires a scenario's user class and load
profile into a Locust `Environment`, runs it headless in-process, and
snapshots the resulting statistics.
"""

from __future__ import annotations

import functools
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Type

import gevent
from locust import HttpUser, User, constant
from locust.env import Environment
from locust.exception import StopUser

from infra_load.domain.models import LoadProfile
from infra_load.utils.logging import get_logger

log = get_logger(__name__)


@dataclass
class LoadStats:
    """
    Snapshot of Locust's aggregated ("Aggregated" row) statistics for one run.
    """

    users: int
    requests: int = 0
    failures: int = 0
    failure_ratio: float = 0.0
    duration_seconds: float = 0.0
    requests_per_sec: float = 0.0
    avg_response_ms: float = 0.0
    median_response_ms: float = 0.0
    p95_response_ms: float = 0.0
    max_response_ms: float = 0.0
    errors: List[Dict[str, Any]] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


class IterationBudget:
    """
    Total iteration count shared by every user of one run.

    A user reserves a slot before it starts an iteration, so no more than
    `iterations` ever begin. The runner is stopped once the last reserved
    iteration has finished and its trailing pause has elapsed.
    """

    def __init__(self, iterations: int, pause_seconds: float = 0.0) -> None:
        self.iterations = iterations
        self.pause_seconds = pause_seconds
        self.reserved = 0
        self.finished = 0

    def reserve(self) -> bool:
        if self.reserved >= self.iterations:
            return False
        self.reserved += 1
        return True

    def complete(self, environment: Environment) -> None:
        self.finished += 1
        if self.finished != self.iterations or environment.runner is None:
            return
        log.info(
            "[ITERATIONS] Limit reached, stopping runner",
            extra={"iterations": self.iterations, "pause_seconds": self.pause_seconds},
        )
        # quit() kills user greenlets, including the one finishing this iteration.
        if self.pause_seconds:
            gevent.spawn_later(self.pause_seconds, environment.runner.quit)
        else:
            gevent.spawn(environment.runner.quit)


def _budgeted(task: Callable[[User], None], budget: IterationBudget) -> Callable[[User], None]:
    @functools.wraps(task)
    def run_iteration(user: User) -> None:
        if not budget.reserve():
            raise StopUser()
        try:
            task(user)
        finally:
            budget.complete(user.environment)

    return run_iteration


def iteration_limited(
    user_class: Type[User], iterations: int, pause_seconds: float = 0.0
) -> Type[User]:
    """
    Derive a user class whose tasks draw from one shared `IterationBudget`.

    Each scenario task issues exactly one request, so the run sends exactly
    `iterations` requests whatever the user count. Failed requests count too.
    """
    budget = IterationBudget(iterations, pause_seconds)
    return type(
        user_class.__name__,
        (user_class,),
        {
            "tasks": [_budgeted(task, budget) for task in user_class.tasks],
            "iteration_budget": budget,
        },
    )


def bind_user_class(user_class: Type[HttpUser], profile: LoadProfile, host: str) -> Type[HttpUser]:
    """
    Derive a user class whose host, wait time and iteration cap come from the run's profile.
    """
    bound = type(
        user_class.__name__,
        (user_class,),
        {"host": host, "wait_time": constant(profile.wait_seconds)},
    )
    if profile.iterations is not None:
        bound = iteration_limited(bound, profile.iterations, profile.wait_seconds)
    return bound


def snapshot_stats(environment: Environment, users: int, elapsed: float) -> LoadStats:
    total = environment.stats.total
    requests = total.num_requests
    return LoadStats(
        users=users,
        requests=requests,
        failures=total.num_failures,
        failure_ratio=total.fail_ratio,
        duration_seconds=elapsed,
        requests_per_sec=requests / elapsed if elapsed > 0 else 0.0,
        avg_response_ms=total.avg_response_time,
        median_response_ms=float(total.median_response_time or 0),
        p95_response_ms=float(total.get_response_time_percentile(0.95) or 0),
        max_response_ms=float(total.max_response_time or 0),
        errors=[error.to_dict() for error in environment.stats.errors.values()],
    )


def run_load(user_class: Type[HttpUser], profile: LoadProfile, host: str) -> LoadStats:
    """
    Run `user_class` against `host` under `profile` and block until it ends.

    The run ends when the profile's duration elapses or its iteration count
    is reached, whichever comes first.
    """
    environment = Environment(user_classes=[bind_user_class(user_class, profile, host)], host=host)
    runner = environment.create_local_runner()

    log.info(
        f"[LOCUST] Starting {profile.users} user(s) against {host}",
        extra={
            "user_class": user_class.__name__,
            "users": profile.users,
            "spawn_rate": profile.effective_spawn_rate,
            "duration": profile.duration,
            "iterations": profile.iterations,
        },
    )

    started = time.perf_counter()
    runner.start(profile.users, spawn_rate=profile.effective_spawn_rate)
    stop_timer = None
    if profile.duration_seconds is not None:
        stop_timer = gevent.spawn_later(profile.duration_seconds, runner.quit)
    try:
        runner.greenlet.join()
    except BaseException:
        runner.quit()
        raise
    finally:
        if stop_timer is not None:
            stop_timer.kill(block=False)
    elapsed = time.perf_counter() - started

    stats = snapshot_stats(environment, profile.users, elapsed)
    log.info(
        f"[LOCUST] Finished {user_class.__name__}",
        extra={"requests": stats.requests, "failures": stats.failures},
    )
    return stats


__all__ = [
    "IterationBudget",
    "LoadStats",
    "bind_user_class",
    "iteration_limited",
    "run_load",
    "snapshot_stats",
]
