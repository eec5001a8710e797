"""
Orchestrator for running load scenarios, profiling the load generator, and
persisting results.

Usage (example from CLI):
    from infra_load.orchestrator import RunConfig, run_scenarios

    results = run_scenarios(RunConfig(scenario_names=["health"], users=5, duration="30s"))
    print(results)

Outputs are saved to `results/` by default:
- `results/latest.json` (last run)
- `results/run-<timestamp>.json` (timestamped archive)
"""

from __future__ import annotations

import json
import statistics
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Literal, Optional

from infra_load.config import get_settings
from infra_load.domain.models import LoadProfile
from infra_load.infrastructure.target import probe_target
from infra_load.scenarios.abstract import LoadScenario, ScenarioResult
from infra_load.scenarios.blocknumber import BlockNumberScenario
from infra_load.scenarios.health import HealthCheckScenario
from infra_load.scenarios.rpc_proxy import (
    BlockByNumberScenario,
    GasPriceScenario,
    TxByBlockAndIndexScenario,
    WsBlockByNumberScenario,
    WsBlockNumberScenario,
    WsGasPriceScenario,
    WsTxByBlockAndIndexScenario,
)
from infra_load.utils.logging import get_logger
from infra_load.utils.profiler import ProfileStats, profile_block

log = get_logger(__name__)

FailurePolicy = Literal["tolerant", "strict"]

_TOLERANT_FAILURE_NOTE = "Execution failed in tolerant mode; run continued."


@dataclass
class RunConfig:
    """
    Parameters for one orchestrator invocation.

    `None` values fall back to settings (host, results dir, failure policy,
    preflight) or to each scenario's default profile (users, duration,
    iterations, think time).
    """

    scenario_names: List[str] = field(default_factory=lambda: ["all"])
    host: Optional[str] = None
    users: Optional[int] = None
    duration: Optional[str] = None
    iterations: Optional[int] = None
    think_time_seconds: Optional[float] = None
    results_dir: Optional[str] = None
    persist: bool = True
    runs: int = 1
    failure_policy: Optional[FailurePolicy] = None
    preflight: Optional[bool] = None


def _round_float(value: float, decimals: int = 2) -> float:
    """Round a float to specified decimal places for human-readable output."""
    return round(value, decimals)


def _summarize(values: List[float], decimals: int = 2) -> dict:
    return {
        "median": _round_float(statistics.median(values), decimals),
        "mean": _round_float(statistics.mean(values), decimals),
        "stddev": _round_float(statistics.stdev(values), decimals) if len(values) > 1 else 0.0,
        "min": _round_float(min(values), decimals),
        "max": _round_float(max(values), decimals),
    }


def _aggregate_runs(run_results: List[dict]) -> dict:
    """
    Aggregate multiple runs of one scenario into a statistical summary.

    Returns median, mean, stddev, min and max for duration, request rate and
    p95 latency, plus summed request/failure counts.
    """
    aggregated = {
        "duration_seconds": _summarize([r["duration_seconds"] for r in run_results]),
        "requests_per_sec": _summarize([r["requests_per_sec"] for r in run_results]),
        "p95_response_ms": _summarize([r["p95_response_ms"] for r in run_results]),
        "requests": sum(r["requests"] for r in run_results),
        "failures": sum(r["failures"] for r in run_results),
        "users": run_results[0]["users"],  # Same profile across runs
    }

    cpu_percents = [r["cpu_percent"] for r in run_results if r.get("cpu_percent")]
    if cpu_percents:
        aggregated["cpu_percent"] = _summarize(cpu_percents, decimals=1)

    peak_rss_values = [r["peak_rss_bytes"] for r in run_results if r.get("peak_rss_bytes")]
    if peak_rss_values:
        aggregated["peak_rss_bytes"] = {
            "median": int(statistics.median(peak_rss_values)),
            "mean": int(statistics.mean(peak_rss_values)),
            "stddev": int(statistics.stdev(peak_rss_values)) if len(peak_rss_values) > 1 else 0,
            "min": min(peak_rss_values),
            "max": max(peak_rss_values),
        }

    return aggregated


def _scenario_factories() -> Dict[str, Callable[[], LoadScenario]]:
    """Registry of available scenarios."""
    return {
        "blocknumber": BlockNumberScenario,
        "health": HealthCheckScenario,
        "gasprice": GasPriceScenario,
        "ws_blocknumber": WsBlockNumberScenario,
        "ws_gasprice": WsGasPriceScenario,
        "blockbynumber": BlockByNumberScenario,
        "txbyblockandindex": TxByBlockAndIndexScenario,
        "ws_blockbynumber": WsBlockByNumberScenario,
        "ws_txbyblockandindex": WsTxByBlockAndIndexScenario,
    }


def available_scenarios() -> List[str]:
    """List available scenario names."""
    return sorted(_scenario_factories().keys())


def resolve_scenario(name: str) -> LoadScenario:
    factories = _scenario_factories()
    if name not in factories:
        raise ValueError(f"Unknown scenario '{name}'. Available: {', '.join(sorted(factories))}")
    return factories[name]()


def _expand_names(names: List[str]) -> List[str]:
    if len(names) == 1 and names[0] == "all":
        return available_scenarios()
    # Fail before any load is generated, not halfway through the list.
    for name in names:
        resolve_scenario(name)
    return list(names)


def _effective_profile(scenario: LoadScenario, config: RunConfig) -> LoadProfile:
    return scenario.profile.override(
        users=config.users,
        duration=config.duration,
        iterations=config.iterations,
        think_time_seconds=config.think_time_seconds,
    )


def _persist_results(payload: dict, results_dir: Path) -> None:
    results_dir.mkdir(parents=True, exist_ok=True)
    latest_path = results_dir / "latest.json"
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    archive_path = results_dir / f"run-{timestamp}.json"

    for path in (latest_path, archive_path):
        with path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, sort_keys=True, default=str)

    log.info("Results persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})


def _failed_result(exc: Exception, policy: FailurePolicy) -> ScenarioResult:
    return ScenarioResult(
        requests=0,
        failures=0,
        duration_seconds=0.0,
        requests_per_sec=0.0,
        p95_response_ms=0.0,
        error=str(exc),
        notes=_TOLERANT_FAILURE_NOTE,
        extra={"failed": True, "error_type": type(exc).__name__, "failure_policy": policy},
    )


def _profiled_execute(
    scenario: LoadScenario,
    host: str,
    profile: LoadProfile,
    policy: FailurePolicy,
) -> dict:
    log.info(f"[SCENARIO START] {scenario.name}", extra={"scenario": scenario.name})
    with profile_block(scenario.name) as stats:
        try:
            result = scenario.execute(host, profile)
            log.info(
                f"[SCENARIO SUCCESS] {scenario.name}",
                extra={"scenario": scenario.name, "requests": result.get("requests")},
            )
        except Exception as exc:
            if policy == "strict":
                log.error(f"[SCENARIO FAILED] {scenario.name}", extra={"scenario": scenario.name})
                raise
            log.exception(f"[SCENARIO FAILED] {scenario.name}", extra={"scenario": scenario.name})
            result = _failed_result(exc, policy)
            result["users"] = profile.users

    return _merge_result(result, stats)


def _merge_result(result: ScenarioResult, stats: ProfileStats) -> dict:
    """
    Merge a scenario result with profiler stats, rounding floats for readability.

    The scenario's own duration (measured around the Locust run) wins over the
    profiler's, which also covers environment setup. Memory and CPU always come
    from the profiler.
    """
    merged = dict(result)
    merged.setdefault("requests", 0)
    merged.setdefault("failures", 0)
    if not merged.get("duration_seconds"):
        merged["duration_seconds"] = stats.duration_seconds
    if merged.get("requests_per_sec") is None:
        merged["requests_per_sec"] = (
            merged["requests"] / merged["duration_seconds"] if merged["duration_seconds"] else 0.0
        )
    for key in (
        "duration_seconds",
        "requests_per_sec",
        "failure_ratio",
        "avg_response_ms",
        "median_response_ms",
        "p95_response_ms",
        "max_response_ms",
    ):
        if isinstance(merged.get(key), float):
            merged[key] = _round_float(merged[key])
    merged.setdefault("p95_response_ms", 0.0)
    merged["peak_rss_bytes"] = stats.peak_rss_bytes
    merged["cpu_percent"] = _round_float(stats.cpu_percent, 1) if stats.cpu_percent else None
    merged["profile"] = {
        "label": stats.label,
        "start_ts": _round_float(stats.start_ts, 3),
        "end_ts": _round_float(stats.end_ts, 3),
        "duration_seconds": _round_float(stats.duration_seconds),
        "peak_rss_bytes": stats.peak_rss_bytes,
        "cpu_percent": _round_float(stats.cpu_percent, 1) if stats.cpu_percent else None,
    }
    return merged


def run_scenarios(config: Optional[RunConfig] = None) -> List[dict]:
    """
    Run one or more scenarios and optionally persist the results.

    Parameters
    ----------
    config : RunConfig | None
        What to run and how. Defaults to every scenario with its own profile.

    Returns
    -------
    List[dict]
        Per-scenario result dictionaries including profiler stats. If
        `config.runs > 1`, each entry is an aggregate with `individual_runs`.

    Raises
    ------
    ValueError
        If a scenario name is unknown or an override yields an invalid profile.
    TargetUnavailableError
        If preflight is enabled and the target cannot be reached.
    """
    config = config or RunConfig()
    settings = get_settings()
    host = config.host or settings.target_host
    policy: FailurePolicy = config.failure_policy or settings.failure_policy
    preflight = settings.preflight if config.preflight is None else config.preflight
    names = _expand_names(config.scenario_names)

    if preflight:
        probe_target(
            host,
            attempts=settings.preflight_attempts,
            timeout_seconds=settings.preflight_timeout_seconds,
        )

    total_global_runs = len(names) * config.runs
    current_run = 0

    results: List[dict] = []
    for name in names:
        log.info(f"{'=' * 60}")
        log.info(f"[SCENARIO] {name.upper()}", extra={"scenario": name})
        log.info(f"{'=' * 60}")

        profile = _effective_profile(resolve_scenario(name), config)
        run_results: List[dict] = []
        for run_num in range(1, config.runs + 1):
            current_run += 1
            log.info(
                f"[RUN {current_run}/{total_global_runs}] Starting {name}",
                extra={
                    "scenario": name,
                    "run": run_num,
                    "users": profile.users,
                    "duration": profile.duration,
                    "iterations": profile.iterations,
                },
            )
            scenario = resolve_scenario(name)
            result = _profiled_execute(scenario, host, profile, policy)
            result["scenario"] = name
            result["host"] = host
            result["run"] = run_num
            result["load_profile"] = profile.model_dump()
            run_results.append(result)
            log.info(
                f"[RUN {current_run}/{total_global_runs}] Completed {name}",
                extra={
                    "scenario": name,
                    "run": run_num,
                    "requests": result.get("requests"),
                    "failures": result.get("failures"),
                    "rps": result.get("requests_per_sec"),
                },
            )

        if config.runs > 1:
            aggregated = _aggregate_runs(run_results)
            aggregated["scenario"] = name
            aggregated["host"] = host
            aggregated["runs"] = config.runs
            aggregated["individual_runs"] = run_results
            results.append(aggregated)
            log.info(
                f"[AGGREGATION] Results for {name}",
                extra={
                    "scenario": name,
                    "runs": config.runs,
                    "median_rps": aggregated["requests_per_sec"]["median"],
                    "median_p95_ms": aggregated["p95_response_ms"]["median"],
                },
            )
        else:
            results.extend(run_results)

        log.info(f"[SCENARIO COMPLETE] {name.upper()}", extra={"scenario": name})

    payload = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "host": host,
        "scenarios": names,
        "failure_policy": policy,
        "results": results,
    }

    if config.persist:
        _persist_results(payload, Path(config.results_dir or settings.results_dir))

    log.info(
        f"[ORCHESTRATOR COMPLETE] {len(names)} scenario(s) executed",
        extra={"scenarios": names, "total_scenarios": len(names)},
    )

    return results


__all__ = [
    "RunConfig",
    "available_scenarios",
    "resolve_scenario",
    "run_scenarios",
]
