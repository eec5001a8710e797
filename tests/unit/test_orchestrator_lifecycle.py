from __future__ import annotations

import json

import pytest

from infra_load import orchestrator
from infra_load.orchestrator import RunConfig, available_scenarios, run_scenarios

STUB_HOST = "http://stub:8000"
MEASUREMENT_RUN_COUNT = 3
FAILING_MEASUREMENT_RUN_COUNT = 2


def test_run_uses_default_profile_and_settings_host(fake_registry) -> None:
    results = run_scenarios(RunConfig(scenario_names=["fake"], persist=False))

    assert len(results) == 1
    host, profile = fake_registry[0]
    assert host == "http://host.docker.internal:8000"
    assert (profile.users, profile.duration) == (2, "10s")
    assert results[0]["scenario"] == "fake"
    assert results[0]["host"] == host
    assert results[0]["load_profile"]["users"] == 2
    assert results[0]["requests"] == 10


def test_run_applies_overrides(fake_registry) -> None:
    run_scenarios(
        RunConfig(
            scenario_names=["fake"],
            host=STUB_HOST,
            users=7,
            iterations=5,
            think_time_seconds=0.5,
            persist=False,
        )
    )

    host, profile = fake_registry[0]
    assert host == STUB_HOST
    assert profile.users == 7
    assert profile.iterations == 5
    assert profile.duration is None
    assert profile.think_time_seconds == 0.5


def test_unknown_scenario_fails_before_any_load(fake_registry) -> None:
    with pytest.raises(ValueError, match="Unknown scenario 'nope'"):
        run_scenarios(RunConfig(scenario_names=["fake", "nope"], persist=False))
    assert fake_registry == []


def test_all_expands_to_registry(fake_registry) -> None:
    results = run_scenarios(
        RunConfig(scenario_names=["all"], persist=False, failure_policy="tolerant")
    )
    assert [r["scenario"] for r in results] == ["failing", "fake"]
    assert available_scenarios() == ["failing", "fake"]


def test_multiple_runs_are_aggregated(fake_registry) -> None:
    results = run_scenarios(
        RunConfig(scenario_names=["fake"], persist=False, runs=MEASUREMENT_RUN_COUNT)
    )

    assert len(fake_registry) == MEASUREMENT_RUN_COUNT
    aggregate = results[0]
    assert aggregate["runs"] == MEASUREMENT_RUN_COUNT
    assert aggregate["requests"] == 10 * MEASUREMENT_RUN_COUNT
    assert aggregate["requests_per_sec"]["median"] == 5.0
    assert [run["run"] for run in aggregate["individual_runs"]] == [1, 2, 3]


def test_tolerant_policy_records_failures_and_continues(fake_registry) -> None:
    results = run_scenarios(
        RunConfig(
            scenario_names=["failing", "fake"],
            persist=False,
            runs=FAILING_MEASUREMENT_RUN_COUNT,
        )
    )

    assert len(fake_registry) == 2 * FAILING_MEASUREMENT_RUN_COUNT
    failing, fake = results
    assert fake["requests"] == 10 * FAILING_MEASUREMENT_RUN_COUNT
    for run in failing["individual_runs"]:
        assert run["error"] == "intentional failure"
        assert run["requests"] == 0
        assert run["users"] == 2
        assert run["notes"] == "Execution failed in tolerant mode; run continued."
        assert run["extra"]["failed"] is True
        assert run["extra"]["error_type"] == "RuntimeError"
        assert run["extra"]["failure_policy"] == "tolerant"


def test_strict_policy_fails_fast(fake_registry) -> None:
    with pytest.raises(RuntimeError, match="intentional failure"):
        run_scenarios(
            RunConfig(
                scenario_names=["failing", "fake"],
                persist=False,
                runs=FAILING_MEASUREMENT_RUN_COUNT,
                failure_policy="strict",
            )
        )
    assert len(fake_registry) == 1


def test_strict_policy_from_settings(fake_registry, monkeypatch) -> None:
    monkeypatch.setenv("FAILURE_POLICY", "strict")
    orchestrator.get_settings.cache_clear()

    with pytest.raises(RuntimeError):
        run_scenarios(RunConfig(scenario_names=["failing"], persist=False))


def test_results_are_persisted(fake_registry, tmp_path) -> None:
    results_dir = tmp_path / "out"

    run_scenarios(RunConfig(scenario_names=["fake"], results_dir=str(results_dir)))

    latest = json.loads((results_dir / "latest.json").read_text(encoding="utf-8"))
    archives = list(results_dir.glob("run-*.json"))
    assert len(archives) == 1
    assert latest["scenarios"] == ["fake"]
    assert latest["failure_policy"] == "tolerant"
    assert latest["results"][0]["requests"] == 10


def test_preflight_probes_target_once(fake_registry, monkeypatch) -> None:
    probed = []
    monkeypatch.setattr(
        orchestrator, "probe_target", lambda host, **kwargs: probed.append((host, kwargs))
    )

    run_scenarios(
        RunConfig(scenario_names=["fake"], host=STUB_HOST, persist=False, preflight=True, runs=2)
    )

    assert [host for host, _ in probed] == [STUB_HOST]
    assert probed[0][1]["attempts"] == 3


def test_preflight_is_off_by_default(fake_registry, monkeypatch) -> None:
    monkeypatch.setattr(
        orchestrator, "probe_target", lambda *a, **k: pytest.fail("preflight should not run")
    )
    run_scenarios(RunConfig(scenario_names=["fake"], persist=False))
