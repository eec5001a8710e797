from __future__ import annotations

import pytest
from rich.console import Console

from infra_load import reporter
from infra_load.reporter import get_container_resources, print_results


@pytest.fixture
def console() -> Console:
    return Console(record=True, width=200, color_system=None)


@pytest.fixture
def fixed_resources(monkeypatch):
    monkeypatch.setattr(
        reporter, "get_container_resources", lambda: {"cpus": "2.0", "memory": "512MB"}
    )


def test_print_results_single_runs_sorted_by_rate(console, fixed_resources):
    results = [
        {"scenario": "health", "users": 1, "requests": 1, "failures": 0,
         "requests_per_sec": 0.9, "p95_response_ms": 3.0, "duration_seconds": 1.1,
         "peak_rss_bytes": 50 * 1024 * 1024, "cpu_percent": 1.5},
        {"scenario": "blocknumber", "users": 100, "requests": 120000, "failures": 12,
         "requests_per_sec": 66.67, "p95_response_ms": 250.0, "duration_seconds": 1800.0,
         "peak_rss_bytes": None, "cpu_percent": None},
    ]

    print_results(results, console=console)
    text = console.export_text()

    assert "Load Test Results" in text
    assert "Load generator: CPU: 2.0 cores" in text
    assert "120,000" in text
    assert text.index("blocknumber") < text.index("health")
    assert "50.00" in text
    assert "N/A" in text


def test_print_results_marks_failed_runs(console):
    print_results(
        [{"scenario": "health", "requests": 0, "failures": 0, "error": "boom",
          "requests_per_sec": 0.0, "duration_seconds": 0.2}],
        console=console,
    )
    assert "(failed)" in console.export_text()


def test_print_results_aggregated(console):
    stats = {"median": 10.0, "mean": 10.0, "stddev": 0.5, "min": 9.5, "max": 10.5}
    print_results(
        [{"scenario": "gasprice", "users": 10, "requests": 300, "failures": 0, "runs": 3,
          "requests_per_sec": stats, "p95_response_ms": stats, "duration_seconds": stats}],
        console=console,
    )
    text = console.export_text()
    assert "Median" in text
    assert "10.0 ± 0.5" in text


def test_print_results_empty(console):
    print_results([], console=console)
    assert "No results to display." in console.export_text()


def test_container_resources_from_environment(monkeypatch):
    monkeypatch.setenv("LOADGEN_CPU_LIMIT", "4")
    monkeypatch.setenv("LOADGEN_MEMORY_LIMIT", "2GB")
    assert get_container_resources() == {"cpus": "4", "memory": "2GB"}
