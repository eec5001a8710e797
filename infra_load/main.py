from __future__ import annotations

import json
import sys
from typing import Optional

import typer

from infra_load.config import get_settings
from infra_load.infrastructure.target import TargetUnavailableError
from infra_load.orchestrator import RunConfig, available_scenarios, resolve_scenario, run_scenarios
from infra_load.reporter import print_results
from infra_load.utils.logging import configure_logging

app = typer.Typer(help="Load tests for the block number proxy.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"target={settings.target_host} | env={settings.app_env} | "
        f"results_dir={settings.results_dir} | failure_policy={settings.failure_policy} | "
        f"preflight={settings.preflight}"
    )


@app.command("list")
def list_scenarios() -> None:
    """
    List scenarios and their default load profiles.
    """
    for name in available_scenarios():
        scenario = resolve_scenario(name)
        profile = scenario.profile
        bound = f"duration={profile.duration}" if profile.duration else f"iterations={profile.iterations}"
        typer.echo(
            f"{name:<20} users={profile.users} {bound} "
            f"think_time={profile.think_time_seconds or 0}s  {scenario.description}"
        )


@app.command()
def run(
    scenario: str = typer.Option(
        "all",
        "--scenario",
        "--scenarios",
        "-s",
        help="Scenario to run (e.g., blocknumber, health, all). Comma-separate several.",
    ),
    host: Optional[str] = typer.Option(None, "--host", "-H", help="Target base URL (default from settings)."),
    users: Optional[int] = typer.Option(None, "--users", "-u", min=1, help="Override virtual users."),
    duration: Optional[str] = typer.Option(None, "--duration", "-d", help="Override run time, e.g. 30s, 5m, 1h."),
    iterations: Optional[int] = typer.Option(None, "--iterations", "-i", min=1, help="Override total iterations."),
    think_time: Optional[float] = typer.Option(
        None, "--think-time", min=0.0, help="Override the pause after each iteration, in seconds."
    ),
    runs: int = typer.Option(1, "--runs", "-n", min=1, help="Measurement runs per scenario."),
    strict: bool = typer.Option(False, "--strict", help="Abort on the first failed run."),
    preflight: Optional[bool] = typer.Option(
        None, "--preflight/--no-preflight", help="Probe /health before generating load."
    ),
    persist: bool = typer.Option(True, "--persist/--no-persist", help="Write results to the results dir."),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON instead of a table."),
) -> None:
    """
    Run one or all scenarios via the orchestrator and persist results.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    names = [name.strip() for name in scenario.split(",") if name.strip()]
    typer.echo(f"Running scenario='{scenario}' against {host or settings.target_host}.", err=True)
    try:
        results = run_scenarios(
            RunConfig(
                scenario_names=names,
                host=host,
                users=users,
                duration=duration,
                iterations=iterations,
                think_time_seconds=think_time,
                persist=persist,
                runs=runs,
                failure_policy="strict" if strict else None,
                preflight=preflight,
            )
        )
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    except TargetUnavailableError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if as_json:
        typer.echo(json.dumps(results, indent=2, default=str))
    else:
        print_results(results)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
