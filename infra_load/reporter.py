from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

_CGROUP_V1_UNLIMITED = 9223372036854771712


def _format_memory(mem_bytes: int) -> str:
    mem_gb = mem_bytes / (1024**3)
    if mem_gb >= 1:
        return f"{mem_gb:.1f}GB"
    return f"{mem_bytes / (1024**2):.0f}MB"


def get_container_resources() -> Dict[str, Optional[str]]:
    """
    Get resource constraints of the container generating the load.

    Reads from environment variables or cgroup files when running in a container.
    Returns dict with 'cpus' and 'memory' keys.
    """
    resources: Dict[str, Optional[str]] = {
        "cpus": os.environ.get("LOADGEN_CPU_LIMIT") or None,
        "memory": os.environ.get("LOADGEN_MEMORY_LIMIT") or None,
    }

    # cgroup v2
    if resources["cpus"] is None:
        try:
            with open("/sys/fs/cgroup/cpu.max", "r") as f:
                parts = f.read().strip().split()
            if len(parts) == 2 and parts[0] != "max":
                resources["cpus"] = f"{int(parts[0]) / int(parts[1]):.1f}"
        except (FileNotFoundError, PermissionError, ValueError):
            pass

    # cgroup v1
    if resources["cpus"] is None:
        try:
            with open("/sys/fs/cgroup/cpu/cpu.cfs_quota_us", "r") as f:
                quota = int(f.read().strip())
            with open("/sys/fs/cgroup/cpu/cpu.cfs_period_us", "r") as f:
                period = int(f.read().strip())
            if quota > 0:
                resources["cpus"] = f"{quota / period:.1f}"
        except (FileNotFoundError, PermissionError, ValueError):
            pass

    if resources["memory"] is None:
        try:
            with open("/sys/fs/cgroup/memory.max", "r") as f:
                content = f.read().strip()
            if content != "max":
                resources["memory"] = _format_memory(int(content))
        except (FileNotFoundError, PermissionError, ValueError):
            pass

    if resources["memory"] is None:
        try:
            with open("/sys/fs/cgroup/memory/memory.limit_in_bytes", "r") as f:
                mem_bytes = int(f.read().strip())
            if mem_bytes < _CGROUP_V1_UNLIMITED:
                resources["memory"] = _format_memory(mem_bytes)
        except (FileNotFoundError, PermissionError, ValueError):
            pass

    return resources


def _is_aggregated(results: List[Dict[str, Any]]) -> bool:
    runs = results[0].get("runs")
    return isinstance(runs, int) and runs > 1


def print_results(results: List[Dict[str, Any]], console: Optional[Console] = None) -> None:
    """
    Render load-test results as a rich table.

    Handles both single-run results and aggregated multi-run results (medians
    are shown). Displays load-generator resource limits when available.
    """
    console = console or Console()

    if not results:
        console.print("[yellow]No results to display.[/yellow]")
        return

    resources = get_container_resources()
    resource_parts = []
    if resources["cpus"]:
        resource_parts.append(f"CPU: {resources['cpus']} cores")
    if resources["memory"]:
        resource_parts.append(f"Memory: {resources['memory']}")

    is_aggregated = _is_aggregated(results)

    title = "Load Test Results"
    if resource_parts:
        title = f"{title}\n[dim]Load generator: {' │ '.join(resource_parts)}[/dim]"

    table = Table(title=title, box=box.ROUNDED, caption="Sorted by requests/s (descending)")
    table.add_column("Scenario", style="cyan", no_wrap=True)
    table.add_column("Users", justify="right", style="blue")
    table.add_column("Requests", justify="right", style="magenta")
    table.add_column("Failures", justify="right", style="red")
    if is_aggregated:
        table.add_column("Runs", justify="right", style="blue")
        table.add_column("Req/s\n[dim](Median)[/dim]", justify="right", style="bold green")
        table.add_column("p95 (ms)\n[dim](Median)[/dim]", justify="right", style="green")
        table.add_column("Duration (s)\n[dim](Median ± StdDev)[/dim]", justify="right", style="green")
    else:
        table.add_column("Req/s", justify="right", style="bold green")
        table.add_column("p95 (ms)", justify="right", style="green")
        table.add_column("Duration (s)", justify="right", style="green")
    table.add_column("Peak Memory (MB)", justify="right", style="yellow")
    table.add_column("CPU %", justify="right", style="red")

    def get_sort_key(r: Dict[str, Any]) -> float:
        if is_aggregated:
            return r["requests_per_sec"]["median"]
        return r.get("requests_per_sec") or 0.0

    for res in sorted(results, key=get_sort_key, reverse=True):
        row = [
            res.get("scenario", "Unknown"),
            str(res.get("users", "-")),
            f"{res.get('requests', 0):,}",
            f"{res.get('failures', 0):,}",
        ]
        if is_aggregated:
            duration = res["duration_seconds"]
            row += [
                str(res.get("runs", 0)),
                f"{res['requests_per_sec']['median']:,.2f}",
                f"{res['p95_response_ms']['median']:.0f}",
                f"{duration['median']:.1f} ± {duration['stddev']:.1f}",
            ]
            mem = res["peak_rss_bytes"]["median"] if "peak_rss_bytes" in res else None
            cpu = res["cpu_percent"]["median"] if "cpu_percent" in res else None
        else:
            if res.get("error"):
                row[0] = f"{row[0]} [red](failed)[/red]"
            row += [
                f"{res.get('requests_per_sec') or 0.0:,.2f}",
                f"{res.get('p95_response_ms') or 0.0:.0f}",
                f"{res.get('duration_seconds') or 0.0:.1f}",
            ]
            mem = res.get("peak_rss_bytes")
            cpu = res.get("cpu_percent")

        row.append(f"{mem / (1024 * 1024):.2f}" if mem else "N/A")
        row.append(f"{cpu:.1f}" if cpu is not None else "N/A")
        table.add_row(*row)

    console.print(table)


__all__ = ["get_container_resources", "print_results"]
