"""
Preflight probe for the load target.

Retries transient connection failures using tenacity before giving up, so a
container that is still starting does not abort a half-hour soak run.
"""

from __future__ import annotations

import requests
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from infra_load.utils.logging import get_logger

log = get_logger(__name__)

_TRANSIENT_ERRORS = (requests.ConnectionError, requests.Timeout)


class TargetUnavailableError(RuntimeError):
    """Raised when the load target cannot be reached at all."""


def probe_target(
    host: str,
    path: str = "/health",
    attempts: int = 3,
    timeout_seconds: float = 5.0,
    backoff_seconds: float = 1.0,
) -> int:
    """
    GET `host + path` and return the status code.

    Only connection-level failures are fatal; a non-2xx status is logged and
    returned, because the scenarios themselves never judge responses.

    Raises
    ------
    TargetUnavailableError
        If every attempt fails to connect or times out.
    """
    url = f"{host.rstrip('/')}/{path.lstrip('/')}"
    retrying = Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=backoff_seconds, max=10),
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
        reraise=True,
    )
    try:
        response = retrying(requests.get, url, timeout=timeout_seconds)
    except _TRANSIENT_ERRORS as exc:
        raise TargetUnavailableError(f"Target {url} unreachable after {attempts} attempt(s): {exc}") from exc

    if response.ok:
        log.info("[PREFLIGHT] Target reachable", extra={"url": url, "status": response.status_code})
    else:
        log.warning("[PREFLIGHT] Target answered with an error status", extra={"url": url, "status": response.status_code})
    return response.status_code


__all__ = ["TargetUnavailableError", "probe_target"]
