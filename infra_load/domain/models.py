"""
Domain models for infra-load.

`LoadProfile` captures what a load tool's options block carries: how many
virtual users, for how long (or for how many iterations), and how long each
user pauses between iterations.
"""
from __future__ import annotations

import re
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

_DURATION_PART = re.compile(r"(\d+)([hms])")
_UNIT_SECONDS = {"h": 3600, "m": 60, "s": 1}


def parse_duration(value: str | int) -> int:
    """
    Convert a duration such as ``"30m"``, ``"1h30m"`` or ``"90s"`` to seconds.

    Bare integers (or digit strings) are taken as seconds.
    """
    if isinstance(value, int):
        seconds = value
    else:
        text = value.strip().lower()
        if text.isdigit():
            seconds = int(text)
        else:
            parts = _DURATION_PART.findall(text)
            if not parts or "".join(n + u for n, u in parts) != text:
                raise ValueError(f"Invalid duration '{value}'. Expected e.g. '30s', '30m', '1h30m'.")
            seconds = sum(int(n) * _UNIT_SECONDS[u] for n, u in parts)
    if seconds <= 0:
        raise ValueError(f"Duration must be positive, got '{value}'.")
    return seconds


class LoadProfile(BaseModel):
    """
    How a scenario is driven.
    """

    users: int = Field(1, ge=1, description="Concurrent virtual users.")
    duration: Optional[str] = Field(None, description="Run time, e.g. '30m'. None = iteration-bound.")
    spawn_rate: Optional[float] = Field(
        None, gt=0, description="Users started per second. Defaults to all users at once."
    )
    think_time_seconds: Optional[float] = Field(
        None, ge=0, description="Pause after each iteration. None = no pause."
    )
    iterations: Optional[int] = Field(
        None, ge=1, description="Total iterations shared by all users. None = duration-bound."
    )

    model_config = {
        "frozen": True,
    }

    @field_validator("duration")
    @classmethod
    def _check_duration(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            parse_duration(value)
        return value

    @model_validator(mode="after")
    def _require_stop_condition(self) -> "LoadProfile":
        if self.duration is None and self.iterations is None:
            raise ValueError("A load profile needs a duration, an iteration count, or both.")
        return self

    @property
    def duration_seconds(self) -> Optional[int]:
        return parse_duration(self.duration) if self.duration is not None else None

    @property
    def effective_spawn_rate(self) -> float:
        return self.spawn_rate if self.spawn_rate is not None else float(self.users)

    @property
    def wait_seconds(self) -> float:
        return self.think_time_seconds or 0.0

    def override(self, **changes: Any) -> "LoadProfile":
        """
        Return a copy with the non-None values in ``changes`` applied.

        A duration override alone drops the iteration cap (and vice versa) so
        ``--duration 5m`` on an iteration-bound scenario runs for five minutes.
        """
        updates = {k: v for k, v in changes.items() if v is not None}
        if not updates:
            return self
        if "duration" in updates and "iterations" not in updates:
            updates["iterations"] = None
        elif "iterations" in updates and "duration" not in updates:
            updates["duration"] = None
        return LoadProfile.model_validate({**self.model_dump(), **updates})


__all__ = ["LoadProfile", "parse_duration"]
