"""Threshold policies deciding when a run of repeats gets summarized.

A policy is one of exactly two frozen variants. ``crossed`` dispatches over
them exhaustively; there is no base class to extend.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Union

from .config import Settings
from .exceptions import ConfigurationError, InvalidLimitError


@dataclass(frozen=True)
class CountLimit:
    """Fire on the ``n``-th repeat following the immediate first emission."""

    n: int

    def __post_init__(self) -> None:
        if isinstance(self.n, bool) or not isinstance(self.n, int):
            raise InvalidLimitError(f"count limit must be an int, got {type(self.n).__name__}")
        if self.n < 1:
            raise InvalidLimitError(f"count limit must be positive, got {self.n}")


@dataclass(frozen=True)
class DurationLimit:
    """Fire once the accumulated time between repeats exceeds ``d``."""

    d: timedelta

    def __post_init__(self) -> None:
        if not isinstance(self.d, timedelta):
            raise InvalidLimitError(f"duration limit must be a timedelta, got {type(self.d).__name__}")
        if self.d < timedelta(0):
            raise InvalidLimitError(f"duration limit must not be negative, got {self.d}")


ThresholdPolicy = Union[CountLimit, DurationLimit]


def crossed(policy: ThresholdPolicy, count: int, accumulated: timedelta) -> bool:
    if isinstance(policy, CountLimit):
        return count >= policy.n
    if isinstance(policy, DurationLimit):
        return accumulated > policy.d
    raise TypeError(f"unsupported threshold policy: {policy!r}")


def describe(policy: ThresholdPolicy) -> str:
    if isinstance(policy, CountLimit):
        return f"count>={policy.n}"
    if isinstance(policy, DurationLimit):
        return f"duration>{policy.d.total_seconds() * 1000:g}ms"
    raise TypeError(f"unsupported threshold policy: {policy!r}")


def policy_from_settings(cfg: Settings) -> ThresholdPolicy:
    cfg.validate()
    if cfg.limit_kind == "duration":
        try:
            limit = timedelta(milliseconds=cfg.limit_duration_ms)
        except (ValueError, OverflowError) as exc:
            raise ConfigurationError(f"RATELOG_LIMIT_DURATION_MS is out of range: {cfg.limit_duration_ms}") from exc
        return DurationLimit(limit)
    return CountLimit(cfg.limit_count)
