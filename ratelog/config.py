from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
import math
import os

from .exceptions import ConfigurationError

LIMIT_KINDS = {"count", "duration"}
LOG_FORMATS = {"json", "plain"}
SINK_NAMES = {"stdout", "stderr"}
MAX_DURATION_MS = timedelta.max // timedelta(milliseconds=1)


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _as_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    debug: bool
    log_level: str
    log_format: str
    limit_kind: str
    limit_count: int
    limit_duration_ms: float
    sink: str

    def validate(self) -> None:
        """Raise early on values that cannot build a policy or a sink."""
        if self.limit_kind not in LIMIT_KINDS:
            raise ConfigurationError(
                f"RATELOG_LIMIT_KIND must be one of {sorted(LIMIT_KINDS)}, got {self.limit_kind!r}"
            )
        if self.limit_kind == "count" and self.limit_count < 1:
            raise ConfigurationError("RATELOG_LIMIT_COUNT must be a positive integer")
        if self.limit_kind == "duration":
            if not math.isfinite(self.limit_duration_ms):
                raise ConfigurationError("RATELOG_LIMIT_DURATION_MS must be a finite number")
            if self.limit_duration_ms < 0:
                raise ConfigurationError("RATELOG_LIMIT_DURATION_MS must not be negative")
            if self.limit_duration_ms >= MAX_DURATION_MS:
                raise ConfigurationError(f"RATELOG_LIMIT_DURATION_MS must be below {MAX_DURATION_MS}")
        if self.sink not in SINK_NAMES:
            raise ConfigurationError(f"RATELOG_SINK must be one of {sorted(SINK_NAMES)}, got {self.sink!r}")
        if self.log_format not in LOG_FORMATS:
            raise ConfigurationError(f"LOG_FORMAT must be one of {sorted(LOG_FORMATS)}, got {self.log_format!r}")


def load_settings() -> Settings:
    return Settings(
        debug=_as_bool(os.getenv("DEBUG"), False),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        log_format=os.getenv("LOG_FORMAT", "json").strip().lower(),
        limit_kind=os.getenv("RATELOG_LIMIT_KIND", "count").strip().lower(),
        limit_count=_as_int(os.getenv("RATELOG_LIMIT_COUNT"), 5),
        limit_duration_ms=_as_float(os.getenv("RATELOG_LIMIT_DURATION_MS"), 1000.0),
        sink=os.getenv("RATELOG_SINK", "stdout").strip().lower(),
    )

