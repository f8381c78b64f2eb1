"""Decision state machine for a single stream of log messages.

The tracker remembers one message key at a time. A message that differs from
the tracked key is emitted immediately and replaces it; repeats are counted
silently until the threshold policy fires, at which point a summary line is
returned and the counters start over for the same key.

Switching keys discards whatever had accumulated for the old key without a
summary. Instances are not thread-safe; serialize callers or use one tracker
per producer.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import timedelta
import logging
from typing import Optional, Union

from .formatting import format_summary
from .policy import ThresholdPolicy, crossed, describe

logger = logging.getLogger("ratelog.tracker")

_ZERO = timedelta(0)


@dataclass(frozen=True)
class Immediate:
    text: str


@dataclass(frozen=True)
class Summary:
    text: str


OutputLine = Union[Immediate, Summary]


@dataclass
class TrackedState:
    key: str
    count: int = 0
    accumulated: timedelta = _ZERO
    last_seen: float = 0.0


def _millis(duration: timedelta) -> float:
    return round(duration.total_seconds() * 1000, 3)


class RateTracker:
    def __init__(self, policy: ThresholdPolicy) -> None:
        self._policy = policy
        self._state: Optional[TrackedState] = None

    @property
    def policy(self) -> ThresholdPolicy:
        return self._policy

    @property
    def state(self) -> Optional[TrackedState]:
        """Copy of the current run, or None before the first message."""
        if self._state is None:
            return None
        return replace(self._state)

    def reset(self) -> None:
        self._state = None

    def submit(self, message: str, now: float) -> Optional[OutputLine]:
        state = self._state
        if state is None or state.key != message:
            if state is not None and state.count:
                logger.debug(
                    "Tracked message replaced",
                    extra={
                        "event": "key_changed",
                        "key": state.key,
                        "discarded_count": state.count,
                        "accumulated_ms": _millis(state.accumulated),
                    },
                )
            if state is None:
                self._state = TrackedState(key=message, last_seen=now)
            else:
                state.key = message
                state.count = 0
                state.accumulated = _ZERO
                state.last_seen = now
            return Immediate(message)

        elapsed = now - state.last_seen
        if elapsed < 0:
            logger.debug(
                "Clock went backwards, clamping delta to zero",
                extra={"event": "clock_regression", "key": state.key, "regression_ms": round(-elapsed * 1000, 3)},
            )
            elapsed = 0.0

        # each delta is rounded to whole microseconds before it is added
        state.accumulated += timedelta(seconds=elapsed)
        state.count += 1
        state.last_seen = now

        if not crossed(self._policy, state.count, state.accumulated):
            return None

        text = format_summary(state.key, state.count, state.accumulated)
        logger.debug(
            "Repeat threshold crossed",
            extra={
                "event": "threshold_crossed",
                "key": state.key,
                "count": state.count,
                "accumulated_ms": _millis(state.accumulated),
                "policy": describe(self._policy),
            },
        )
        state.count = 0
        state.accumulated = _ZERO
        return Summary(text)
