from __future__ import annotations

from datetime import timedelta

_MS = 1_000
_SECOND = 1_000_000
_MINUTE = 60 * _SECOND
_HOUR = 60 * _MINUTE


def _to_micros(duration: timedelta) -> int:
    return (duration.days * 86_400 + duration.seconds) * _SECOND + duration.microseconds


def _round_div(value: int, unit: int) -> int:
    # nearest whole unit, halves round up
    return (value + unit // 2) // unit


def format_duration(duration: timedelta) -> str:
    """Render ``duration`` as a whole number in ms, s, m or h by magnitude."""
    micros = max(0, _to_micros(duration))
    if micros < _SECOND:
        return f"{_round_div(micros, _MS)}ms"
    if micros < _MINUTE:
        return f"{_round_div(micros, _SECOND)}s"
    if micros < _HOUR:
        return f"{_round_div(micros, _MINUTE)}m"
    return f"{_round_div(micros, _HOUR)}h"


def format_summary(key: str, count: int, accumulated: timedelta) -> str:
    return f'Message: "{key}" repeat for {count} times in the past {format_duration(accumulated)}'
