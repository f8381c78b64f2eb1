from __future__ import annotations

import logging
from typing import Optional

from .clock import Clock
from .policy import ThresholdPolicy
from .tracker import RateTracker, Summary


class RateLimitFilter(logging.Filter):
    """Gate log records through a ``RateTracker``.

    A record whose rendered message differs from the previous one passes
    unchanged. Repeats are dropped until the policy fires; the record that
    crosses the threshold is rewritten to carry the summary text instead.

    Timing comes from ``record.created`` unless a clock is given. Attach one
    filter per handler or logger; a filter instance is not thread-safe.
    """

    def __init__(self, policy: ThresholdPolicy, clock: Optional[Clock] = None, name: str = "") -> None:
        super().__init__(name)
        self._tracker = RateTracker(policy)
        self._clock = clock

    @property
    def tracker(self) -> RateTracker:
        return self._tracker

    def filter(self, record: logging.LogRecord) -> bool:
        if not super().filter(record):
            return True
        now = self._clock.now() if self._clock is not None else record.created
        line = self._tracker.submit(record.getMessage(), now)
        if line is None:
            return False
        if isinstance(line, Summary):
            record.msg = line.text
            record.args = None
        return True
