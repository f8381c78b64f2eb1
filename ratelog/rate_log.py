from __future__ import annotations

import logging
from typing import Optional

from .clock import Clock, MonotonicClock
from .config import Settings
from .policy import ThresholdPolicy, describe, policy_from_settings
from .sinks import Sink, StreamSink, sink_from_name
from .tracker import RateTracker

logger = logging.getLogger("ratelog.rate_log")


class RateLog:
    """Rate-limited printer: new messages go out at once, repeats are summarized.

    Each ``log`` call reads the clock once, updates the tracker, then writes
    the resulting line (if any) to the sink. Counters are committed before the
    write, so a failing sink raises without rolling the accounting back.
    """

    def __init__(
        self,
        policy: ThresholdPolicy,
        sink: Optional[Sink] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._tracker = RateTracker(policy)
        self._sink: Sink = sink if sink is not None else StreamSink()
        self._clock: Clock = clock if clock is not None else MonotonicClock()

    @classmethod
    def from_settings(
        cls,
        cfg: Settings,
        sink: Optional[Sink] = None,
        clock: Optional[Clock] = None,
    ) -> "RateLog":
        policy = policy_from_settings(cfg)
        logger.debug(
            "RateLog configured",
            extra={"event": "configured", "policy": describe(policy), "sink": cfg.sink},
        )
        return cls(policy, sink=sink if sink is not None else sink_from_name(cfg.sink), clock=clock)

    @property
    def tracker(self) -> RateTracker:
        return self._tracker

    def log(self, message: str) -> None:
        line = self._tracker.submit(message, self._clock.now())
        if line is not None:
            self._sink.write_line(line.text)
