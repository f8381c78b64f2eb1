from .clock import Clock, ManualClock, MonotonicClock
from .exceptions import ConfigurationError, InvalidLimitError, RateLogError
from .formatting import format_duration, format_summary
from .logging_filter import RateLimitFilter
from .policy import CountLimit, DurationLimit, ThresholdPolicy, crossed, policy_from_settings
from .rate_log import RateLog
from .sinks import CaptureSink, LoggerSink, Sink, StreamSink
from .tracker import Immediate, OutputLine, RateTracker, Summary, TrackedState

__version__ = "0.1.0"

__all__ = [
    "CaptureSink",
    "Clock",
    "ConfigurationError",
    "CountLimit",
    "DurationLimit",
    "Immediate",
    "InvalidLimitError",
    "LoggerSink",
    "ManualClock",
    "MonotonicClock",
    "OutputLine",
    "RateLimitFilter",
    "RateLog",
    "RateLogError",
    "RateTracker",
    "Sink",
    "StreamSink",
    "Summary",
    "ThresholdPolicy",
    "TrackedState",
    "crossed",
    "format_duration",
    "format_summary",
    "policy_from_settings",
]
