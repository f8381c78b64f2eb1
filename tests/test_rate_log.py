from dataclasses import replace
from datetime import timedelta
import io
import logging

import pytest

from ratelog.clock import ManualClock, MonotonicClock
from ratelog.config import load_settings
from ratelog.exceptions import ConfigurationError
from ratelog.policy import CountLimit, DurationLimit
from ratelog.rate_log import RateLog
from ratelog.sinks import CaptureSink, LoggerSink, StreamSink


def test_log_writes_immediate_and_summary_lines_in_order():
    sink = CaptureSink()
    clock = ManualClock()
    rate_log = RateLog(CountLimit(2), sink=sink, clock=clock)

    rate_log.log("Starting up")
    rate_log.log("Error occurred")
    for _ in range(2):
        clock.advance(milliseconds=5)
        rate_log.log("Error occurred")
    rate_log.log("Shutting down")

    assert sink.lines == [
        "Starting up",
        "Error occurred",
        'Message: "Error occurred" repeat for 2 times in the past 10ms',
        "Shutting down",
    ]


def test_duration_limit_with_manual_clock():
    sink = CaptureSink()
    clock = ManualClock()
    rate_log = RateLog(DurationLimit(timedelta(milliseconds=50)), sink=sink, clock=clock)

    rate_log.log("message2")
    clock.advance(milliseconds=20)
    rate_log.log("message2")
    clock.advance(milliseconds=40)
    rate_log.log("message2")
    assert sink.lines == ["message2", 'Message: "message2" repeat for 2 times in the past 60ms']

    sink.clear()
    rate_log.log("message2")
    clock.advance(milliseconds=51)
    rate_log.log("message2")
    assert sink.lines == ['Message: "message2" repeat for 2 times in the past 51ms']


def test_default_sink_prints_to_stdout(capsys):
    rate_log = RateLog(CountLimit(1), clock=ManualClock())
    rate_log.log("hello")
    rate_log.log("hello")
    out = capsys.readouterr().out
    assert out == 'hello\nMessage: "hello" repeat for 1 times in the past 0ms\n'


def test_stream_sink_uses_given_stream():
    buffer = io.StringIO()
    StreamSink(buffer).write_line("one")
    StreamSink(buffer).write_line("")
    assert buffer.getvalue() == "one\n\n"


def test_logger_sink_forwards_lines(caplog):
    caplog.set_level(logging.INFO, logger="ratelog.test.sink")
    rate_log = RateLog(CountLimit(3), sink=LoggerSink(logging.getLogger("ratelog.test.sink")), clock=ManualClock())
    rate_log.log("disk full")
    rate_log.log("disk full")
    assert [record.getMessage() for record in caplog.records] == ["disk full"]
    assert caplog.records[0].event == "ratelog_output"


class _FailingSink:
    def write_line(self, text: str) -> None:
        raise OSError("sink is gone")


def test_sink_failure_propagates_without_rolling_back_state():
    clock = ManualClock()
    rate_log = RateLog(CountLimit(1), sink=_FailingSink(), clock=clock)

    with pytest.raises(OSError):
        rate_log.log("boom")
    assert rate_log.tracker.state.key == "boom"

    clock.advance(seconds=1)
    with pytest.raises(OSError):
        rate_log.log("boom")
    state = rate_log.tracker.state
    assert state.count == 0
    assert state.last_seen == 1.0


def test_defaults_use_monotonic_clock():
    rate_log = RateLog(CountLimit(1), sink=CaptureSink())
    assert isinstance(rate_log._clock, MonotonicClock)


def test_from_settings(monkeypatch):
    monkeypatch.setenv("RATELOG_LIMIT_KIND", "count")
    monkeypatch.setenv("RATELOG_LIMIT_COUNT", "2")
    sink = CaptureSink()
    rate_log = RateLog.from_settings(load_settings(), sink=sink, clock=ManualClock())

    assert rate_log.tracker.policy == CountLimit(2)
    for _ in range(3):
        rate_log.log("same")
    assert sink.lines == ["same", 'Message: "same" repeat for 2 times in the past 0ms']


def test_from_settings_rejects_bad_config():
    cfg = replace(load_settings(), limit_kind="sometimes")
    with pytest.raises(ConfigurationError):
        RateLog.from_settings(cfg)
