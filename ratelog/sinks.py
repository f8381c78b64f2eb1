from __future__ import annotations

import logging
import sys
from typing import List, Optional, Protocol, TextIO


class Sink(Protocol):
    def write_line(self, text: str) -> None:
        ...


class StreamSink:
    """Writes each line plus a newline to a text stream, stdout by default."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # resolved lazily so redirected/captured sys.stdout is honoured
        return self._stream if self._stream is not None else sys.stdout

    def write_line(self, text: str) -> None:
        stream = self.stream
        stream.write(f"{text}\n")
        stream.flush()


class CaptureSink:
    """Keeps emitted lines in order for assertions."""

    def __init__(self) -> None:
        self.lines: List[str] = []

    def write_line(self, text: str) -> None:
        self.lines.append(text)

    def clear(self) -> None:
        self.lines.clear()


class LoggerSink:
    def __init__(self, logger: logging.Logger, level: int = logging.INFO) -> None:
        self._logger = logger
        self._level = level

    def write_line(self, text: str) -> None:
        self._logger.log(self._level, text, extra={"event": "ratelog_output"})


def sink_from_name(name: str) -> StreamSink:
    if name == "stderr":
        return StreamSink(sys.stderr)
    return StreamSink()
