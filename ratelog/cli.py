from __future__ import annotations

import argparse
from dataclasses import replace
import logging
from pathlib import Path
import sys
from typing import Iterable, Optional, Sequence

from dotenv import load_dotenv

from .config import load_settings
from .exceptions import RateLogError
from .logging_utils import configure_logging
from .rate_log import RateLog

logger = logging.getLogger("ratelog.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ratelog",
        description="Print new lines immediately and summarize consecutive repeats",
    )
    limit = parser.add_mutually_exclusive_group()
    limit.add_argument("--count", type=int, help="Summarize after this many silent repeats")
    limit.add_argument("--duration-ms", type=float, help="Summarize once repeats span more than this many ms")
    parser.add_argument("--input", type=Path, help="Read lines from this file instead of stdin")
    return parser


def _lines(stream: Iterable[str]) -> Iterable[str]:
    for raw in stream:
        yield raw.rstrip("\r\n")


def run(rate_log: RateLog, stream: Iterable[str]) -> int:
    processed = 0
    for line in _lines(stream):
        rate_log.log(line)
        processed += 1
    return processed


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    cfg = load_settings()
    if args.count is not None:
        cfg = replace(cfg, limit_kind="count", limit_count=args.count)
    elif args.duration_ms is not None:
        cfg = replace(cfg, limit_kind="duration", limit_duration_ms=args.duration_ms)
    configure_logging(cfg)

    try:
        rate_log = RateLog.from_settings(cfg)
    except RateLogError as exc:
        logger.error(str(exc), extra={"event": "invalid_configuration"})
        return 2

    source = str(args.input) if args.input else "stdin"
    try:
        if args.input:
            with args.input.open("r", encoding="utf-8") as handle:
                processed = run(rate_log, handle)
        else:
            processed = run(rate_log, sys.stdin)
    except BrokenPipeError:
        logger.warning("Output closed before input was exhausted", extra={"event": "broken_pipe", "source": source})
        return 1
    except OSError:
        logger.exception("I/O failure while gating lines", extra={"event": "io_error", "source": source})
        return 1

    logger.debug("Input exhausted", extra={"event": "done", "source": source, "count": processed})
    return 0
