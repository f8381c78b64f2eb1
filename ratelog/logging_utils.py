from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
import sys

from .config import Settings, load_settings


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in (
            "event",
            "key",
            "count",
            "accumulated_ms",
            "discarded_count",
            "regression_ms",
            "policy",
            "sink",
            "source",
        ):
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


PLAIN_FORMAT = "[%(asctime)s] [%(name)s] %(levelname)s %(message)s"


def configure_logging(cfg: Settings | None = None) -> None:
    # read at call time so values loaded from .env are seen
    cfg = cfg or load_settings()
    root = logging.getLogger()
    if root.handlers:
        return

    # stdout carries gated output; diagnostics stay on stderr
    handler = logging.StreamHandler(sys.stderr)
    if cfg.log_format == "plain":
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    else:
        handler.setFormatter(JsonFormatter())

    level = "DEBUG" if cfg.debug else cfg.log_level
    root.setLevel(getattr(logging, level, logging.INFO))
    root.addHandler(handler)
