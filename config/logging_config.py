"""
Logging setup for the portfolio backend.

Plain text by default; one JSON object per line when LOG_JSON=1.
Request and import events attach their numbers through `extra=`, so the
JSON output carries them as top-level keys (method, path, status,
duration_ms, rows, rows_created, ...). Position sizes and P&L are fine to log,
raw upload contents are not.
"""
import json
import logging
import os
import sys
from typing import Any

# attributes every LogRecord has; anything else came in via extra=
_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def _json_default(obj: Any):
    if hasattr(obj, "isoformat"):
        return obj.isoformat()
    return str(obj)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S") + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED and key not in payload and value is not None:
                payload[key] = value
        if record.exc_info and record.exc_info[0]:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=_json_default, ensure_ascii=False)


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


def configure_logging() -> None:
    level = getattr(logging, (os.getenv("LOG_LEVEL") or "INFO").upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if _env_flag("LOG_JSON"):
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))

    root = logging.getLogger()
    root.setLevel(level)
    # uvicorn --reload imports main twice
    for h in root.handlers[:]:
        root.removeHandler(h)
    root.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if _env_flag("SQL_ECHO") else logging.WARNING
    )
