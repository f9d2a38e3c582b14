"""Process-wide logging setup for the gateway and its scripts."""

import json
import logging
import sys
from datetime import datetime, timezone

from aigateway.core.config import settings
from aigateway.gateway.types import ATTEMPT_LOG_FIELDS

PLAIN_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
PLAIN_DATEFMT = "%Y-%m-%d %H:%M:%S"

# HTTP client internals log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore")


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with attempt fields lifted to the top level."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({key: getattr(record, key) for key in ATTEMPT_LOG_FIELDS if hasattr(record, key)})
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def _build_formatter(json_output: bool) -> logging.Formatter:
    if json_output:
        return JSONFormatter()
    return logging.Formatter(PLAIN_FORMAT, datefmt=PLAIN_DATEFMT)


def setup_logging(level_name: str | None = None, json_output: bool | None = None) -> None:
    """Route all logging to stdout; arguments override LOG_LEVEL / LOG_JSON."""
    level = getattr(logging, (level_name or settings.log_level).upper(), logging.INFO)
    if json_output is None:
        json_output = settings.log_json

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(_build_formatter(json_output))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
