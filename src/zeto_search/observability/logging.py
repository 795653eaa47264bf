"""Structured JSON logging with trace correlation.

Each line carries the trace/span ids of the active span and the engine
context bound by ``ZetoSearch`` (engine name and operation), so logs from
several engines in one process can be told apart.
"""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
import logging
import sys
from typing import Any

import orjson
from pydantic import BaseModel

from zeto_search.observability.context import get_trace_context


_RESERVED_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}

# Trace-context keys copied onto every log line when bound
CONTEXT_FIELDS: tuple[str, ...] = ("engine", "operation")


class JsonFormatter(logging.Formatter):
    """Render log records as one orjson-encoded object per line.

    ``extra`` fields are copied through. Credential-like keys are masked and
    long string values (queries, record text) are clipped to
    ``MAX_EXTRA_LEN`` characters.
    """

    REDACT_KEYS = frozenset({"password", "secret", "api_key", "authorization"})
    MAX_MESSAGE_LEN = 2000
    MAX_EXTRA_LEN = 500

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_trace_context()
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": _clip(record.getMessage(), self.MAX_MESSAGE_LEN),
            "trace_id": ctx.get("trace_id", ""),
            "span_id": ctx.get("span_id", ""),
        }
        module = record.name.rpartition(".")[2]
        if module != record.name:
            entry["component"] = module
        entry.update({key: ctx[key] for key in CONTEXT_FIELDS if ctx.get(key)})

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        entry.update(self._extras(record))
        return orjson.dumps(entry, default=_json_default).decode("utf-8")

    def _extras(self, record: logging.LogRecord) -> dict[str, Any]:
        extras: dict[str, Any] = {}
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            if key.lower() in self.REDACT_KEYS:
                extras[key] = "[REDACTED]"
            elif isinstance(value, str):
                extras[key] = _clip(value, self.MAX_EXTRA_LEN)
            else:
                extras[key] = value
        return extras


def _clip(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def _json_default(value: Any) -> Any:
    # Document ids may be any hashable, so sets of them are not always sortable
    if isinstance(value, (set, frozenset)):
        try:
            return sorted(value)
        except TypeError:
            return list(value)
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude={"filter"})
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, BaseException):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    return repr(value)


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    *,
    logger_levels: dict[str, str] | None = None,
) -> None:
    """Configure the root logger with structured JSON or plain text output.

    Args:
        level: Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Emit structured JSON logs when True
        logger_levels: Per-logger level overrides (logger name -> level string)
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    root.addHandler(handler)

    for logger_name, logger_level in (logger_levels or {}).items():
        resolved = getattr(logging, logger_level.upper(), logging.INFO)
        logging.getLogger(logger_name).setLevel(resolved)
