"""Logging setup: one root handler, structured ``extra`` fields appended as JSON."""
import json
import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_STANDARD_LOG_RECORD_KEYS = frozenset(
    (
        "name", "msg", "args", "created", "filename", "funcName", "levelname", "levelno",
        "lineno", "module", "msecs", "pathname", "process", "processName", "relativeCreated",
        "stack_info", "exc_info", "exc_text", "message", "thread", "threadName", "taskName",
        "asctime", "getMessage",
    )
)


def _format_extra(record: logging.LogRecord) -> str:
    extra = {k: getattr(record, k) for k in record.__dict__ if k not in _STANDARD_LOG_RECORD_KEYS}
    if not extra:
        return ""
    try:
        return " | " + json.dumps(extra, default=str)
    except (TypeError, ValueError):
        return " | " + str(extra)


class ExtraFormatter(logging.Formatter):
    """Formatter that renders ``extra={...}`` fields after the message."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        suffix = _format_extra(record)
        return base + suffix if suffix else base


def configure_logging(level: str = "INFO") -> None:
    """Install the structured formatter on the root logger unless handlers already exist."""
    if logging.root.handlers:
        return
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    for h in logging.root.handlers:
        h.setFormatter(ExtraFormatter(LOG_FORMAT))
