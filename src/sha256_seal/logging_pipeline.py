"""Structured logging utilities for the sealing command line."""

from __future__ import annotations

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from queue import Full, Queue
from typing import Iterable, override
from uuid import uuid4

LOGGER = logging.getLogger(__name__)

_STRUCTURED_RESERVED_KEYS: tuple[str, ...] = (
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
)

_REDACTED_KEYS: frozenset[str] = frozenset({"secret"})


class JsonFormatter(logging.Formatter):
    """Render log records as one JSON object per line.

    Extra fields land under ``context``; a ``secret`` field is masked.
    """

    def __init__(self, *, default_trace_id: str | None = None) -> None:
        super().__init__()
        self._default_trace_id = default_trace_id

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - inherited
        trace_id = getattr(record, "trace_id", None) or self._default_trace_id

        context: dict[str, object] = {
            key: "[redacted]" if key in _REDACTED_KEYS else value
            for key, value in record.__dict__.items()
            if key not in _STRUCTURED_RESERVED_KEYS and key != "trace_id"
        }

        payload: dict[str, object] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "trace_id": trace_id,
            "context": context,
        }

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        elif record.exc_text:
            payload["exception"] = record.exc_text

        return json.dumps(payload, default=str)


class BoundedQueueHandler(logging.handlers.QueueHandler):
    """Queue handler that drops records when the queue is full."""

    @override
    def enqueue(self, record: logging.LogRecord) -> None:
        """Enqueue a record without blocking."""

        try:
            self.queue.put_nowait(record)
        except Full:
            self.handleError(record)

    @override
    def handleError(self, record: logging.LogRecord) -> None:
        """Drop the record silently when the queue is full."""

        return


def configure_structured_logging(
    logger: logging.Logger,
    *,
    trace_id: str | None = None,
    level: int | str = logging.WARNING,
    stream: object | None = None,
) -> logging.handlers.QueueListener:
    """Attach a JSON-emitting queue pipeline to ``logger``.

    Args:
        logger: Target logger to configure.
        trace_id: Static trace identifier stamped on every record unless one
            is passed via ``extra``. A random UUID is used when omitted.
        level: Logging level, as a number or a level name.
        stream: Destination stream for the JSON lines. Defaults to
            ``sys.stderr``.

    Returns:
        The started queue listener. Pass it to :func:`shutdown_listeners`
        to flush and stop it.
    """
    logger.setLevel(level)

    record_queue: Queue[logging.LogRecord] = Queue(maxsize=1024)
    logger.addHandler(BoundedQueueHandler(record_queue))

    stream_handler = logging.StreamHandler(stream)  # type: ignore[arg-type]
    stream_handler.setFormatter(JsonFormatter(default_trace_id=trace_id or str(uuid4())))

    listener = logging.handlers.QueueListener(record_queue, stream_handler)
    listener.start()
    return listener


def shutdown_listeners(listeners: Iterable[logging.handlers.QueueListener]) -> None:
    """Stop all queue listeners while suppressing shutdown errors."""
    for listener in listeners:
        try:
            listener.stop()
        except Exception as exc:  # pragma: no cover - logging cleanup
            LOGGER.warning("Failed to stop logging listener", exc_info=exc)


def remove_queue_handlers(logger: logging.Logger) -> None:
    """Detach every :class:`BoundedQueueHandler` previously added to ``logger``."""
    for handler in list(logger.handlers):
        if isinstance(handler, BoundedQueueHandler):
            logger.removeHandler(handler)
