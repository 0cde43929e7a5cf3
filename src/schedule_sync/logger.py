"""Structured JSON logger matching Go slog format.

Outputs one JSON object per line:
{"time":"2023-10-08T23:59:20.829529-04:00","level":"INFO","source":{"function":"run_weekly_sync","file":"pipeline.py","line":43},"msg":"weekly sync complete","employee":"Ney,Conor"}

Fields come from three places, later ones winning: the scoped run context
(``log_context``), keyword fields passed to the call, and, for
``exception``, an ``error`` field with the exception type and message.
"""

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import IO, Any, Iterator

_log_context: ContextVar[dict[str, Any] | None] = ContextVar("log_context", default=None)


def get_context() -> dict[str, Any]:
    """Copy of the fields attached to every log line in this context."""
    return dict(_log_context.get() or {})


def set_context(**fields: Any) -> None:
    """Add fields to the current context.

    Inside ``log_context`` the additions are dropped when the block exits.
    """
    _log_context.set({**get_context(), **fields})


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Attach ``fields`` to every log line emitted inside the block.

    Example:
        with log_context(employee="Ney,Conor"):
            logger.info("parsing schedule")  # includes employee
    """
    token = _log_context.set({**get_context(), **fields})
    try:
        yield
    finally:
        _log_context.reset(token)


class StructuredFormatter(logging.Formatter):
    """JSON formatter that outputs logs in Go slog-compatible format."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "time": datetime.now(timezone.utc).astimezone().isoformat(),
            "level": record.levelname,
            "source": {
                "function": record.funcName,
                "file": record.pathname,
                "line": record.lineno,
            },
            "msg": record.getMessage(),
            **get_context(),
            **getattr(record, "extra_fields", {}),
        }
        if record.exc_info and record.exc_info[1] is not None:
            error = record.exc_info[1]
            entry["error"] = {"type": type(error).__name__, "message": str(error)}

        # Dates and paths are common field values
        return json.dumps(entry, default=str)


class StructuredLogger:
    """Logger that writes structured JSON lines to one stream.

    Library code logs to stdout like a service would; the CLI moves the
    stream to stderr while its results go to stdout.
    """

    def __init__(
        self,
        name: str = "schedule_sync",
        level: int = logging.INFO,
        stream: IO[str] | None = None,
    ):
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)
        self._logger.handlers.clear()

        self._handler = logging.StreamHandler(stream or sys.stdout)
        self._handler.setFormatter(StructuredFormatter())
        self._logger.addHandler(self._handler)
        self._logger.propagate = False

    @property
    def level(self) -> int:
        return self._logger.level

    def set_level(self, level: int) -> None:
        self._logger.setLevel(level)

    def set_stream(self, stream: IO[str]) -> IO[str]:
        """Send log lines to ``stream`` and return the previous stream."""
        previous = self._handler.stream
        self._handler.setStream(stream)
        return previous

    def _log(self, level: int, msg: str, exc_info: bool = False, **fields: Any) -> None:
        # stacklevel 3 reports the caller of debug/info/warn/error
        self._logger.log(
            level,
            msg,
            exc_info=exc_info,
            stacklevel=3,
            extra={"extra_fields": fields},
        )

    def debug(self, msg: str, **fields: Any) -> None:
        self._log(logging.DEBUG, msg, **fields)

    def info(self, msg: str, **fields: Any) -> None:
        self._log(logging.INFO, msg, **fields)

    def warn(self, msg: str, **fields: Any) -> None:
        self._log(logging.WARNING, msg, **fields)

    def error(self, msg: str, **fields: Any) -> None:
        self._log(logging.ERROR, msg, **fields)

    def exception(self, msg: str, **fields: Any) -> None:
        """Log at ERROR with the exception being handled as an ``error`` field."""
        self._log(logging.ERROR, msg, exc_info=True, **fields)


logger = StructuredLogger("schedule_sync")
