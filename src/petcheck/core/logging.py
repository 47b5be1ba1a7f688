"""
Logging setup for PetCheck.

Every module logs through `get_logger(__name__)`, which places the logger
under the `petcheck` hierarchy and installs the default handlers on first
use. API requests bind the cookie user id and path with `LogContext`, and
both formatters attach that context to each line.

Usage:
    from petcheck.core.logging import LogContext, get_logger, setup_logging

    setup_logging(level="DEBUG", json_format=True)

    logger = get_logger(__name__)
    with LogContext(user_id="3f2a..."):
        logger.info("Pet registered", extra={"pet": "Bori"})
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator

_PACKAGE = "petcheck"

_context: ContextVar[dict[str, Any]] = ContextVar("petcheck_log_context", default={})

# Attributes every LogRecord carries; anything else arrived through extra=
_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

_configured = False


def get_log_context() -> dict[str, Any]:
    """Fields bound by the enclosing LogContext blocks."""
    return _context.get()


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _STANDARD_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line: core fields, bound context, then extras."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        context = get_log_context()
        if context:
            entry["context"] = context
        entry.update(_extra_fields(record))

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception_type"] = record.exc_info[0].__name__
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Plain text lines with the bound context appended as key=value pairs."""

    def __init__(self) -> None:
        super().__init__(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = get_log_context()
        if context:
            pairs = " ".join(f"{k}={v}" for k, v in context.items() if v is not None)
            if pairs:
                line = f"{line} [{pairs}]"
        return line


def setup_logging(
    level: str | None = None,
    log_file: Path | None = None,
    json_format: bool = False,
) -> None:
    """Install handlers on the `petcheck` logger.

    Calling again replaces the handlers from the previous call.

    Args:
        level: Level name; defaults to the configured PETCHECK_LOG_LEVEL.
        log_file: Also write JSON lines to this file.
        json_format: Emit JSON on stdout instead of plain text.
    """
    global _configured

    # Deferred: petcheck.config must stay importable without logging
    from petcheck.config import get_settings

    level = (level or get_settings().log_level).upper()

    package_logger = logging.getLogger(_PACKAGE)
    package_logger.setLevel(level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(JSONFormatter() if json_format else ConsoleFormatter())
    package_logger.addHandler(console)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        package_logger.addHandler(file_handler)

    _configured = True
    package_logger.debug(f"Logging to stdout{f' and {log_file}' if log_file else ''} at {level}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the `petcheck` hierarchy.

    Installs the default handlers the first time any logger is requested.
    """
    if not _configured:
        setup_logging()
    if name != _PACKAGE and not name.startswith(f"{_PACKAGE}."):
        name = f"{_PACKAGE}.{name}"
    return logging.getLogger(name)


class LogContext:
    """Bind fields to every log line emitted inside the block.

    Nested blocks add to the outer fields; the outer set is restored on exit.
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self._token = None

    def __enter__(self) -> "LogContext":
        self._token = _context.set({**_context.get(), **self.fields})
        return self

    def __exit__(self, *exc: Any) -> None:
        if self._token is not None:
            _context.reset(self._token)
            self._token = None


@contextmanager
def log_operation(
    logger: logging.Logger,
    operation: str,
    level: int = logging.INFO,
) -> Iterator[None]:
    """Log how long a block took, or that it failed.

    Emits one record on exit with `operation` and `duration_ms` extras:
    "<operation> done" at `level`, or "<operation> failed" at ERROR with the
    exception type before re-raising.
    """
    started = time.perf_counter()
    try:
        yield
    except Exception as e:
        logger.error(
            f"{operation} failed: {e}",
            extra={
                "operation": operation,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                "error_type": type(e).__name__,
            },
        )
        raise
    logger.log(
        level,
        f"{operation} done",
        extra={
            "operation": operation,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        },
    )
