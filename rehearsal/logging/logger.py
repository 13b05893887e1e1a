import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TextIO

_session_id: ContextVar[str] = ContextVar("rehearsal_session_id", default="-")


class _SessionFilter(logging.Filter):
    """Stamps every record with the rehearsal session it was emitted from."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.session = _session_id.get()
        return True


class Log:
    """Centralized logging with structured format.

    Messages must never carry original PII values: log counts, identifiers
    and entity types only.
    """

    _logger: logging.Logger = logging.getLogger("rehearsal")

    @classmethod
    def configure(cls, log_level: str, stream: TextIO | None = None) -> None:
        """Configure the logger with the specified level and a stream handler.

        Logs go to stdout unless another *stream* is given.
        """
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(stream or sys.stdout)
            handler.addFilter(_SessionFilter())
            handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s [%(levelname)s] [session=%(session)s] %(message)s"
                )
            )
            cls._logger.addHandler(handler)

    @classmethod
    @contextmanager
    def session_scope(cls, session_id: str) -> Iterator[None]:
        """Tag log lines emitted inside the block with *session_id*."""
        token = _session_id.set(session_id)
        try:
            yield
        finally:
            _session_id.reset(token)

    @classmethod
    def current_session(cls) -> str:
        """Session id tagged on the current log lines."""
        return _session_id.get()

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        """Log an info message."""
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        """Log an error message."""
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        """Log a warning message."""
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        """Log a debug message."""
        cls._logger.debug(message, extra=kwargs)
