"""Logging-based tracing backend (zero external dependencies)."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from flowgate._context import _get_or_create_context, current_session_id
from flowgate.backends.base import TracingBackend

logger = logging.getLogger("flowgate")


class LoggingBackend(TracingBackend):
    """Emits structured log records when a span opens and closes.

    The closing record carries ``duration_ms`` and, when the block raised,
    an ``error`` field with the exception type name. The exception itself
    is always re-raised.
    """

    @contextmanager
    def span(self, operation: str, flow_name: str, **attrs: Any) -> Iterator[None]:
        session_id = self.get_session_id()
        extra = {
            "flow": flow_name,
            "operation": operation,
            "session_id": session_id,
            **attrs,
        }
        logger.info(f"{operation}.start", extra=extra)
        start = time.monotonic()
        error: str | None = None
        try:
            yield
        except BaseException as exc:
            error = type(exc).__name__
            raise
        finally:
            duration_ms = (time.monotonic() - start) * 1000
            end_extra = {**extra, "duration_ms": duration_ms}
            if error is not None:
                end_extra["error"] = error
            logger.info(f"{operation}.end", extra=end_extra)

    def get_session_id(self) -> str:
        sid = current_session_id()
        if sid is not None:
            return sid
        return _get_or_create_context().session_id
