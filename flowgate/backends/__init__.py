"""Tracing backends."""

from flowgate.backends.base import TracingBackend
from flowgate.backends.logging import LoggingBackend

__all__ = ["LoggingBackend", "TracingBackend"]
