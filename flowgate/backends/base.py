"""Abstract base class for tracing backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any


class TracingBackend(ABC):
    """Interface that all flowgate tracing backends must implement."""

    @abstractmethod
    @contextmanager
    def span(self, operation: str, flow_name: str, **attrs: Any) -> Iterator[None]:
        """Open a tracing span for the duration of an operation on a flow."""

    @abstractmethod
    def get_session_id(self) -> str:
        """Return the ID correlating spans of the current session."""
