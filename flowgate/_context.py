"""Flow session propagation via contextvars."""

from __future__ import annotations

import copy
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any


class FlowContext:
    """Carries a session ID, the active flow name and metadata through execution.

    Thread-safe and async-safe via ``contextvars``.  Use :meth:`fork` to
    create a child context for a referenced sub-flow: it keeps the session ID
    but gets its own flow name and an independent deep-copy of metadata.
    """

    __slots__ = ("_metadata", "flow_name", "session_id")

    def __init__(
        self,
        session_id: str | None = None,
        flow_name: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        self.session_id: str = session_id or uuid.uuid4().hex
        self.flow_name: str | None = flow_name
        self._metadata: dict[str, Any] = metadata if metadata is not None else {}

    # -- value helpers --------------------------------------------------------

    def get_value(self, key: str, default: Any = None) -> Any:
        """Return a metadata value, or *default* if the key is absent."""
        return self._metadata.get(key, default)

    def set_value(self, key: str, value: Any) -> None:
        self._metadata[key] = value

    def delete_value(self, key: str) -> None:
        """Remove a metadata key. Raises ``KeyError`` if absent."""
        del self._metadata[key]

    @property
    def metadata(self) -> dict[str, Any]:
        """Read-only snapshot of the current metadata."""
        return dict(self._metadata)

    # -- forking --------------------------------------------------------------

    def fork(self, flow_name: str | None = None) -> FlowContext:
        """Create a child context sharing the session ID.

        Metadata is deep-copied so mutations in the child do not affect the
        parent (and vice-versa).
        """
        return FlowContext(
            session_id=self.session_id,
            flow_name=flow_name or self.flow_name,
            metadata=copy.deepcopy(self._metadata),
        )


# ---------------------------------------------------------------------------
# ContextVar holding the current FlowContext (None when outside a session)
# ---------------------------------------------------------------------------

_flow_context_var: ContextVar[FlowContext | None] = ContextVar(
    "flowgate_flow_context", default=None
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _get_or_create_context() -> FlowContext:
    """Return the current FlowContext, creating one if none exists."""
    ctx = _flow_context_var.get()
    if ctx is None:
        ctx = FlowContext()
        _flow_context_var.set(ctx)
    return ctx


def _set_context(ctx: FlowContext) -> None:
    _flow_context_var.set(ctx)


def _reset_context() -> None:
    """Clear the current FlowContext (set to ``None``)."""
    _flow_context_var.set(None)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


@contextmanager
def flow_session(
    flow_name: str, session_id: str | None = None
) -> Iterator[FlowContext]:
    """Run a block inside a flow session.

    When a session is already active the new context is forked from it, so a
    referenced flow keeps the caller's session ID. The previous context is
    restored on exit, even if the block raises.
    """
    parent = _flow_context_var.get()
    if parent is not None and session_id is None:
        ctx = parent.fork(flow_name)
    else:
        ctx = FlowContext(session_id=session_id, flow_name=flow_name)
    token = _flow_context_var.set(ctx)
    try:
        yield ctx
    finally:
        _flow_context_var.reset(token)


def current_session_id() -> str | None:
    """Return the current session ID, or ``None`` if outside a session."""
    ctx = _flow_context_var.get()
    return ctx.session_id if ctx is not None else None


def get_flow_context() -> FlowContext | None:
    """Return the current :class:`FlowContext`, or ``None``."""
    return _flow_context_var.get()


def set_flow_context_value(key: str, value: Any) -> None:
    """Set a metadata value on the current flow context.

    Creates a new context automatically if none exists.
    """
    _get_or_create_context().set_value(key, value)


def get_flow_context_value(key: str, default: Any = None) -> Any:
    """Get a metadata value from the current flow context.

    Returns *default* if there is no active context or the key is absent.
    """
    ctx = _flow_context_var.get()
    if ctx is None:
        return default
    return ctx.get_value(key, default)
