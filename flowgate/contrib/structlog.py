"""structlog processor that tags log entries with the active flow session.

Usage::

    import structlog
    from flowgate.contrib.structlog import flow_processor

    structlog.configure(
        processors=[
            flow_processor,
            structlog.dev.ConsoleRenderer(),
        ]
    )

Every log entry emitted inside :func:`flowgate.flow_session` automatically
includes ``flow_session_id`` and ``flow`` keys.
"""

from __future__ import annotations

from typing import Any

from flowgate._context import get_flow_context


def flow_processor(
    _logger: Any, _method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """structlog processor adding the session ID and flow name to every event.

    Keys are omitted outside a session rather than set to ``None``, and
    values already bound by the caller are left untouched.
    """
    ctx = get_flow_context()
    if ctx is None:
        return event_dict
    event_dict.setdefault("flow_session_id", ctx.session_id)
    if ctx.flow_name is not None:
        event_dict.setdefault("flow", ctx.flow_name)
    return event_dict
