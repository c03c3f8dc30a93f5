"""OpenTelemetry tracing backend.

Requires ``opentelemetry-api`` (install the ``otel`` extra).
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from flowgate._context import current_session_id
from flowgate.backends.base import TracingBackend

try:
    from opentelemetry import trace  # type: ignore[import-not-found]

    _HAS_OTEL = True
except ImportError:  # pragma: no cover
    _HAS_OTEL = False


class OTelBackend(TracingBackend):
    """Wraps flow operations (such as validation) in OTel spans.

    Span names are ``flowgate.<operation>``; the flow name and the flowgate
    session ID are recorded as attributes so spans of one session can be
    grouped even across traces.
    """

    def __init__(self, tracer_name: str = "flowgate") -> None:
        if not _HAS_OTEL:
            raise RuntimeError(
                "opentelemetry-api is required for OTelBackend. "
                "Install it with: pip install 'flowgate[otel]'"
            )
        self._tracer = trace.get_tracer(tracer_name)

    @contextmanager
    def span(self, operation: str, flow_name: str, **attrs: Any) -> Iterator[None]:
        attributes = {
            "flowgate.flow": flow_name,
            **{f"flowgate.{k}": v for k, v in attrs.items()},
        }
        sid = current_session_id()
        if sid is not None:
            attributes["flowgate.session_id"] = sid
        with self._tracer.start_as_current_span(
            f"flowgate.{operation}", attributes=attributes
        ):
            yield

    def get_session_id(self) -> str:
        sid = current_session_id()
        if sid is not None:
            return sid
        ctx = trace.get_current_span().get_span_context()
        if ctx is not None and ctx.trace_id:
            return format(ctx.trace_id, "032x")
        return ""
