"""Orchestrator settings and global tracing backend configuration (thread-safe)."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from flowgate._types import FlowStep, ModelSettings
from flowgate.backends.base import TracingBackend


@dataclass
class FlowOrchestratorConfig:
    """Settings an execution engine reads while running a flow.

    ``max_variable_length`` bounds variables rendered into engine prompts;
    longer values should be read from execution state by the plugins
    themselves.
    """

    excluded_plugins: set[str] = field(default_factory=set)
    excluded_functions: set[str] = field(default_factory=set)
    max_tokens: int = 1024
    max_variable_length: int = 400
    max_step_iterations: int = 10
    min_iteration_time_ms: int = 0
    enable_auto_termination: bool = False
    ai_request_settings: ModelSettings | None = None

    def __post_init__(self) -> None:
        if self.max_step_iterations < 1:
            raise ValueError(
                f"max_step_iterations must be at least 1, got {self.max_step_iterations}"
            )
        if self.min_iteration_time_ms < 0:
            raise ValueError("min_iteration_time_ms cannot be negative")

    def iteration_limit(self, step: FlowStep) -> int:
        """Return how many times *step* may run under this configuration."""
        if step.completion_type.is_repeatable:
            return self.max_step_iterations
        return 1

    def is_excluded(self, plugin_name: str, function_name: str | None = None) -> bool:
        """Return whether a plugin (or one of its functions) is hidden from planning."""
        if plugin_name in self.excluded_plugins:
            return True
        return function_name is not None and function_name in self.excluded_functions


_lock = threading.Lock()
_backend: TracingBackend | None = None
_configured = False


def configure(backend: TracingBackend | str = "auto") -> None:
    """Set the global tracing backend.

    *backend* can be:
    - A :class:`TracingBackend` instance
    - ``"logging"`` — use the built-in :class:`LoggingBackend`
    - ``"otel"`` — use :class:`OTelBackend` (requires ``opentelemetry-api``)
    - ``"auto"`` — try OTel, fall back to logging
    """
    global _backend, _configured
    with _lock:
        if isinstance(backend, TracingBackend):
            _backend = backend
        elif backend == "logging":
            from flowgate.backends.logging import LoggingBackend

            _backend = LoggingBackend()
        elif backend == "otel":
            from flowgate.backends.otel import OTelBackend

            _backend = OTelBackend()
        elif backend == "auto":
            _backend = _auto_detect()
        else:
            raise ValueError(f"Unknown backend: {backend!r}")
        _configured = True


def get_backend() -> TracingBackend:
    """Return the configured backend, auto-detecting on first call."""
    global _backend, _configured
    if _configured:
        assert _backend is not None
        return _backend
    with _lock:
        if _configured:
            assert _backend is not None
            return _backend
        _backend = _auto_detect()
        _configured = True
        return _backend


def reset() -> None:
    """Reset configuration to unconfigured state. Intended for testing."""
    global _backend, _configured
    with _lock:
        _backend = None
        _configured = False


def _auto_detect() -> TracingBackend:
    try:
        from flowgate.backends.otel import OTelBackend

        return OTelBackend()
    except RuntimeError:
        from flowgate.backends.logging import LoggingBackend

        return LoggingBackend()
