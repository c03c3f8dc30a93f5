"""Thread-safe registry of named flows."""

from __future__ import annotations

import threading

from flowgate._types import Flow, ReferenceFlowStep
from flowgate._validator import FlowValidator


class FlowRegistry:
    """Stores flows by name and resolves references between them."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._flows: dict[str, Flow] = {}

    def register(self, flow: Flow) -> None:
        """Register a flow. Idempotent for identical flows, raises on conflict."""
        with self._lock:
            existing = self._flows.get(flow.name)
            if existing is not None:
                if existing != flow:
                    raise ValueError(f"Conflicting registration for flow '{flow.name}'")
                return
            self._flows[flow.name] = flow

    def get_flow(self, name: str) -> Flow:
        """Return the named flow. Raises KeyError if not found."""
        with self._lock:
            flow = self._flows.get(name)
        if flow is None:
            raise KeyError(f"Flow '{name}' not found")
        return flow

    def get_all_flow_names(self) -> list[str]:
        with self._lock:
            return list(self._flows.keys())

    def resolve_reference(self, step: ReferenceFlowStep) -> Flow:
        """Return the flow a reference step points at."""
        return self.get_flow(step.flow_name)

    def validate_flow(self, name: str, validator: FlowValidator | None = None) -> None:
        """Validate a registered flow and verify its references resolve.

        Raises :class:`~flowgate.FlowValidationError` for structural problems,
        ``ValueError`` listing unresolved references, and ``KeyError`` if the
        flow itself is not registered.
        """
        flow = self.get_flow(name)
        (validator or FlowValidator()).validate(flow)

        with self._lock:
            known = set(self._flows)
        missing: list[str] = [
            f"Step '{step.goal or step.flow_name}' references unknown flow '{step.flow_name}'"
            for step in flow.steps
            if isinstance(step, ReferenceFlowStep) and step.flow_name not in known
        ]
        if missing:
            raise ValueError(
                f"Flow '{name}' has invalid references:\n"
                + "\n".join(f"  - {m}" for m in missing)
            )

    def clear(self) -> None:
        """Remove all registered flows. Intended for testing."""
        with self._lock:
            self._flows.clear()

