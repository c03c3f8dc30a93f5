"""Exception hierarchy for flowgate."""

from __future__ import annotations


class FlowgateError(Exception):
    """Base class for all errors raised by flowgate."""


class FlowValidationError(FlowgateError, ValueError):
    """A flow definition is structurally invalid and must be fixed by the caller."""


class CircularDependencyError(FlowgateError):
    """The ``requires``/``provides`` graph of a flow contains a cycle."""

    def __init__(self, goals: list[str]) -> None:
        self.goals = goals
        listed = ", ".join(repr(g) for g in goals)
        super().__init__(
            f"The flow contains circular dependencies between steps: {listed}"
        )


class ServiceNotRegisteredError(FlowgateError, LookupError):
    """No registered AI service satisfies a selection request."""

    def __init__(self, capability: type, names: str) -> None:
        self.capability = capability
        self.names = names
        super().__init__(
            f"Service of type {capability.__name__} and name {names} not registered."
        )


class FlowStatusError(FlowgateError):
    """Persisted execution state could not be read back."""
