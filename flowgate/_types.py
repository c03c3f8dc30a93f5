"""Core type definitions for flows, steps and model settings."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from flowgate._dag import sort_steps
from flowgate._errors import FlowValidationError

CHAT_HISTORY_VARIABLE = "_chatHistory"
CHAT_INPUT_VARIABLE = "_chatInput"

# Variables owned by the orchestrator; steps may not declare them.
RESERVED_VARIABLES = frozenset({CHAT_HISTORY_VARIABLE, CHAT_INPUT_VARIABLE})

DEFAULT_TRANSITION_MESSAGE = "Did you want to try the previous step again?"


class CompletionType(str, enum.Enum):
    """How many times a step may or must run."""

    ONCE = "Once"
    OPTIONAL = "Optional"
    ZERO_OR_MORE = "ZeroOrMore"
    AT_LEAST_ONCE = "AtLeastOnce"

    @property
    def can_skip(self) -> bool:
        """True when the step may legitimately produce zero iterations."""
        return self in (CompletionType.OPTIONAL, CompletionType.ZERO_OR_MORE)

    @property
    def is_repeatable(self) -> bool:
        return self in (CompletionType.AT_LEAST_ONCE, CompletionType.ZERO_OR_MORE)

    @property
    def requires_starting_message(self) -> bool:
        return self.can_skip

    @property
    def allows_passthrough(self) -> bool:
        return self.is_repeatable

    def is_satisfied(self, iterations: int) -> bool:
        """Return whether *iterations* completed runs fulfil this policy."""
        return iterations >= (0 if self.can_skip else 1)

    def can_run_again(self, iterations: int, max_iterations: int) -> bool:
        """Return whether another run is allowed after *iterations* runs."""
        if not self.is_repeatable:
            return iterations < 1
        return iterations < max_iterations


def _names(values: Iterable[str] | None) -> tuple[str, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        return (values,)
    # Ordered de-duplication.
    return tuple(dict.fromkeys(values))


@dataclass(frozen=True)
class FlowStep:
    """A single unit of work within a :class:`Flow`.

    ``requires``, ``provides`` and ``passthrough`` accept any iterable of
    variable names and are normalized to ordered, de-duplicated tuples.
    ``plugins`` is ``None`` when the step may use every available plugin.
    """

    goal: str
    requires: tuple[str, ...] = ()
    provides: tuple[str, ...] = ()
    passthrough: tuple[str, ...] = ()
    completion_type: CompletionType = CompletionType.ONCE
    starting_message: str | None = None
    transition_message: str | None = DEFAULT_TRANSITION_MESSAGE
    plugins: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        for attr in ("requires", "provides", "passthrough"):
            names = _names(getattr(self, attr))
            invalid = [n for n in names if n in RESERVED_VARIABLES]
            if invalid:
                raise FlowValidationError(f"Invalid arguments: {','.join(invalid)}")
            object.__setattr__(self, attr, names)
        if self.plugins is not None:
            object.__setattr__(self, "plugins", _names(self.plugins))
        object.__setattr__(
            self, "completion_type", CompletionType(self.completion_type)
        )

    def depends_on(self, other: FlowStep) -> bool:
        """Return whether this step reads a variable that *other* writes."""
        return not set(self.requires).isdisjoint(other.provides)


@dataclass(frozen=True)
class ReferenceFlowStep(FlowStep):
    """A step that delegates to another registered flow by name.

    Requirements, provides and plugins are inherited from the referenced
    flow and must not be declared on the reference itself.
    """

    goal: str = ""
    flow_name: str = ""


@dataclass(frozen=True)
class Flow:
    """An ordered collection of steps working toward a goal."""

    name: str
    goal: str
    steps: tuple[FlowStep, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "steps", tuple(self.steps))

    @property
    def provides(self) -> tuple[str, ...]:
        return _names(v for s in self.steps for v in s.provides)

    @property
    def requires(self) -> tuple[str, ...]:
        """Variables some step reads that no step in the flow writes."""
        provided = set(self.provides)
        return _names(v for s in self.steps for v in s.requires if v not in provided)

    def sort_steps(self) -> list[FlowStep]:
        """Return the steps in an order that satisfies every dependency.

        Raises :class:`~flowgate.CircularDependencyError` when no such order
        exists.
        """
        return sort_steps(self.steps)


@dataclass(frozen=True, slots=True)
class ModelSettings:
    """Execution settings tied to a preferred service or model."""

    service_id: str | None = None
    model_id: str | None = None
    extension_data: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ParameterView:
    """Binding metadata for one parameter of a registered function."""

    name: str
    description: str = ""
    default_value: str | None = None
    type: str = "string"
    is_required: bool = False


@dataclass(frozen=True, slots=True)
class FunctionView:
    """Explicitly registered description of a plugin function."""

    name: str
    plugin_name: str
    description: str = ""
    parameters: tuple[ParameterView, ...] = ()
    model_settings: tuple[ModelSettings, ...] | None = None
