"""Persistence of flow execution state between conversation turns."""

from __future__ import annotations

import enum
import json
import logging
import threading
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any, Protocol

from flowgate._errors import FlowStatusError
from flowgate._types import CompletionType

logger = logging.getLogger("flowgate")


class StepStatus(str, enum.Enum):
    NOT_STARTED = "NotStarted"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"


@dataclass
class StepExecutionState:
    """Progress of one step: status, completed iterations and outputs per iteration."""

    status: StepStatus = StepStatus.NOT_STARTED
    iterations: int = 0
    output: dict[str, list[Any]] = field(default_factory=dict)

    def record_iteration(self, values: Mapping[str, Any]) -> None:
        """Record one finished run of the step and the variables it produced."""
        self.iterations += 1
        self.status = StepStatus.IN_PROGRESS
        for name, value in values.items():
            self.output.setdefault(name, []).append(value)

    def is_complete(self, completion_type: CompletionType, max_iterations: int) -> bool:
        """Return whether the step needs no further runs.

        True once the step was marked completed, or when the policy is
        satisfied and no further run is permitted.
        """
        if self.status is StepStatus.COMPLETED:
            return True
        return completion_type.is_satisfied(self.iterations) and not (
            completion_type.can_run_again(self.iterations, max_iterations)
        )


@dataclass
class ExecutionState:
    """Snapshot of a flow session.

    ``variables`` holds JSON-compatible values (strings, numbers, lists and
    mappings); ``step_states`` is keyed by step index as a string.
    """

    current_step_index: int = 0
    variables: dict[str, Any] = field(default_factory=dict)
    step_states: dict[str, StepExecutionState] = field(default_factory=dict)

    def step_state(self, index: int) -> StepExecutionState:
        return self.step_states.setdefault(str(index), StepExecutionState())

    def to_json(self) -> str:
        return json.dumps(asdict(self), default=_encode)

    @classmethod
    def from_json(cls, text: str) -> ExecutionState:
        data = json.loads(text)
        return cls(
            current_step_index=data.get("current_step_index", 0),
            variables=data.get("variables", {}),
            step_states={
                key: StepExecutionState(
                    status=StepStatus(raw.get("status", StepStatus.NOT_STARTED.value)),
                    iterations=raw.get("iterations", 0),
                    output=raw.get("output", {}),
                )
                for key, raw in data.get("step_states", {}).items()
            },
        )


def _encode(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class FlowStatusProvider(Protocol):
    """Storage for execution state and per-step chat history."""

    def get_execution_state(self, session_id: str) -> ExecutionState: ...

    def save_execution_state(self, session_id: str, state: ExecutionState) -> None: ...

    def get_chat_history(
        self, session_id: str, step_id: str
    ) -> list[dict[str, str]] | None: ...

    def save_chat_history(
        self, session_id: str, step_id: str, history: list[dict[str, str]]
    ) -> None: ...


class InMemoryFlowStatusProvider:
    """Keeps serialized state in a process-local dict.

    Values are stored as JSON text, exactly as a persistent store would hold
    them, so corrupt entries surface as :class:`~flowgate.FlowStatusError`.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, str] = {}

    def get_execution_state(self, session_id: str) -> ExecutionState:
        text = self._get(f"FlowStatus_{session_id}")
        if not text:
            return ExecutionState()
        try:
            return ExecutionState.from_json(text)
        except (ValueError, TypeError, AttributeError) as exc:
            raise FlowStatusError(
                f"Failed to deserialize execution state for sessionId={session_id}, data={text}"
            ) from exc

    def save_execution_state(self, session_id: str, state: ExecutionState) -> None:
        self._put(f"FlowStatus_{session_id}", state.to_json())
        logger.debug("Saved execution state for session %s", session_id)

    def get_chat_history(
        self, session_id: str, step_id: str
    ) -> list[dict[str, str]] | None:
        text = self._get(f"ChatHistory_{session_id}_{step_id}")
        if not text:
            return None
        try:
            history = json.loads(text)
        except ValueError as exc:
            raise FlowStatusError(
                f"Failed to deserialize chat history for session {session_id}, data={text}"
            ) from exc
        if not isinstance(history, list):
            raise FlowStatusError(
                f"Failed to deserialize chat history for session {session_id}, data={text}"
            )
        return history

    def save_chat_history(
        self, session_id: str, step_id: str, history: list[dict[str, str]]
    ) -> None:
        self._put(f"ChatHistory_{session_id}_{step_id}", json.dumps(history))

    def _get(self, key: str) -> str | None:
        with self._lock:
            return self._records.get(key)

    def _put(self, key: str, text: str) -> None:
        with self._lock:
            self._records[key] = text
