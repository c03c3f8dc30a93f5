"""Tests for flowgate._status."""

from __future__ import annotations

import pytest

from flowgate._errors import FlowStatusError
from flowgate._status import (
    ExecutionState,
    InMemoryFlowStatusProvider,
    StepExecutionState,
    StepStatus,
)
from flowgate._types import CompletionType


class TestStepExecutionState:
    def test_record_iteration(self) -> None:
        state = StepExecutionState()
        state.record_iteration({"email": "a@b.c"})
        state.record_iteration({"email": "d@e.f"})
        assert state.iterations == 2
        assert state.status is StepStatus.IN_PROGRESS
        assert state.output == {"email": ["a@b.c", "d@e.f"]}

    def test_once_complete_after_one_run(self) -> None:
        state = StepExecutionState()
        assert not state.is_complete(CompletionType.ONCE, 10)
        state.record_iteration({})
        assert state.is_complete(CompletionType.ONCE, 10)

    def test_repeatable_complete_at_limit(self) -> None:
        state = StepExecutionState()
        for _ in range(2):
            state.record_iteration({})
        assert not state.is_complete(CompletionType.AT_LEAST_ONCE, 3)
        state.record_iteration({})
        assert state.is_complete(CompletionType.AT_LEAST_ONCE, 3)

    def test_marked_completed(self) -> None:
        state = StepExecutionState(status=StepStatus.COMPLETED)
        assert state.is_complete(CompletionType.ZERO_OR_MORE, 10)


class TestExecutionState:
    def test_json_round_trip(self) -> None:
        state = ExecutionState(current_step_index=1, variables={"email": "a@b.c", "n": 2})
        state.step_state(0).record_iteration({"email": "a@b.c"})
        restored = ExecutionState.from_json(state.to_json())
        assert restored == state
        assert restored.step_states["0"].status is StepStatus.IN_PROGRESS


class TestInMemoryFlowStatusProvider:
    def test_missing_state_is_fresh(self) -> None:
        provider = InMemoryFlowStatusProvider()
        assert provider.get_execution_state("s1") == ExecutionState()

    def test_saves_and_loads_state(self) -> None:
        provider = InMemoryFlowStatusProvider()
        state = ExecutionState(variables={"x": "1"})
        provider.save_execution_state("s1", state)
        assert provider.get_execution_state("s1") == state
        assert provider.get_execution_state("s2") == ExecutionState()

    def test_chat_history(self) -> None:
        provider = InMemoryFlowStatusProvider()
        assert provider.get_chat_history("s1", "0") is None
        history = [{"role": "user", "content": "hi"}]
        provider.save_chat_history("s1", "0", history)
        assert provider.get_chat_history("s1", "0") == history
        assert provider.get_chat_history("s1", "1") is None

    def test_corrupt_state_raises(self) -> None:
        provider = InMemoryFlowStatusProvider()
        provider._put("FlowStatus_s1", "{not json")
        with pytest.raises(FlowStatusError, match="sessionId=s1"):
            provider.get_execution_state("s1")

    def test_corrupt_history_raises(self) -> None:
        provider = InMemoryFlowStatusProvider()
        provider._put("ChatHistory_s1_0", '{"role": "user"}')
        with pytest.raises(FlowStatusError, match="chat history"):
            provider.get_chat_history("s1", "0")
