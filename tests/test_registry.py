"""Tests for flowgate._registry."""

from __future__ import annotations

import threading

import pytest

from flowgate._errors import FlowValidationError
from flowgate._registry import FlowRegistry
from flowgate._types import Flow, FlowStep, ReferenceFlowStep


def _flow(name: str = "f", goal: str = "do things", *steps: FlowStep) -> Flow:
    return Flow(name=name, goal=goal, steps=steps or (FlowStep("only step"),))


@pytest.fixture
def registry() -> FlowRegistry:
    return FlowRegistry()


class TestRegister:
    def test_basic(self, registry: FlowRegistry) -> None:
        registry.register(_flow())
        assert registry.get_flow("f").goal == "do things"

    def test_idempotent(self, registry: FlowRegistry) -> None:
        registry.register(_flow())
        registry.register(_flow())  # equal flow, no error
        assert registry.get_all_flow_names() == ["f"]

    def test_conflict_raises(self, registry: FlowRegistry) -> None:
        registry.register(_flow(goal="one"))
        with pytest.raises(ValueError, match="Conflicting"):
            registry.register(_flow(goal="two"))


class TestGetFlow:
    def test_missing_raises(self, registry: FlowRegistry) -> None:
        with pytest.raises(KeyError, match="not found"):
            registry.get_flow("missing")


class TestGetAllFlowNames:
    def test_empty(self, registry: FlowRegistry) -> None:
        assert registry.get_all_flow_names() == []

    def test_populated(self, registry: FlowRegistry) -> None:
        registry.register(_flow(name="x"))
        registry.register(_flow(name="y"))
        assert sorted(registry.get_all_flow_names()) == ["x", "y"]


class TestResolveReference:
    def test_resolves_registered_flow(self, registry: FlowRegistry) -> None:
        target = _flow(name="child")
        registry.register(target)
        assert registry.resolve_reference(ReferenceFlowStep(flow_name="child")) is target

    def test_unknown_reference_raises(self, registry: FlowRegistry) -> None:
        with pytest.raises(KeyError):
            registry.resolve_reference(ReferenceFlowStep(flow_name="ghost"))


class TestValidateFlow:
    def test_valid(self, registry: FlowRegistry) -> None:
        registry.register(_flow(name="child"))
        registry.register(
            _flow("parent", "goal", FlowStep("a"), ReferenceFlowStep(flow_name="child"))
        )
        registry.validate_flow("parent")  # no error

    def test_invalid_reference(self, registry: FlowRegistry) -> None:
        registry.register(_flow("parent", "goal", ReferenceFlowStep(flow_name="missing")))
        with pytest.raises(ValueError, match="unknown flow 'missing'"):
            registry.validate_flow("parent")

    def test_structural_errors_surface_first(self, registry: FlowRegistry) -> None:
        registry.register(Flow(name="blank", goal="  ", steps=(FlowStep("a"),)))
        with pytest.raises(FlowValidationError, match="must have a goal"):
            registry.validate_flow("blank")

    def test_missing_flow(self, registry: FlowRegistry) -> None:
        with pytest.raises(KeyError):
            registry.validate_flow("nope")


class TestClear:
    def test_clear(self, registry: FlowRegistry) -> None:
        registry.register(_flow())
        registry.clear()
        assert registry.get_all_flow_names() == []


class TestThreadSafety:
    def test_concurrent_registration(self, registry: FlowRegistry) -> None:
        errors: list[Exception] = []

        def register_flows(prefix: str) -> None:
            try:
                for i in range(50):
                    registry.register(_flow(name=f"{prefix}_{i}"))
            except Exception as exc:
                errors.append(exc)

        threads = [
            threading.Thread(target=register_flows, args=(f"t{t}",)) for t in range(4)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(registry.get_all_flow_names()) == 200
