"""Tests for flowgate._context."""

from __future__ import annotations

import asyncio

import pytest

from flowgate._context import (
    FlowContext,
    current_session_id,
    flow_session,
    get_flow_context,
    get_flow_context_value,
    set_flow_context_value,
)


class TestFlowContext:
    def test_generates_session_id(self) -> None:
        assert len(FlowContext().session_id) == 32

    def test_fork_copies_metadata(self) -> None:
        parent = FlowContext(session_id="sid", flow_name="parent", metadata={"a": [1]})
        child = parent.fork("child")
        child.get_value("a").append(2)
        assert child.session_id == "sid"
        assert child.flow_name == "child"
        assert parent.get_value("a") == [1]

    def test_delete_missing_raises(self) -> None:
        with pytest.raises(KeyError):
            FlowContext().delete_value("nope")


class TestFlowSession:
    def test_sets_and_restores(self) -> None:
        assert get_flow_context() is None
        with flow_session("contact", session_id="s1") as ctx:
            assert current_session_id() == "s1"
            assert ctx.flow_name == "contact"
        assert get_flow_context() is None

    def test_nested_session_keeps_session_id(self) -> None:
        with flow_session("parent") as outer:
            with flow_session("child") as inner:
                assert inner.session_id == outer.session_id
                assert inner.flow_name == "child"
            assert get_flow_context() is outer

    def test_restores_on_exception(self) -> None:
        with pytest.raises(ValueError, match="boom"):
            with flow_session("f"):
                raise ValueError("boom")
        assert get_flow_context() is None

    def test_isolated_between_tasks(self) -> None:
        async def run(name: str) -> str | None:
            with flow_session(name, session_id=name):
                await asyncio.sleep(0)
                return current_session_id()

        async def main() -> list[str | None]:
            return list(await asyncio.gather(run("a"), run("b")))

        assert asyncio.run(main()) == ["a", "b"]


class TestValueHelpers:
    def test_default_outside_session(self) -> None:
        assert get_flow_context_value("k", "fallback") == "fallback"

    def test_set_creates_context(self) -> None:
        set_flow_context_value("k", "v")
        assert get_flow_context_value("k") == "v"
        assert current_session_id() is not None
