"""Build flows from YAML / JSON configuration.

A flow document looks like::

    name: collect_contact
    goal: Collect the user's email and phone number
    steps:
      - goal: Ask for the user's email address
        plugins: [EmailPlugin]
        provides: [email]
      - goal: Confirm the details
        requires: [email]
        completionType: AtLeastOnce
        passthrough: [attempts]
      - flowName: send_summary

A step carrying ``flowName`` becomes a :class:`ReferenceFlowStep`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import yaml

from flowgate._errors import FlowValidationError
from flowgate._types import (
    DEFAULT_TRANSITION_MESSAGE,
    CompletionType,
    Flow,
    FlowStep,
    ReferenceFlowStep,
)


def _completion_type(value: Any, goal: str) -> CompletionType:
    if value is None:
        return CompletionType.ONCE
    try:
        return CompletionType(value)
    except ValueError:
        allowed = ", ".join(c.value for c in CompletionType)
        raise FlowValidationError(
            f"Unknown completion type {value!r} for step={goal}; expected one of {allowed}"
        ) from None


def _text(
    data: Mapping[str, Any], key: str, where: str, default: str | None = None
) -> str | None:
    value = data.get(key, default)
    if value is not None and not isinstance(value, str):
        raise FlowValidationError(
            f"'{key}' of {where} must be a string, got {type(value).__name__}"
        )
    return value


def _name_list(data: Mapping[str, Any], key: str, where: str) -> list[str] | str | None:
    value = data.get(key)
    if value is None or isinstance(value, str):
        return value
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise FlowValidationError(f"'{key}' of {where} must be a list of strings")
    return value


def step_from_dict(data: Mapping[str, Any]) -> FlowStep:
    """Build a single step from its configuration mapping.

    Raises :class:`FlowValidationError` naming the key and the step goal when
    a value has the wrong type.
    """
    if not isinstance(data, Mapping):
        raise FlowValidationError(f"Flow step must be a mapping, got {type(data).__name__}")

    goal = _text(data, "goal", "flow step") or ""
    where = f"step={goal}"
    common: dict[str, Any] = {
        "requires": _name_list(data, "requires", where) or (),
        "provides": _name_list(data, "provides", where) or (),
        "passthrough": _name_list(data, "passthrough", where) or (),
        "completion_type": _completion_type(data.get("completionType"), goal),
        "starting_message": _text(data, "startingMessage", where),
        "transition_message": _text(
            data, "transitionMessage", where, DEFAULT_TRANSITION_MESSAGE
        ),
        "plugins": _name_list(data, "plugins", where),
    }
    if "flowName" in data:
        flow_name = _text(data, "flowName", where) or ""
        return ReferenceFlowStep(goal=goal, flow_name=flow_name, **common)
    return FlowStep(goal=goal, **common)


def flow_from_dict(data: Mapping[str, Any]) -> Flow:
    """Build a :class:`Flow` from a parsed configuration mapping.

    Only the shape and value types are checked here; run
    :class:`FlowValidator` before use.
    """
    if not isinstance(data, Mapping):
        raise FlowValidationError(f"Flow definition must be a mapping, got {type(data).__name__}")
    steps = data.get("steps") or []
    if not isinstance(steps, list):
        raise FlowValidationError("Flow 'steps' must be a list")
    return Flow(
        name=_text(data, "name", "flow") or "",
        goal=_text(data, "goal", "flow") or "",
        steps=tuple(step_from_dict(s) for s in steps),
    )


def load_flow_from_yaml(text: str) -> Flow:
    return flow_from_dict(yaml.safe_load(text))


def load_flow_from_json(text: str) -> Flow:
    return flow_from_dict(json.loads(text))
