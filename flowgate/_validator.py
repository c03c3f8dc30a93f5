"""Structural validation of flows before execution."""

from __future__ import annotations

from flowgate._config import get_backend
from flowgate._errors import CircularDependencyError, FlowValidationError
from flowgate._types import Flow, ReferenceFlowStep


class FlowValidator:
    """Rejects malformed flows before any execution resources are committed.

    Checks run in a fixed order and the first failure is raised as a
    :class:`~flowgate.FlowValidationError`, so identical flows always produce
    identical errors.
    """

    def validate(self, flow: Flow) -> None:
        with get_backend().span("validate", flow.name, step_count=len(flow.steps)):
            self._validate_goal(flow)
            self._validate_non_empty(flow)
            self._validate_partial_order(flow)
            self._validate_reference_steps(flow)
            self._validate_starting_messages(flow)
            self._validate_passthrough(flow)

    @staticmethod
    def _validate_goal(flow: Flow) -> None:
        if flow.goal is None or not flow.goal.strip():
            raise FlowValidationError(f"Flow '{flow.name}' must have a goal.")

    @staticmethod
    def _validate_non_empty(flow: Flow) -> None:
        if not flow.steps:
            raise FlowValidationError("Flow must contain at least one flow step.")

    @staticmethod
    def _validate_partial_order(flow: Flow) -> None:
        try:
            flow.sort_steps()
        except CircularDependencyError as exc:
            raise FlowValidationError("Flow steps must be a partial order set.") from exc

    @staticmethod
    def _validate_reference_steps(flow: Flow) -> None:
        for step in flow.steps:
            if not isinstance(step, ReferenceFlowStep):
                continue
            if not step.flow_name or not step.flow_name.strip():
                raise FlowValidationError(
                    "Reference flow step must name the flow it references."
                )
            if step.requires:
                raise FlowValidationError(
                    "Reference flow step cannot have any direct requirements."
                )
            if step.provides:
                raise FlowValidationError(
                    "Reference flow step cannot have any direct provides."
                )
            if step.plugins:
                raise FlowValidationError(
                    "Reference flow step cannot have any direct plugins."
                )

    @staticmethod
    def _validate_starting_messages(flow: Flow) -> None:
        for step in flow.steps:
            if step.completion_type.requires_starting_message and not step.starting_message:
                raise FlowValidationError(
                    f"Missing starting message for step={step.goal} "
                    f"with completion type={step.completion_type.value}"
                )

    @staticmethod
    def _validate_passthrough(flow: Flow) -> None:
        for step in flow.steps:
            if step.passthrough and not step.completion_type.allows_passthrough:
                raise FlowValidationError(
                    f"step={step.goal} with completion type={step.completion_type.value} "
                    "cannot have passthrough variables as that is only applicable "
                    "for the AtLeastOnce or ZeroOrMore completion types"
                )
