"""flowgate: validate, order and route multi-step LLM flows."""

from flowgate._config import FlowOrchestratorConfig, configure, get_backend, reset
from flowgate._context import (
    FlowContext,
    current_session_id,
    flow_session,
    get_flow_context,
    get_flow_context_value,
    set_flow_context_value,
)
from flowgate._dag import generate_dag, sort_steps
from flowgate._errors import (
    CircularDependencyError,
    FlowgateError,
    FlowStatusError,
    FlowValidationError,
    ServiceNotRegisteredError,
)
from flowgate._registry import FlowRegistry
from flowgate._serializer import (
    flow_from_dict,
    load_flow_from_json,
    load_flow_from_yaml,
    step_from_dict,
)
from flowgate._status import (
    ExecutionState,
    FlowStatusProvider,
    InMemoryFlowStatusProvider,
    StepExecutionState,
    StepStatus,
)
from flowgate._types import (
    CompletionType,
    Flow,
    FlowStep,
    FunctionView,
    ModelSettings,
    ParameterView,
    ReferenceFlowStep,
)
from flowgate._validator import FlowValidator

__all__ = [
    "CircularDependencyError",
    "CompletionType",
    "ExecutionState",
    "Flow",
    "FlowContext",
    "FlowOrchestratorConfig",
    "FlowRegistry",
    "FlowStatusError",
    "FlowStatusProvider",
    "FlowStep",
    "FlowValidationError",
    "FlowValidator",
    "FlowgateError",
    "FunctionView",
    "InMemoryFlowStatusProvider",
    "ModelSettings",
    "ParameterView",
    "ReferenceFlowStep",
    "ServiceNotRegisteredError",
    "StepExecutionState",
    "StepStatus",
    "configure",
    "current_session_id",
    "flow_from_dict",
    "flow_session",
    "generate_dag",
    "get_backend",
    "get_flow_context",
    "get_flow_context_value",
    "load_flow_from_json",
    "load_flow_from_yaml",
    "reset",
    "set_flow_context_value",
    "sort_steps",
    "step_from_dict",
]
