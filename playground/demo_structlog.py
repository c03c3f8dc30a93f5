"""Demo: validate a flow, pick a chat backend, log through structlog.

Run this to see the flow session ID injected into structlog output.
Note: requires `structlog` to be installed (pip install 'flowgate[structlog]').
"""

from __future__ import annotations

from flowgate import (
    FlowValidator,
    FunctionView,
    ModelSettings,
    flow_session,
    generate_dag,
    load_flow_from_yaml,
)
from flowgate.contrib.structlog import flow_processor
from flowgate.services import (
    ChatCompletionService,
    OrderedAIServiceSelector,
    ServiceRegistry,
)

try:
    import structlog
except ImportError:
    print("This demo requires structlog: pip install structlog")
    raise SystemExit(1) from None

structlog.configure(
    processors=[
        flow_processor,
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.BoundLogger,
    logger_factory=structlog.PrintLoggerFactory(),
)

log = structlog.get_logger()

FLOW = """
name: order_pizza
goal: Take a pizza order
steps:
  - goal: Confirm the order
    requires: [toppings]
    provides: [confirmation]
  - goal: Ask which toppings the user wants
    provides: [toppings]
    completionType: AtLeastOnce
    passthrough: [toppings]
"""


class EchoChat(ChatCompletionService):
    def __init__(self, model_id: str) -> None:
        self._model_id = model_id

    @property
    def model_id(self) -> str | None:
        return self._model_id


if __name__ == "__main__":
    log.info("before session")

    flow = load_flow_from_yaml(FLOW)
    registry = ServiceRegistry()
    registry.register(ChatCompletionService, EchoChat("small-model"))
    registry.register(ChatCompletionService, EchoChat("large-model"), service_id="large")
    selector = OrderedAIServiceSelector()

    with flow_session(flow.name):
        FlowValidator().validate(flow)
        print(generate_dag(flow))
        for step in flow.sort_steps():
            function = FunctionView(
                name="run_step",
                plugin_name="Demo",
                model_settings=(ModelSettings(model_id="large-model"),),
            )
            service, settings = selector.select_ai_service(
                ChatCompletionService, registry, function
            )
            log.info("step ready", goal=step.goal, model=service.model_id)

    log.info("after session")
