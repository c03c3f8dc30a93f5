"""Dependency ordering and visualization for flow steps."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Literal, overload

from flowgate._errors import CircularDependencyError

if TYPE_CHECKING:
    from flowgate._types import Flow, FlowStep


def sort_steps(steps: Sequence[FlowStep]) -> list[FlowStep]:
    """Return *steps* in an order where each step follows its providers.

    An edge runs from step A to step B when B requires a variable A provides.
    A step that both requires and provides the same variable does not depend
    on itself. Independent steps keep their declaration order: each round
    emits the first remaining step with no unsorted provider.

    Raises
    ------
    CircularDependencyError
        If the remaining steps all depend on one another.
    """
    remaining = list(steps)
    ordered: list[FlowStep] = []

    while remaining:
        for index, candidate in enumerate(remaining):
            if not any(
                other is not candidate and candidate.depends_on(other)
                for other in remaining
            ):
                break
        else:
            raise CircularDependencyError([s.goal for s in remaining])
        ordered.append(candidate)
        del remaining[index]

    return ordered


def _label(step: FlowStep) -> str:
    text = step.goal or getattr(step, "flow_name", "") or "<unnamed>"
    return text.replace('"', "#quot;")


@overload
def generate_dag(
    flow: Flow,
    *,
    format: Literal["mermaid"] = ...,
    output: None = ...,
) -> str: ...


@overload
def generate_dag(
    flow: Flow,
    *,
    format: Literal["mermaid"] = ...,
    output: str,
) -> None: ...


def generate_dag(
    flow: Flow,
    *,
    format: Literal["mermaid"] = "mermaid",
    output: str | None = None,
) -> str | None:
    """Generate a dependency diagram for a flow.

    Parameters
    ----------
    flow:
        The flow to render. Steps become nodes ``s0``, ``s1``... in
        declaration order, labelled with their goal.
    format:
        Output format. Currently only ``"mermaid"`` is supported.
    output:
        Optional file path. When provided the diagram is written to this path
        and the function returns ``None``. Otherwise the diagram string is
        returned.

    Raises
    ------
    ValueError
        If *format* is not supported.
    """
    if format != "mermaid":
        raise ValueError(f"Unsupported format: {format!r}")

    lines: list[str] = ["graph TD"]
    lines.extend(
        f'    s{i}["{_label(step)}"]' for i, step in enumerate(flow.steps)
    )

    # Each edge is labelled with the variables flowing along it.
    edges: list[tuple[int, int, str]] = []
    for src, provider in enumerate(flow.steps):
        for dst, consumer in enumerate(flow.steps):
            if src == dst:
                continue
            shared = [v for v in consumer.requires if v in provider.provides]
            if shared:
                edges.append((src, dst, ", ".join(shared)))

    edges.sort()
    for src, dst, variables in edges:
        lines.append(f"    s{src} -->|{variables}| s{dst}")

    diagram = "\n".join(lines) + "\n"

    if output is not None:
        Path(output).write_text(diagram)
        return None

    return diagram
