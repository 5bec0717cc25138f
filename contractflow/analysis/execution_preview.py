"""Text rendering of the deterministic execution preview.

The preview is the linear view of a flow: one line per step, indented by
depth, in the order the extractor encountered each construct.
"""

from typing import Sequence

from contractflow.models.flow_graph import ContractFlow, ExecutionStep
from contractflow.models.layout import GraphLayout

# a security score at or above this counts as structurally sound
SECURE_THRESHOLD = 0.9

EMPTY_PREVIEW = "No structural data available. Compile a contract first."


def structure_status(security_score: float) -> str:
    if security_score >= SECURE_THRESHOLD:
        return "Structure Validated"
    return "Structural Risk Detected"


def format_step(step: ExecutionStep, order_width: int = 2) -> str:
    """One preview line: right-aligned order, depth indentation, label."""
    indent = "  " * step.depth
    return f"{step.order:>{order_width}}  {indent}{step.label}"


def format_preview(steps: Sequence[ExecutionStep], security_score: float = 1.0) -> str:
    """Format the ordered steps for human-readable output."""
    lines = []
    lines.append("=" * 60)
    lines.append("DETERMINISTIC EXECUTION PREVIEW")
    lines.append("=" * 60)
    lines.append(structure_status(security_score))
    lines.append("-" * 40)

    if not steps:
        lines.append(EMPTY_PREVIEW)
        return "\n".join(lines)

    order_width = max(2, len(str(max(s.order for s in steps))))
    for step in steps:
        lines.append(format_step(step, order_width))

    return "\n".join(lines)


def flow_to_dict(flow: ContractFlow, layout: GraphLayout | None = None) -> dict:
    """Convert a flow (and optionally its layout) to a JSON-serializable dict."""
    d = flow.model_dump(mode="json", by_alias=True)
    if layout is not None:
        d["positions"] = {
            node.id: {"x": layout.x_for(node.id), "y": layout.y_for(node.id)}
            for node in flow.nodes
        }
    return d
