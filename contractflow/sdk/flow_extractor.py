"""Extract a contract's execution flow from its ABI and source text.

Usage:

    from contractflow.sdk.flow_extractor import extract_flow
    flow = extract_flow(artifact, source_code)
    for step in flow.ordered_steps:
        print(step.order, "  " * step.depth, step.label)

The scan is lexical: each function body is searched left to right for
`if (...) {`, `else if (...) {`, `else {` and `require(...);`. Anything else
is ignored, and no input makes the extractor raise.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable

from contractflow.models.artifact import coerce_artifact
from contractflow.models.flow_graph import (
    ContractFlow,
    ExecutionStep,
    FlowEdge,
    FlowNode,
    NodeKind,
)
from contractflow.utils.identifiers import (
    CONTRACT_NODE_ID,
    condition_node_id,
    default_result_id,
    edge_id,
    function_node_id,
    root_edge_id,
    step_id,
    terminal_node_id,
)

logger = logging.getLogger(__name__)

DEFAULT_CONTRACT_LABEL = "Contract"
DEFAULT_FUNCTION_LABEL = "Constructor/Fallback"
ELSE_LABEL = "Fallback Path"
SUCCESS_LABEL = "Success"
FAILURE_LABEL = "Failure"
VALIDATION_PREFIX = "Validation: "

_FUNCTION_SPLIT = re.compile(r"\bfunction\s+")
_FUNCTION_NAME = re.compile(r"^(\w+)")

# alternatives are tried in this order at each position; the first that
# matches decides the construct
_CONSTRUCT = re.compile(
    r"(?P<if>if\s*\((?P<if_expr>.*?)\)\s*\{)"
    r"|(?P<elseif>else\s*if\s*\((?P<elseif_expr>.*?)\)\s*\{)"
    r"|(?P<else>else\s*\{)"
    r"|(?P<require>require\s*\((?P<require_expr>.*?)\)\s*;)",
    re.DOTALL,
)


def split_function_bodies(source_code: str | None) -> dict[str, str]:
    """Map function name -> the source text following `function <name>`.

    Each segment runs up to the next `function` keyword. A later function
    with the same name replaces an earlier one.
    """
    bodies: dict[str, str] = {}
    if not source_code:
        return bodies

    for part in _FUNCTION_SPLIT.split(source_code)[1:]:
        match = _FUNCTION_NAME.match(part)
        if match:
            bodies[match.group(1)] = part
    return bodies


def classify_require(expr: str) -> tuple[NodeKind, str]:
    """Kind and label of the terminal for `require(expr);`."""
    if expr == "true":
        return NodeKind.success, SUCCESS_LABEL
    if expr == "false":
        return NodeKind.failure, FAILURE_LABEL
    return NodeKind.validation, f"{VALIDATION_PREFIX}{expr}"


@dataclass
class FunctionScope:
    """Scan state for one ABI function."""

    index: int
    function_id: str
    current_parent: str
    last_condition: str | None = None
    current_depth: int = 1
    condition_count: int = 0
    terminal_count: int = 0
    _counter: int = 0

    def next_id(self, make: Callable[[int, int], str]) -> str:
        """Allocate the next per-function node id."""
        node_id = make(self.index, self._counter)
        self._counter += 1
        return node_id


@dataclass
class FlowBuilder:
    """Accumulates nodes, edges and steps for one extraction run.

    Created fresh per call so repeated extractions share no state.
    """

    nodes: list[FlowNode] = field(default_factory=list)
    edges: list[FlowEdge] = field(default_factory=list)
    steps: list[ExecutionStep] = field(default_factory=list)
    _order: int = 1

    def next_order(self) -> int:
        order = self._order
        self._order += 1
        return order

    def add_node(self, node_id: str, kind: NodeKind, label: str, depth: int) -> FlowNode:
        """Add a node and record it as the next execution step."""
        node = FlowNode(id=node_id, type=kind, label=label)
        self.nodes.append(node)
        order = self.next_order()
        self.steps.append(ExecutionStep(
            id=step_id(order),
            order=order,
            depth=depth,
            type=kind,
            label=label,
        ))
        return node

    def add_edge(self, source: str, target: str, eid: str | None = None) -> FlowEdge:
        edge = FlowEdge(id=eid or edge_id(source, target), source=source, target=target)
        self.edges.append(edge)
        return edge

    def open_function(self, index: int, name: str | None) -> FunctionScope:
        """Add the function node under the root and start its scan scope."""
        fid = function_node_id(index)
        self.add_node(fid, NodeKind.function, name or DEFAULT_FUNCTION_LABEL, depth=1)
        self.add_edge(CONTRACT_NODE_ID, fid, root_edge_id(fid))
        return FunctionScope(index=index, function_id=fid, current_parent=fid)

    def build(self) -> ContractFlow:
        return ContractFlow(
            nodes=tuple(self.nodes),
            edges=tuple(self.edges),
            ordered_steps=tuple(self.steps),
        )


def _add_condition(builder: FlowBuilder, scope: FunctionScope, source: str, label: str) -> None:
    cid = scope.next_id(condition_node_id)
    builder.add_node(cid, NodeKind.condition, label, depth=scope.current_depth)
    builder.add_edge(source, cid)
    scope.last_condition = cid
    scope.current_parent = cid
    scope.condition_count += 1


def scan_function_body(builder: FlowBuilder, scope: FunctionScope, body: str) -> None:
    """Add the branch and terminal nodes found in one function body.

    `else if` and `else` hang off the most recent condition, so an
    if / else if / else chain comes out as a linear sequence.
    """
    for match in _CONSTRUCT.finditer(body):
        if match.group("if") is not None:
            scope.current_depth += 1
            _add_condition(builder, scope, scope.current_parent, match.group("if_expr").strip())

        elif match.group("elseif") is not None or match.group("else") is not None:
            if scope.last_condition is None:
                logger.debug(
                    "skipping unmatched else in %s at offset %d",
                    scope.function_id,
                    match.start(),
                )
                continue
            # only the exact spelling `else if` carries its expression;
            # `elseif(` or `else  if` is labelled like a bare else
            if match.group("elseif") is not None and match.group(0).startswith("else if"):
                label = match.group("elseif_expr").strip()
            else:
                label = ELSE_LABEL
            _add_condition(builder, scope, scope.last_condition, label)

        else:
            kind, label = classify_require(match.group("require_expr").strip())
            tid = scope.next_id(terminal_node_id)
            builder.add_node(tid, kind, label, depth=scope.current_depth + 1)
            builder.add_edge(scope.current_parent, tid)
            scope.terminal_count += 1

    if scope.condition_count == 0 and scope.terminal_count == 0:
        rid = default_result_id(scope.index)
        builder.add_node(rid, NodeKind.success, SUCCESS_LABEL, depth=scope.current_depth + 1)
        builder.add_edge(scope.function_id, rid)


def extract_flow(artifact: Any, source_code: str | None) -> ContractFlow:
    """Build the flow graph and execution steps for a compiled contract.

    Args:
        artifact: ContractArtifact, raw compiler JSON dict, or None.
        source_code: the contract source the artifact was compiled from.

    Returns:
        ContractFlow with nodes, edges and ordered_steps. Empty when there
        is no artifact.
    """
    contract = coerce_artifact(artifact)
    builder = FlowBuilder()
    if contract is None:
        return builder.build()

    builder.add_node(
        CONTRACT_NODE_ID,
        NodeKind.contract,
        contract.contract_name or DEFAULT_CONTRACT_LABEL,
        depth=0,
    )

    bodies = split_function_bodies(source_code)

    for index, fn in enumerate(contract.abi):
        scope = builder.open_function(index, fn.name)
        body = bodies.get(fn.name, "") if fn.name else ""
        scan_function_body(builder, scope, body)
        logger.debug(
            "function %s (%s): %d conditions, %d terminals",
            scope.function_id,
            fn.name,
            scope.condition_count,
            scope.terminal_count,
        )

    return builder.build()
