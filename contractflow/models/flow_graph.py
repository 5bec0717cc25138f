"""Data model for an extracted contract execution flow.

One extraction run produces nodes, edges and the ordered step list together.
The result is frozen; a changed artifact or source means a fresh extraction.
"""

from enum import Enum

from pydantic import BaseModel, Field


class NodeKind(str, Enum):
    """Kinds of nodes in a contract flow graph."""

    contract = "contract"
    function = "function"
    condition = "condition"
    success = "success"
    failure = "failure"
    validation = "validation"


# kinds that end an execution path within a function
TERMINAL_KINDS = frozenset({NodeKind.success, NodeKind.failure, NodeKind.validation})


class FlowNode(BaseModel):
    """a node in the flow graph."""

    model_config = {"frozen": True}

    id: str
    type: NodeKind
    label: str


class FlowEdge(BaseModel):
    """a directed edge between two flow nodes."""

    model_config = {"frozen": True}

    id: str
    source: str
    target: str
    label: str | None = None


class ExecutionStep(BaseModel):
    """one entry of the linear execution preview."""

    model_config = {"frozen": True}

    id: str
    order: int = Field(ge=1)  # 1-based, contiguous within one extraction
    depth: int = Field(ge=0)  # contract 0, functions 1, nested constructs deeper
    type: NodeKind
    label: str


class ContractFlow(BaseModel):
    """The full result of one extraction pass."""

    model_config = {"frozen": True, "populate_by_name": True}

    nodes: tuple[FlowNode, ...] = ()
    edges: tuple[FlowEdge, ...] = ()
    ordered_steps: tuple[ExecutionStep, ...] = Field(default=(), alias="orderedSteps")

    @property
    def root(self) -> FlowNode | None:
        """The contract node, or None for an empty flow."""
        for node in self.nodes:
            if node.type == NodeKind.contract:
                return node
        return None

    def node(self, node_id: str) -> FlowNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def children(self, node_id: str) -> list[FlowNode]:
        """Direct successors of a node, in edge order."""
        by_id = {node.id: node for node in self.nodes}
        return [by_id[e.target] for e in self.edges if e.source == node_id and e.target in by_id]

    def is_empty(self) -> bool:
        return not self.nodes
