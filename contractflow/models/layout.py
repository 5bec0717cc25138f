"""Data model for the computed graph layout.

The layout is a separate positioning map keyed by node id; the flow graph it
was computed from is never modified.
"""

from pydantic import BaseModel, Field

from contractflow.config import DEFAULT_ROOT_X, DEFAULT_VERTICAL_SPACING
from contractflow.models.flow_graph import NodeKind


class NodeInterval(BaseModel):
    """horizontal span [left, right) reserved for a node's subtree."""

    model_config = {"frozen": True}

    left: float
    right: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def midpoint(self) -> float:
        return (self.left + self.right) / 2

    def overlaps(self, other: "NodeInterval") -> bool:
        return self.left < other.right and other.left < self.right


class GraphLayout(BaseModel):
    """Per-node level and horizontal position.

    Nodes missing from `level` or `x` were unreachable from the contract
    root (or there was no root); renderers place them at level 0 and the
    reference x.
    """

    level: dict[str, int] = Field(default_factory=dict)
    x: dict[str, float] = Field(default_factory=dict)
    intervals: dict[str, NodeInterval] = Field(default_factory=dict)  # before centering offset
    leaf_count: dict[str, int] = Field(default_factory=dict)

    root_x: float = DEFAULT_ROOT_X
    vertical_spacing: float = DEFAULT_VERTICAL_SPACING

    def level_for(self, node_id: str) -> int:
        return self.level.get(node_id, 0)

    def x_for(self, node_id: str) -> float:
        return self.x.get(node_id, self.root_x)

    def y_for(self, node_id: str) -> float:
        return self.level_for(node_id) * self.vertical_spacing

    def is_empty(self) -> bool:
        return not self.level and not self.x


class PositionedNode(BaseModel):
    """a flow node with renderable pixel coordinates."""

    id: str
    type: NodeKind
    label: str
    x: float
    y: float
