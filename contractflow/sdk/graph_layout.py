"""Subtree-proportional layout for contract flow graphs.

Each node gets a vertical level (longest path from the contract root) and a
horizontal interval whose width is proportional to the number of leaves
beneath it. Children split their parent's interval left to right in edge
order, so sibling subtrees never overlap.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterable, Sequence

from contractflow.config import LayoutSettings
from contractflow.models.flow_graph import ContractFlow, FlowEdge, FlowNode, NodeKind
from contractflow.models.layout import GraphLayout, NodeInterval, PositionedNode

logger = logging.getLogger(__name__)


def find_root(nodes: Iterable[FlowNode]) -> FlowNode | None:
    """First node of kind contract, if any."""
    for node in nodes:
        if node.type == NodeKind.contract:
            return node
    return None


def build_adjacency(edges: Iterable[FlowEdge]) -> dict[str, list[str]]:
    """Forward adjacency map, children kept in edge order."""
    children: dict[str, list[str]] = {}
    for edge in edges:
        children.setdefault(edge.source, []).append(edge.target)
    return children


def compute_levels(root_id: str, edges: Sequence[FlowEdge], max_passes: int | None = None) -> dict[str, int]:
    """Longest-path level of every node reachable from the root.

    Relaxes all edges until a full pass changes nothing. On an acyclic graph
    that takes at most one pass per node plus one; `max_passes` bounds the
    loop so a cyclic input stops instead of spinning.
    """
    levels: dict[str, int] = {root_id: 0}
    if max_passes is None:
        max_passes = len(edges) + 2

    changed = True
    passes = 0
    while changed:
        if passes >= max_passes:
            logger.warning("level relaxation did not settle after %d passes; graph has a cycle", passes)
            break
        changed = False
        passes += 1
        for edge in edges:
            if edge.source not in levels:
                continue
            target_level = levels[edge.source] + 1
            if levels.get(edge.target, -1) < target_level:
                levels[edge.target] = target_level
                changed = True

    return levels


def compute_leaf_counts(root_id: str, children: dict[str, list[str]]) -> dict[str, int]:
    """Number of leaves under each node reachable from the root.

    Post-order over the adjacency map; a node without children counts as
    one leaf. An edge back into a node still being counted is ignored.
    """
    counts: dict[str, int] = {}
    in_progress: set[str] = set()
    stack: list[tuple[str, bool]] = [(root_id, False)]

    while stack:
        node_id, expanded = stack.pop()
        if expanded:
            kids = [c for c in children.get(node_id, []) if c in counts]
            counts[node_id] = sum(counts[c] for c in kids) if kids else 1
            in_progress.discard(node_id)
            continue
        if node_id in counts or node_id in in_progress:
            continue
        in_progress.add(node_id)
        stack.append((node_id, True))
        for child in reversed(children.get(node_id, [])):
            if child not in counts and child not in in_progress:
                stack.append((child, False))

    return counts


def assign_intervals(
    root_id: str,
    children: dict[str, list[str]],
    leaf_count: dict[str, int],
    leaf_width: float,
) -> dict[str, NodeInterval]:
    """Top-down partition of horizontal space, starting at 0 for the root."""
    intervals: dict[str, NodeInterval] = {}
    queue: deque[tuple[str, float, float]] = deque()
    queue.append((root_id, 0.0, leaf_count.get(root_id, 1) * leaf_width))

    while queue:
        node_id, left, right = queue.popleft()
        intervals[node_id] = NodeInterval(left=left, right=right)

        cursor = left
        for child in children.get(node_id, []):
            width = leaf_count.get(child, 1) * leaf_width
            # a node reached twice keeps its first placement
            if child not in intervals:
                queue.append((child, cursor, cursor + width))
            cursor += width

    return intervals


def layout_graph(
    nodes: Sequence[FlowNode],
    edges: Sequence[FlowEdge],
    settings: LayoutSettings | None = None,
) -> GraphLayout:
    """Compute level and x for every node reachable from the contract root.

    Args:
        nodes: flow nodes; the first contract node is the root.
        edges: directed edges between them.
        settings: layout constants, defaults when None.

    Returns:
        GraphLayout. Empty when there is no contract node.
    """
    settings = settings or LayoutSettings()
    root = find_root(nodes)
    if root is None:
        return GraphLayout(root_x=settings.root_x, vertical_spacing=settings.vertical_spacing)

    levels = compute_levels(root.id, edges)
    children = build_adjacency(edges)
    leaf_count = compute_leaf_counts(root.id, children)
    intervals = assign_intervals(root.id, children, leaf_count, settings.leaf_width)

    total_width = leaf_count[root.id] * settings.leaf_width
    offset = settings.root_x - total_width / 2
    xs = {node_id: interval.midpoint + offset for node_id, interval in intervals.items()}

    logger.debug(
        "laid out %d of %d nodes, %d leaves, width %.1f",
        len(xs),
        len(nodes),
        leaf_count[root.id],
        total_width,
    )

    return GraphLayout(
        level=levels,
        x=xs,
        intervals=intervals,
        leaf_count=leaf_count,
        root_x=settings.root_x,
        vertical_spacing=settings.vertical_spacing,
    )


def layout_flow(flow: ContractFlow, settings: LayoutSettings | None = None) -> GraphLayout:
    return layout_graph(flow.nodes, flow.edges, settings)


def position_nodes(nodes: Sequence[FlowNode], layout: GraphLayout) -> list[PositionedNode]:
    """Pixel coordinates for each node; unplaced nodes get the defaults."""
    return [
        PositionedNode(
            id=node.id,
            type=node.type,
            label=node.label,
            x=layout.x_for(node.id),
            y=layout.y_for(node.id),
        )
        for node in nodes
    ]
