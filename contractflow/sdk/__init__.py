"""SDK for extracting and laying out contract execution flows."""

from contractflow.sdk.flow_cache import FlowAggregator
from contractflow.sdk.flow_extractor import (
    FlowBuilder,
    extract_flow,
    split_function_bodies,
)
from contractflow.sdk.graph_layout import (
    compute_leaf_counts,
    compute_levels,
    layout_flow,
    layout_graph,
    position_nodes,
)

__all__ = [
    "FlowAggregator",
    "FlowBuilder",
    "extract_flow",
    "split_function_bodies",
    "compute_leaf_counts",
    "compute_levels",
    "layout_flow",
    "layout_graph",
    "position_nodes",
]
