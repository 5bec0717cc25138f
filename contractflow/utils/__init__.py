"""Utility functions for contractflow."""

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

__all__ = [
    "CONTRACT_NODE_ID",
    "condition_node_id",
    "default_result_id",
    "edge_id",
    "function_node_id",
    "root_edge_id",
    "step_id",
    "terminal_node_id",
]
