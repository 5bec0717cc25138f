"""Deterministic id helpers for flow nodes, edges and steps.

Ids depend only on the function's ABI index and per-function counters, so two
extractions of the same input produce identical ids.
"""

CONTRACT_NODE_ID = "contract"


def function_node_id(index: int) -> str:
    """Node id for the ABI function at `index`."""
    return f"function-{index}"


def condition_node_id(index: int, counter: int) -> str:
    """Node id for an if / else if / else branch inside function `index`."""
    return f"cond-{index}-{counter}"


def terminal_node_id(index: int, counter: int) -> str:
    """Node id for a require(...) terminal inside function `index`."""
    return f"term-{index}-{counter}"


def default_result_id(index: int) -> str:
    """Node id for the implicit success of a function without branches."""
    return f"res-{index}-default"


def root_edge_id(function_id: str) -> str:
    """Edge id from the contract root to a function node."""
    return f"edge-c-{function_id}"


def edge_id(source: str, target: str) -> str:
    return f"edge-{source}-{target}"


def step_id(order: int) -> str:
    return f"step-{order}"
