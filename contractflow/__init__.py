"""contractflow - execution-flow extraction and layout for compiled contracts."""

from contractflow.models.artifact import (
    ArtifactLoadError,
    ContractArtifact,
    load_artifact,
)
from contractflow.models.flow_graph import (
    ContractFlow,
    ExecutionStep,
    FlowEdge,
    FlowNode,
    NodeKind,
)
from contractflow.models.layout import GraphLayout
from contractflow.config import LayoutSettings
from contractflow.sdk.flow_cache import FlowAggregator
from contractflow.sdk.flow_extractor import extract_flow
from contractflow.sdk.graph_layout import layout_graph, position_nodes

__all__ = [
    # Artifacts
    "ArtifactLoadError",
    "ContractArtifact",
    "load_artifact",
    # Flow graph
    "ContractFlow",
    "ExecutionStep",
    "FlowEdge",
    "FlowNode",
    "NodeKind",
    # Layout
    "GraphLayout",
    "LayoutSettings",
    # High-level APIs
    "FlowAggregator",
    "extract_flow",
    "layout_graph",
    "position_nodes",
]
