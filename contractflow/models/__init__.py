"""Core data models for contractflow."""

from contractflow.models.artifact import (
    AbiFunction,
    AbiInput,
    ArtifactLoadError,
    ContractArtifact,
    coerce_artifact,
    load_artifact,
)
from contractflow.models.flow_graph import (
    TERMINAL_KINDS,
    ContractFlow,
    ExecutionStep,
    FlowEdge,
    FlowNode,
    NodeKind,
)
from contractflow.models.layout import (
    GraphLayout,
    NodeInterval,
    PositionedNode,
)

__all__ = [
    # Compiler artifact
    "AbiFunction",
    "AbiInput",
    "ArtifactLoadError",
    "ContractArtifact",
    "coerce_artifact",
    "load_artifact",
    # Flow graph
    "TERMINAL_KINDS",
    "ContractFlow",
    "ExecutionStep",
    "FlowEdge",
    "FlowNode",
    "NodeKind",
    # Layout
    "GraphLayout",
    "NodeInterval",
    "PositionedNode",
]
