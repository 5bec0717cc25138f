"""API routes for contract flow extraction and layout."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from contractflow.config import LayoutSettings
from contractflow.models.artifact import ContractArtifact
from contractflow.models.flow_graph import ContractFlow
from contractflow.models.layout import PositionedNode
from contractflow.sdk.flow_cache import FlowAggregator
from contractflow.sdk.graph_layout import position_nodes

router = APIRouter()

# one aggregator per process; repeated requests for the same contract reuse it
_flows = FlowAggregator(LayoutSettings.from_env())


class FlowRequest(BaseModel):
    """request body: compiler artifact plus the source it was built from."""

    model_config = {"populate_by_name": True}

    artifact: ContractArtifact | None = None
    source_code: str = Field(default="", alias="sourceCode")


class FlowLayoutResponse(BaseModel):
    """flow graph with pixel positions for each node."""

    flow: ContractFlow
    positions: list[PositionedNode]


def get_aggregator() -> FlowAggregator:
    return _flows


@router.post("/flow", response_model_by_alias=True)
def extract(request: FlowRequest) -> ContractFlow:
    """extract nodes, edges and ordered steps for a contract."""
    return _flows.get_flow(request.artifact, request.source_code)


@router.post("/flow/layout", response_model_by_alias=True)
def extract_with_layout(request: FlowRequest) -> FlowLayoutResponse:
    """extract the flow and lay it out for rendering."""
    flow, layout = _flows.get_layout(request.artifact, request.source_code)
    return FlowLayoutResponse(flow=flow, positions=position_nodes(flow.nodes, layout))


@router.get("/flow/cache")
def cache_stats() -> dict:
    """hit/miss counters of the flow cache."""
    return _flows.stats()
