"""Memoizing accessor over extraction and layout.

Keeps the most recent result and recomputes only when the artifact, the
source text or the layout settings change. One aggregator may serve
concurrent requests; cache reads and updates happen under a lock.
"""

from __future__ import annotations

import hashlib
import logging
import threading
from typing import Any

from contractflow.config import LayoutSettings
from contractflow.models.artifact import ContractArtifact, coerce_artifact
from contractflow.models.flow_graph import ContractFlow
from contractflow.models.layout import GraphLayout
from contractflow.sdk.flow_extractor import extract_flow
from contractflow.sdk.graph_layout import layout_flow

logger = logging.getLogger(__name__)


def flow_cache_key(artifact: ContractArtifact | None, source_code: str | None) -> str:
    """Structural key of an extraction input."""
    digest = hashlib.sha256()
    digest.update(artifact.model_dump_json(by_alias=True).encode("utf-8") if artifact else b"null")
    digest.update(b"\x00")
    digest.update((source_code or "").encode("utf-8"))
    return digest.hexdigest()


class FlowAggregator:
    """Serve flows and layouts, reusing the last result for unchanged input.

    Usage:
        flows = FlowAggregator()
        flow = flows.get_flow(artifact, source_code)
        flow, layout = flows.get_layout(artifact, source_code)
    """

    def __init__(self, settings: LayoutSettings | None = None) -> None:
        self.settings = settings or LayoutSettings()
        self._lock = threading.Lock()
        self._flow_key: str | None = None
        self._flow: ContractFlow | None = None
        self._layout_key: tuple[str, LayoutSettings] | None = None
        self._layout: GraphLayout | None = None
        self.hits = 0
        self.misses = 0

    def _cached_flow(self, artifact: Any, source_code: str | None) -> tuple[str, ContractFlow]:
        # caller holds self._lock
        contract = coerce_artifact(artifact)
        key = flow_cache_key(contract, source_code)

        if self._flow is not None and key == self._flow_key:
            self.hits += 1
            return key, self._flow

        self.misses += 1
        logger.debug("flow cache miss (%s), extracting", key[:12])
        flow = extract_flow(contract, source_code)
        self._flow = flow
        self._flow_key = key
        return key, flow

    def get_flow(self, artifact: Any, source_code: str | None) -> ContractFlow:
        """Extraction result for the input, recomputed only when it changed."""
        with self._lock:
            _, flow = self._cached_flow(artifact, source_code)
        return flow

    def get_layout(
        self,
        artifact: Any,
        source_code: str | None,
        settings: LayoutSettings | None = None,
    ) -> tuple[ContractFlow, GraphLayout]:
        """Flow plus its layout; the layout is reused while both inputs hold."""
        settings = settings or self.settings
        with self._lock:
            flow_key, flow = self._cached_flow(artifact, source_code)
            key = (flow_key, settings)

            if self._layout is None or key != self._layout_key:
                logger.debug("layout cache miss, laying out %d nodes", len(flow.nodes))
                self._layout = layout_flow(flow, settings)
                self._layout_key = key
            layout = self._layout
        return flow, layout

    def clear(self) -> None:
        """Drop cached results (counters are kept)."""
        with self._lock:
            self._flow_key = None
            self._flow = None
            self._layout_key = None
            self._layout = None

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {"hits": self.hits, "misses": self.misses}

    def __repr__(self) -> str:
        return f"FlowAggregator(hits={self.hits}, misses={self.misses})"
