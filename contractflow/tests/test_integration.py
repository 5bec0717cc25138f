"""Integration tests: caching, preview output, CLI and HTTP routes."""

import json
from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient

from contractflow.analysis.analyze_contract import main
from contractflow.analysis.execution_preview import (
    EMPTY_PREVIEW,
    flow_to_dict,
    format_preview,
)
from contractflow.config import LayoutSettings
from contractflow.sdk.flow_cache import FlowAggregator
from contractflow.sdk.flow_extractor import extract_flow
from contractflow.sdk.graph_layout import layout_flow
from server.app import app
from server.flow_routes import get_aggregator


class TestFlowAggregator:
    """Memoization of extraction and layout."""

    def test_reuses_flow_for_same_input(self, vault_artifact, vault_source):
        flows = FlowAggregator()
        first = flows.get_flow(vault_artifact, vault_source)
        second = flows.get_flow(vault_artifact, vault_source)
        assert first is second
        assert flows.stats() == {"hits": 1, "misses": 1}

    def test_equal_dict_input_hits_cache(self, vault_artifact, vault_source):
        """structural key: an equal artifact built separately still hits."""
        flows = FlowAggregator()
        flows.get_flow(vault_artifact, vault_source)
        flows.get_flow(vault_artifact.model_dump(by_alias=True), vault_source)
        assert flows.hits == 1

    def test_recomputes_on_change(self, vault_artifact, vault_source):
        flows = FlowAggregator()
        first = flows.get_flow(vault_artifact, vault_source)
        second = flows.get_flow(vault_artifact, vault_source + "\n// edited")
        assert first is not second
        assert flows.misses == 2

    def test_layout_cached_with_flow(self, vault_artifact, vault_source):
        flows = FlowAggregator()
        flow_a, layout_a = flows.get_layout(vault_artifact, vault_source)
        flow_b, layout_b = flows.get_layout(vault_artifact, vault_source)
        assert flow_a is flow_b
        assert layout_a is layout_b

    def test_layout_recomputed_for_new_settings(self, vault_artifact, vault_source):
        flows = FlowAggregator()
        _, default = flows.get_layout(vault_artifact, vault_source)
        _, wide = flows.get_layout(vault_artifact, vault_source, LayoutSettings(leaf_width=500))
        assert wide.intervals["contract"].width == 5 * 500
        assert default.intervals["contract"].width == 5 * 280

    def test_matches_direct_extraction(self, vault_artifact, vault_source):
        flows = FlowAggregator()
        assert flows.get_flow(vault_artifact, vault_source) == extract_flow(vault_artifact, vault_source)

    def test_clear(self, vault_artifact, vault_source):
        flows = FlowAggregator()
        first = flows.get_flow(vault_artifact, vault_source)
        flows.clear()
        assert flows.get_flow(vault_artifact, vault_source) is not first

    def test_none_artifact(self):
        flows = FlowAggregator()
        assert flows.get_flow(None, "").is_empty()
        assert flows.get_flow(None, "").is_empty()
        assert flows.hits == 1

    def test_concurrent_layouts_match_their_flow(self, vault_artifact, vault_source, make_artifact):
        """interleaved requests for two contracts never mix flows and layouts."""
        flows = FlowAggregator()
        inputs = [
            (vault_artifact, vault_source),
            (make_artifact("f"), "function f() { if (a) { require(true); } }"),
        ]
        expected = [layout_flow(extract_flow(*pair)) for pair in inputs]

        def request(i: int):
            pair = inputs[i % 2]
            return i % 2, flows.get_layout(*pair)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(request, range(200)))

        for which, (flow, layout) in results:
            assert flow == extract_flow(*inputs[which])
            assert layout == expected[which]
        assert flows.hits + flows.misses == 200


class TestExecutionPreview:
    """Text rendering of ordered steps."""

    def test_indents_by_depth(self):
        artifact = {"contractName": "Vault", "abi": [{"name": "spend", "inputs": []}]}
        flow = extract_flow(artifact, "function spend() { require(true); }")
        lines = format_preview(flow.ordered_steps).splitlines()

        assert lines[3] == "Structure Validated"
        assert lines[-3:] == [
            " 1  Vault",
            " 2    spend",
            " 3      Success",
        ]

    def test_low_score_flags_risk(self):
        text = format_preview([], security_score=0.5)
        assert text.splitlines()[3] == "Structural Risk Detected"
        assert text.endswith(EMPTY_PREVIEW)

    def test_flow_to_dict_with_positions(self, vault_artifact, vault_source):
        flow = extract_flow(vault_artifact, vault_source)
        data = flow_to_dict(flow, layout_flow(flow))
        assert len(data["orderedSteps"]) == 12
        assert data["positions"]["contract"] == {"x": 250.0, "y": 0.0}
        json.dumps(data)


class TestCli:
    """analyze_contract entry point."""

    def test_text_preview(self, fixtures_dir, capsys):
        code = main([str(fixtures_dir / "vault.json"), str(fixtures_dir / "vault.cash")])
        out = capsys.readouterr().out
        assert code == 0
        assert "Validation: checkSig(s, owner)" in out
        assert "Fallback Path" in out

    def test_json_output(self, fixtures_dir, capsys):
        code = main([str(fixtures_dir / "vault.json"), str(fixtures_dir / "vault.cash"), "--json"])
        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["nodes"][0]["label"] == "Vault"
        assert "res-2-default" in data["positions"]

    def test_missing_source(self, fixtures_dir, tmp_path, capsys):
        code = main([str(fixtures_dir / "vault.json"), str(tmp_path / "nope.cash")])
        assert code == 1
        assert "source file not found" in capsys.readouterr().err

    def test_bad_artifact(self, fixtures_dir, tmp_path, capsys):
        bad = tmp_path / "artifact.json"
        bad.write_text("not json")
        code = main([str(bad), str(fixtures_dir / "vault.cash")])
        assert code == 1
        assert capsys.readouterr().err.startswith("Error:")


class TestFlowRoutes:
    """HTTP surface over the engine."""

    @pytest.fixture
    def client(self):
        get_aggregator().clear()
        return TestClient(app)

    def test_health(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_extract(self, client, fixtures_dir, vault_source):
        artifact = json.loads((fixtures_dir / "vault.json").read_text())
        response = client.post("/api/flow", json={"artifact": artifact, "sourceCode": vault_source})
        assert response.status_code == 200
        body = response.json()
        assert [s["order"] for s in body["orderedSteps"]] == list(range(1, 13))
        assert body["nodes"][4]["label"] == "amount > 1000"

    def test_missing_artifact(self, client):
        response = client.post("/api/flow", json={"artifact": None, "sourceCode": ""})
        assert response.status_code == 200
        assert response.json() == {"nodes": [], "edges": [], "orderedSteps": []}

    def test_layout(self, client):
        payload = {
            "artifact": {"contractName": "Vault", "abi": [{"name": "spend", "inputs": []}]},
            "sourceCode": "function spend() { require(true); }",
        }
        response = client.post("/api/flow/layout", json=payload)
        assert response.status_code == 200
        positions = {p["id"]: (p["x"], p["y"]) for p in response.json()["positions"]}
        assert positions == {
            "contract": (250.0, 0.0),
            "function-0": (250.0, 160.0),
            "term-0-0": (250.0, 320.0),
        }

    def test_cache_counters(self, client):
        payload = {"artifact": {"contractName": "C", "abi": []}, "sourceCode": ""}
        client.post("/api/flow", json=payload)
        client.post("/api/flow", json=payload)
        stats = client.get("/api/flow/cache").json()
        assert stats["hits"] >= 1

    def test_invalid_artifact_rejected(self, client):
        response = client.post("/api/flow", json={"artifact": {"abi": "nope"}, "sourceCode": ""})
        assert response.status_code == 422
