"""Shared fixtures for contractflow tests."""

import json
from pathlib import Path

import pytest

from contractflow.models.artifact import ContractArtifact

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def vault_artifact() -> ContractArtifact:
    with open(FIXTURES / "vault.json") as f:
        return ContractArtifact.model_validate(json.load(f))


@pytest.fixture
def vault_source() -> str:
    return (FIXTURES / "vault.cash").read_text()


@pytest.fixture
def make_artifact():
    """Factory for artifacts with one input-less ABI entry per name."""

    def _make(*names: str | None, contract_name: str | None = "Test") -> ContractArtifact:
        return ContractArtifact.model_validate({
            "contractName": contract_name,
            "abi": [{"name": n, "inputs": []} if n is not None else {"inputs": []} for n in names],
        })

    return _make
