"""Compiled contract artifact as consumed by the flow extractor.

The compiler emits more than this (bytecode, source, compiler version, ...);
only the contract name and the ABI function names matter here, so unknown
keys are ignored rather than rejected.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)


class ArtifactLoadError(Exception):
    """Exception raised when an artifact file cannot be read."""
    pass


class AbiInput(BaseModel):
    """a typed function parameter."""

    model_config = {"extra": "ignore"}

    name: str
    type: str


class AbiFunction(BaseModel):
    """a callable entry point of the contract."""

    model_config = {"extra": "ignore"}

    name: str | None = None  # unnamed entry is the constructor/fallback
    inputs: list[AbiInput] = Field(default_factory=list)


class ContractArtifact(BaseModel):
    """compiler output: contract metadata plus its function interface."""

    model_config = {"extra": "ignore", "populate_by_name": True}

    contract_name: str | None = Field(default=None, alias="contractName")
    abi: list[AbiFunction] = Field(default_factory=list)

    def function_names(self) -> list[str | None]:
        return [fn.name for fn in self.abi]


def coerce_artifact(obj: Any) -> ContractArtifact | None:
    """Turn raw compiler output into a ContractArtifact without raising.

    A dict that fails validation as a whole keeps its contract name (when it
    is a string) and every ABI entry in its position. An entry that does not
    validate keeps only its name (None unless it is a string).

    Args:
        obj: None, a ContractArtifact, or the compiler's JSON as a dict.

    Returns:
        ContractArtifact, or None when there is no usable artifact.
    """
    if obj is None or isinstance(obj, ContractArtifact):
        return obj
    if not isinstance(obj, dict):
        logger.warning("ignoring artifact of unsupported type %s", type(obj).__name__)
        return None

    try:
        return ContractArtifact.model_validate(obj)
    except ValidationError as exc:
        logger.warning("artifact failed validation (%d errors), keeping valid parts", exc.error_count())

    name = obj.get("contractName")
    if not isinstance(name, str):
        name = None

    raw_abi = obj.get("abi")
    if not isinstance(raw_abi, list):
        raw_abi = []

    abi = [_salvage_abi_entry(idx, entry) for idx, entry in enumerate(raw_abi)]

    return ContractArtifact(contract_name=name, abi=abi)


def _salvage_abi_entry(idx: int, entry: Any) -> AbiFunction:
    """Validate one ABI entry, falling back to its bare name.

    Every entry is kept so function positions match the ABI.
    """
    try:
        return AbiFunction.model_validate(entry)
    except ValidationError:
        pass

    name = entry.get("name") if isinstance(entry, dict) else None
    if not isinstance(name, str):
        name = None
    logger.warning("abi entry at index %d is malformed, keeping it as %r without inputs", idx, name)
    return AbiFunction(name=name)


def load_artifact(path: Path | str) -> ContractArtifact | None:
    """Load a compiler artifact from a JSON file.

    Raises:
        ArtifactLoadError: if the file is missing or is not valid JSON.
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = json.load(f)
    except OSError as e:
        raise ArtifactLoadError(f"Failed to read artifact {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ArtifactLoadError(f"Artifact {path} is not valid JSON: {e}") from e

    return coerce_artifact(data)
