"""Compiled artifact loading for omnibridge-deploy."""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

from .constants import REQUIRED_CONTRACTS
from .exceptions import ArtifactNotFoundError
from .paths import get_source_paths
from .types import CompiledArtifact


def parse_artifact(data: Dict[str, Any]) -> CompiledArtifact:
    """
    Build a CompiledArtifact from a Truffle artifact dictionary.

    Args:
        data: Decoded artifact JSON

    Returns:
        CompiledArtifact with canonical field names

    Raises:
        KeyError: If a required field (contractName, abi, bytecode,
            sourcePath, compiler.version) is missing
    """
    # metadata is optional: precompiled legacy artifacts may ship without it
    metadata = data.get("metadata")
    if metadata == "":
        metadata = None

    return CompiledArtifact(
        contract_name=data["contractName"],
        abi=data["abi"],
        bytecode=data["bytecode"],
        source_path=data["sourcePath"],
        compiler_version=data["compiler"]["version"],
        metadata=metadata,
    )


def load_artifact(
    contract_name: str, build_dir: Optional[Union[Path, str]] = None
) -> CompiledArtifact:
    """
    Load a compiled artifact by contract name.

    Args:
        contract_name: Contract name, e.g. "TokenFactory"
        build_dir: Directory containing <contract_name>.json
                   (defaults to ./build/contracts)

    Returns:
        CompiledArtifact

    Raises:
        ArtifactNotFoundError: If the artifact file does not exist or is incomplete
    """
    if build_dir is None:
        build_dir = get_source_paths()[0]

    artifact_path = Path(build_dir) / f"{contract_name}.json"
    if not artifact_path.exists():
        raise ArtifactNotFoundError(
            f"Artifact for '{contract_name}' not found at {artifact_path}. "
            "Compile the contracts first."
        )

    try:
        with open(artifact_path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ArtifactNotFoundError(f"Artifact {artifact_path} is not valid JSON: {e}") from e

    try:
        return parse_artifact(data)
    except KeyError as e:
        raise ArtifactNotFoundError(
            f"Artifact {artifact_path} is missing required field {e}"
        ) from e


def load_artifacts(
    build_dir: Optional[Union[Path, str]] = None,
    contract_names: Iterable[str] = REQUIRED_CONTRACTS,
) -> Dict[str, CompiledArtifact]:
    """
    Load every artifact the deployment needs.

    Returns:
        Dictionary mapping contract name -> CompiledArtifact
    """
    return {name: load_artifact(name, build_dir) for name in contract_names}
