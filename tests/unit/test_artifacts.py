"""Unit tests for compiled artifact loading."""

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from omnibridge_deploy.artifacts import load_artifact, load_artifacts, parse_artifact
from omnibridge_deploy.constants import REQUIRED_CONTRACTS
from omnibridge_deploy.exceptions import ArtifactNotFoundError, DeploymentError


class TestParseArtifact:
    """Test parse_artifact()."""

    def test_extracts_fields(self, sample_artifact_json: Dict[str, Any]):
        artifact = parse_artifact(sample_artifact_json)

        assert artifact.contract_name == "TokenFactory"
        assert artifact.bytecode.startswith("0x")
        assert artifact.source_path.endswith("TokenFactory.sol")
        assert artifact.compiler_version == "0.7.5+commit.eb77ed08.Emscripten.clang"
        assert json.loads(artifact.metadata)["settings"]["optimizer"]["runs"] == 125
        assert artifact.abi[0]["type"] == "constructor"

    def test_metadata_is_optional(self, sample_artifact_json: Dict[str, Any]):
        del sample_artifact_json["metadata"]

        assert parse_artifact(sample_artifact_json).metadata is None

    def test_empty_metadata_is_none(self, sample_artifact_json: Dict[str, Any]):
        sample_artifact_json["metadata"] = ""

        assert parse_artifact(sample_artifact_json).metadata is None

    def test_missing_required_field(self, sample_artifact_json: Dict[str, Any]):
        del sample_artifact_json["sourcePath"]

        with pytest.raises(KeyError):
            parse_artifact(sample_artifact_json)


class TestLoadArtifact:
    """Test load_artifact() and load_artifacts()."""

    def test_loads_by_name(self, build_dir: Path):
        artifact = load_artifact("ForeignOmnibridge", build_dir)

        assert artifact.contract_name == "ForeignOmnibridge"

    def test_missing_artifact(self, tmp_path: Path):
        with pytest.raises(ArtifactNotFoundError):
            load_artifact("TokenFactory", tmp_path)

    def test_incomplete_artifact(self, tmp_path: Path):
        """Test that an artifact without bytecode is reported as unusable."""
        (tmp_path / "TokenFactory.json").write_text(json.dumps({"contractName": "TokenFactory", "abi": []}))

        with pytest.raises(ArtifactNotFoundError, match="bytecode"):
            load_artifact("TokenFactory", tmp_path)

    def test_truncated_artifact(self, tmp_path: Path):
        """Test that a corrupt artifact file is reported as a deployment error."""
        (tmp_path / "TokenFactory.json").write_text("{not json")

        with pytest.raises(DeploymentError, match="not valid JSON"):
            load_artifact("TokenFactory", tmp_path)

    def test_loads_all_required(self, build_dir: Path):
        artifacts = load_artifacts(build_dir)

        assert set(artifacts) == set(REQUIRED_CONTRACTS)

    def test_loads_subset(self, build_dir: Path):
        artifacts = load_artifacts(build_dir, ["EternalStorageProxy"])

        assert list(artifacts) == ["EternalStorageProxy"]

    def test_defaults_to_build_contracts(self, tmp_path: Path, build_dir: Path, monkeypatch):
        """Test that ./build/contracts is used when no directory is given."""
        target = tmp_path / "build" / "contracts"
        target.mkdir(parents=True)
        (target / "TokenFactory.json").write_text((build_dir / "TokenFactory.json").read_text())
        monkeypatch.chdir(tmp_path)

        assert load_artifact("TokenFactory").contract_name == "TokenFactory"
