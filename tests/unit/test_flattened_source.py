"""Unit tests for locating flattened contract sources."""

from dataclasses import replace
from pathlib import Path
from typing import Dict

import pytest

from omnibridge_deploy.exceptions import FlattenedSourceNotFoundError
from omnibridge_deploy.types import CompiledArtifact
from omnibridge_deploy.verifier import flattened_source_path, load_flattened_source


class TestFlattenedSourcePath:
    """Test flattened_source_path()."""

    def test_derives_name_from_source_path(
        self, artifacts: Dict[str, CompiledArtifact], flats_dir: Path, precompiled_dir: Path
    ):
        """Test that <Name>.sol maps to flats/<Name>_flat.sol."""
        path = flattened_source_path(artifacts["TokenFactory"], flats_dir, precompiled_dir)

        assert path == flats_dir / "TokenFactory_flat.sol"

    def test_legacy_contract_uses_precompiled_dir(
        self, artifacts: Dict[str, CompiledArtifact], flats_dir: Path, precompiled_dir: Path
    ):
        """Test that the legacy token is looked up by name in precompiled/."""
        path = flattened_source_path(artifacts["PermittableToken"], flats_dir, precompiled_dir)

        assert path == precompiled_dir / "PermittableToken_flat.sol"

    def test_file_name_differs_from_contract_name(
        self, artifacts: Dict[str, CompiledArtifact], flats_dir: Path
    ):
        """Test that the source file name, not the contract name, is used."""
        artifact = replace(artifacts["TokenFactory"], source_path="/x/y/Factories.sol")

        assert flattened_source_path(artifact, flats_dir).name == "Factories_flat.sol"

    def test_windows_source_path(self, artifacts: Dict[str, CompiledArtifact], flats_dir: Path):
        artifact = replace(artifacts["TokenFactory"], source_path="C:\\project\\contracts\\TokenFactory.sol")

        assert flattened_source_path(artifact, flats_dir) == flats_dir / "TokenFactory_flat.sol"

    def test_defaults_to_working_directory(
        self, artifacts: Dict[str, CompiledArtifact], tmp_path: Path, monkeypatch
    ):
        """Test that flats/ and precompiled/ default to the working directory."""
        monkeypatch.chdir(tmp_path)

        cwd = Path.cwd()
        assert flattened_source_path(artifacts["TokenFactory"]) == cwd / "flats" / "TokenFactory_flat.sol"
        assert flattened_source_path(artifacts["PermittableToken"]) == (
            cwd / "precompiled" / "PermittableToken_flat.sol"
        )


class TestLoadFlattenedSource:
    """Test load_flattened_source()."""

    def test_reads_source(self, artifacts: Dict[str, CompiledArtifact], flats_dir: Path):
        source = load_flattened_source(artifacts["ForeignOmnibridge"], flats_dir)

        assert "contract ForeignOmnibridge" in source

    def test_reads_legacy_source(
        self, artifacts: Dict[str, CompiledArtifact], flats_dir: Path, precompiled_dir: Path
    ):
        source = load_flattened_source(artifacts["PermittableToken"], flats_dir, precompiled_dir)

        assert "pragma solidity 0.4.24" in source

    def test_missing_file_raises(self, artifacts: Dict[str, CompiledArtifact], tmp_path: Path):
        """Test that a missing flat file is reported, not swallowed."""
        with pytest.raises(FlattenedSourceNotFoundError):
            load_flattened_source(artifacts["TokenFactory"], tmp_path)

    def test_missing_file_is_file_not_found(self, artifacts: Dict[str, CompiledArtifact], tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_flattened_source(artifacts["PermittableToken"], tmp_path, tmp_path)
