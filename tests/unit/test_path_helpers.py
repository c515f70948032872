"""Unit tests for path helper functions."""

from pathlib import Path

from omnibridge_deploy.paths import get_project_root, get_source_paths


class TestGetProjectRoot:
    """Test the get_project_root function."""

    def test_is_working_directory(self, tmp_path: Path, monkeypatch):
        """Test that the project root follows the working directory."""
        monkeypatch.chdir(tmp_path)

        assert get_project_root() == Path.cwd()

    def test_returns_absolute_path(self):
        assert get_project_root().is_absolute()


class TestGetSourcePaths:
    """Test the get_source_paths function."""

    def test_returns_tuple_of_three_paths(self):
        """Test that function returns build, flats and precompiled directories."""
        result = get_source_paths()

        assert isinstance(result, tuple)
        assert len(result) == 3
        assert all(isinstance(p, Path) for p in result)

    def test_directory_names(self, tmp_path: Path):
        build_dir, flats_dir, precompiled_dir = get_source_paths(tmp_path)

        assert build_dir == tmp_path / "build" / "contracts"
        assert flats_dir == tmp_path / "flats"
        assert precompiled_dir == tmp_path / "precompiled"

    def test_accepts_string_root(self, tmp_path: Path):
        """Test that a string project root is accepted."""
        build_dir, _, _ = get_source_paths(str(tmp_path))

        assert build_dir == tmp_path / "build" / "contracts"

    def test_relative_root_made_absolute(self):
        """Test that a relative project root is converted to absolute."""
        build_dir, flats_dir, _ = get_source_paths("relative/project")

        assert build_dir.is_absolute()
        assert flats_dir.is_absolute()
