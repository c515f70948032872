"""Path management utilities for omnibridge-deploy."""

from pathlib import Path
from typing import Optional, Union


def get_project_root() -> Path:
    """
    Get the directory the build output and flattened sources live in.

    Returns:
        Current working directory
    """
    return Path.cwd()


def get_source_paths(
    project_root: Optional[Union[Path, str]] = None,
) -> tuple[Path, Path, Path]:
    """
    Get the build artifact and flattened source directories.

    Args:
        project_root: Custom project directory (defaults to the working directory)

    Returns:
        Tuple of (build_contracts_dir, flats_dir, precompiled_dir)
    """
    if project_root is None:
        project_root = get_project_root()
    else:
        project_root = Path(project_root).absolute()

    build_dir = project_root / "build" / "contracts"
    flats_dir = project_root / "flats"
    precompiled_dir = project_root / "precompiled"

    return (build_dir, flats_dir, precompiled_dir)


def get_results_path(project_root: Optional[Union[Path, str]] = None) -> Path:
    """Default location of the deployment results file."""
    if project_root is None:
        project_root = get_project_root()
    return Path(project_root) / "bridgeDeploymentResults.json"
