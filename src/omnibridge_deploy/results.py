"""Deployment result persistence for omnibridge-deploy."""

import json
from pathlib import Path

from .types import DeploymentResult


def save_deployment_result(result: DeploymentResult, path: Path) -> None:
    """
    Write a deployment result to disk as JSON.

    Creates parent directories if they don't exist.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(result.to_dict(), f, indent=2)


def load_deployment_result(path: Path) -> DeploymentResult:
    """
    Read a deployment result written by save_deployment_result().

    Raises:
        FileNotFoundError: If the file does not exist
        KeyError: If a mandatory entry is missing
    """
    with open(path) as f:
        data = json.load(f)

    router = data.get("wethOmnibridgeRouter")
    return DeploymentResult(
        mediator_address=data["foreignBridgeMediator"]["address"],
        token_factory_address=data["tokenFactory"]["address"],
        gas_limit_manager_address=data["gasLimitManager"]["address"],
        helper_router_address=router["address"] if router else None,
    )
