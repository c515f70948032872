"""Command-line entry point for omnibridge-deploy."""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

from .artifacts import load_artifact, load_artifacts
from .chain import Web3ChainClient
from .config import BridgeConfig, load_config
from .constants import FOREIGN_NETWORK, VERIFY_MAX_ATTEMPTS
from .deployer import ContractDeployer
from .exceptions import ConfigurationError, DeploymentError
from .paths import get_results_path, get_source_paths
from .planner import DeploymentPlanner, required_artifacts
from .results import save_deployment_result
from .sequencer import NonceSequencer
from .verifier import verify, verify_deployment

logger = logging.getLogger("omnibridge_deploy")


def build_chain_client(config: BridgeConfig) -> Web3ChainClient:
    return Web3ChainClient.from_rpc_url(
        config.rpc_url,
        config.private_key,
        config.gas_price_gwei,
        gas_limit_extra=config.gas_limit_extra,
        timeout=config.tx_timeout,
    )


def cmd_deploy(args: argparse.Namespace) -> int:
    config = load_config()
    build_dir, flats_dir, precompiled_dir = get_source_paths(args.project_root)

    artifacts = load_artifacts(build_dir, required_artifacts(config))
    client = build_chain_client(config)

    sequencer = NonceSequencer.start(client, client.address)
    planner = DeploymentPlanner(
        ContractDeployer(client, FOREIGN_NETWORK),
        sequencer,
        client.chain_id(),
        config,
        artifacts,
    )
    result = planner.run()

    results_path = Path(args.results) if args.results else get_results_path(args.project_root)
    save_deployment_result(result, results_path)
    logger.info("Contracts Deployment have been saved to %s", results_path)

    if args.skip_verify or not config.explorer_url:
        return 0

    verified = verify_deployment(
        planner.deployed,
        config.explorer_url,
        config.explorer_api_key,
        max_attempts=args.max_attempts,
        flats_dir=flats_dir,
        precompiled_dir=precompiled_dir,
    )
    unverified = [address for address, ok in verified.items() if not ok]
    if unverified:
        logger.warning("%d contract(s) left unverified: %s", len(unverified), ", ".join(unverified))
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    build_dir, flats_dir, precompiled_dir = get_source_paths(args.project_root)
    api_url = args.api_url or os.environ.get("FOREIGN_EXPLORER_URL")
    api_key = args.api_key or os.environ.get("FOREIGN_EXPLORER_API_KEY")
    if not api_url:
        raise ConfigurationError("Explorer API URL is required: pass --api-url or set FOREIGN_EXPLORER_URL")

    artifact = load_artifact(args.contract, build_dir)
    ok = verify(
        artifact,
        args.address,
        args.constructor_args,
        api_url,
        api_key,
        max_attempts=args.max_attempts,
        flats_dir=flats_dir,
        precompiled_dir=precompiled_dir,
    )
    return 0 if ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="omnibridge-deploy",
        description="Deploy the foreign side of an Omnibridge mediator and verify it",
    )
    parser.add_argument("--env-file", default=None, help="Path to .env file (default: ./.env)")
    parser.add_argument("--project-root", default=None, help="Directory holding build/, flats/ and precompiled/")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=VERIFY_MAX_ATTEMPTS,
        help="Verification submissions per contract before giving up",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_deploy = sub.add_parser("deploy", help="Deploy the mediator, token factory and gas limit manager")
    p_deploy.add_argument("--results", default=None, help="Where to write the deployment results JSON")
    p_deploy.add_argument("--skip-verify", action="store_true", help="Do not verify on the explorer")
    p_deploy.set_defaults(func=cmd_deploy)

    p_verify = sub.add_parser("verify", help="Verify one already deployed contract")
    p_verify.add_argument("--contract", required=True, help="Contract name of the artifact")
    p_verify.add_argument("--address", required=True, help="Deployed contract address")
    p_verify.add_argument("--constructor-args", default="", help="ABI-encoded constructor arguments (hex, no 0x)")
    p_verify.add_argument("--api-url", default=None, help="Explorer API URL (default: $FOREIGN_EXPLORER_URL)")
    p_verify.add_argument("--api-key", default=None, help="Explorer API key (default: $FOREIGN_EXPLORER_API_KEY)")
    p_verify.set_defaults(func=cmd_verify)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    load_dotenv(args.env_file or find_dotenv(usecwd=True))

    try:
        return args.func(args)
    except DeploymentError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
