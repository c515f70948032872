"""Block explorer source verification for deployed contracts."""

import json
import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Union

import requests

from .constants import (
    COMPILER_BUILD_TAG,
    CONTRACT_CODE_NOT_FOUND,
    ETHERSCAN_URL_MARKER,
    FLAT_SUFFIX,
    LEGACY_CONTRACT_NAME,
    LEGACY_VERIFICATION_DEFAULTS,
    REQUEST_STATUS_OK,
    VERIFY_BACKOFF_FACTOR,
    VERIFY_BACKOFF_INITIAL,
    VERIFY_BACKOFF_MAX,
    VERIFY_MAX_ATTEMPTS,
    VERIFY_REQUEST_TIMEOUT,
)
from .exceptions import ArtifactMetadataError, FlattenedSourceNotFoundError, VerificationError
from .paths import get_source_paths
from .types import (
    CompiledArtifact,
    DeployedContract,
    ExplorerDialect,
    VerificationOutcome,
    VerificationParams,
    VerificationRequest,
)

logger = logging.getLogger(__name__)


def select_dialect(api_url: Optional[str]) -> ExplorerDialect:
    """
    Determine the explorer API flavour from its URL.

    Anything that is not recognisably Etherscan, including no URL at all,
    is treated as Blockscout.
    """
    if api_url and ETHERSCAN_URL_MARKER in api_url:
        return ExplorerDialect.ETHERSCAN
    return ExplorerDialect.BLOCKSCOUT


def flattened_source_path(
    artifact: CompiledArtifact,
    flats_dir: Optional[Union[Path, str]] = None,
    precompiled_dir: Optional[Union[Path, str]] = None,
) -> Path:
    """
    Locate the single-file source submitted for an artifact.

    The legacy token is looked up by contract name in the precompiled
    directory; everything else by the file name of its source path.
    """
    _, default_flats, default_precompiled = get_source_paths()

    if artifact.contract_name == LEGACY_CONTRACT_NAME:
        return Path(precompiled_dir or default_precompiled) / f"{LEGACY_CONTRACT_NAME}{FLAT_SUFFIX}"

    file_name = artifact.source_path.replace("\\", "/").split("/")[-1]
    flat_name = file_name.replace(".sol", FLAT_SUFFIX, 1)
    return Path(flats_dir or default_flats) / flat_name


def load_flattened_source(
    artifact: CompiledArtifact,
    flats_dir: Optional[Union[Path, str]] = None,
    precompiled_dir: Optional[Union[Path, str]] = None,
) -> str:
    """
    Read the flattened source for an artifact.

    Raises:
        FlattenedSourceNotFoundError: If the file cannot be read
    """
    path = flattened_source_path(artifact, flats_dir, precompiled_dir)
    try:
        return path.read_text()
    except OSError as e:
        raise FlattenedSourceNotFoundError(
            f"Flattened source for {artifact.contract_name} not readable at {path}: {e}"
        ) from e


def _compiler_settings(artifact: CompiledArtifact) -> Tuple[bool, int, str]:
    try:
        settings = json.loads(artifact.metadata)["settings"]
        optimizer = settings["optimizer"]
        return bool(optimizer["enabled"]), int(optimizer["runs"]), settings.get("evmVersion", "default")
    except (TypeError, ValueError, KeyError) as e:
        if artifact.contract_name == LEGACY_CONTRACT_NAME:
            logger.info(
                "No usable metadata for %s, using fixed legacy compiler settings",
                artifact.contract_name,
            )
            return (
                LEGACY_VERIFICATION_DEFAULTS["optimization_used"],
                LEGACY_VERIFICATION_DEFAULTS["runs"],
                LEGACY_VERIFICATION_DEFAULTS["evm_version"],
            )
        raise ArtifactMetadataError(
            f"Cannot read compiler settings from metadata of {artifact.contract_name}: {e}"
        ) from e


def build_verification_params(request: VerificationRequest) -> VerificationParams:
    """
    Derive dialect-neutral verification parameters from a request.

    Raises:
        ArtifactMetadataError: If metadata is unusable and the contract is not the legacy token
    """
    artifact = request.artifact
    optimization_used, runs, evm_version = _compiler_settings(artifact)

    return VerificationParams(
        address=request.address,
        contract_name=artifact.contract_name,
        constructor_arguments=request.constructor_arguments,
        compiler=f"v{artifact.compiler_version.replace(COMPILER_BUILD_TAG, '')}",
        optimization_used=optimization_used,
        runs=runs,
        evm_version=evm_version,
        api_url=request.api_url,
        api_key=request.api_key,
    )


def request_fields(
    dialect: ExplorerDialect, params: VerificationParams, source: str
) -> Dict[str, Any]:
    """
    Map verification parameters onto the form fields an explorer expects.

    Args:
        dialect: Explorer API flavour
        params: Verification parameters
        source: Flattened contract source

    Returns:
        Form fields for the verification POST
    """
    match dialect:
        case ExplorerDialect.ETHERSCAN:
            return {
                "apikey": params.api_key,
                "module": "contract",
                "action": "verifysourcecode",
                "contractaddress": params.address,
                "sourceCode": source,
                "codeformat": "solidity-single-file",
                "contractname": params.contract_name,
                "compilerversion": params.compiler,
                "optimizationUsed": 1 if params.optimization_used else 0,
                "runs": params.runs,
                # Etherscan's own spelling
                "constructorArguements": params.constructor_arguments,
                "evmversion": params.evm_version,
            }
        case ExplorerDialect.BLOCKSCOUT:
            return {
                "module": "contract",
                "action": "verify",
                "addressHash": params.address,
                "contractSourceCode": source,
                "name": params.contract_name,
                "compilerVersion": params.compiler,
                "optimization": "true" if params.optimization_used else "false",
                "optimizationRuns": params.runs,
                "constructorArguments": params.constructor_arguments,
                "evmVersion": params.evm_version,
            }
        case _:
            raise ValueError(f"Unknown explorer dialect: {dialect!r}")


def classify_response(body: Dict[str, Any]) -> VerificationOutcome:
    """Interpret an explorer's JSON answer to a verification submission."""
    if body.get("message") == REQUEST_STATUS_OK:
        return VerificationOutcome.VERIFIED

    result = body.get("result")
    if isinstance(result, str) and CONTRACT_CODE_NOT_FOUND in result:
        return VerificationOutcome.NOT_INDEXED

    return VerificationOutcome.REJECTED


def submit_verification(
    dialect: ExplorerDialect,
    params: VerificationParams,
    source: str,
    timeout: float = VERIFY_REQUEST_TIMEOUT,
) -> VerificationOutcome:
    """
    Send one verification request and classify the answer.

    Network errors and malformed answers count as REJECTED so that the caller
    retries them like any other refusal. An unusable API URL is a
    configuration problem and is raised as VerificationError instead.
    """
    try:
        response = requests.post(
            params.api_url,
            data=request_fields(dialect, params, source),
            timeout=timeout,
        )
    except (
        requests.exceptions.MissingSchema,
        requests.exceptions.InvalidSchema,
        requests.exceptions.InvalidURL,
    ) as e:
        raise VerificationError(f"Invalid explorer API URL {params.api_url!r}: {e}") from e
    except requests.RequestException as e:
        logger.error("Verification request for %s failed: %s", params.address, e)
        return VerificationOutcome.REJECTED

    try:
        body = response.json()
    except ValueError:
        logger.error(
            "Explorer answered with non-JSON body (status %d) for %s",
            response.status_code,
            params.address,
        )
        return VerificationOutcome.REJECTED

    if not isinstance(body, dict):
        logger.warning("Unexpected explorer response for %s: %r", params.address, body)
        return VerificationOutcome.REJECTED

    outcome = classify_response(body)
    match outcome:
        case VerificationOutcome.VERIFIED:
            logger.info("%s verified in %s", params.address, dialect.value)
        case VerificationOutcome.NOT_INDEXED:
            logger.info("%s not yet indexed by %s", params.address, dialect.value)
        case VerificationOutcome.REJECTED:
            logger.warning(
                "Verification of %s rejected by %s: %s",
                params.address,
                dialect.value,
                body.get("result", body),
            )
    return outcome


def backoff_delays(
    attempts: int,
    initial: float = VERIFY_BACKOFF_INITIAL,
    factor: float = VERIFY_BACKOFF_FACTOR,
    maximum: float = VERIFY_BACKOFF_MAX,
) -> list[float]:
    """Pauses between consecutive attempts: one fewer than the number of attempts."""
    return [min(initial * factor**i, maximum) for i in range(max(attempts - 1, 0))]


def verify(
    artifact: CompiledArtifact,
    address: str,
    constructor_arguments: str,
    api_url: Optional[str],
    api_key: Optional[str] = None,
    *,
    max_attempts: int = VERIFY_MAX_ATTEMPTS,
    sleep: Optional[Callable[[float], None]] = None,
    timeout: float = VERIFY_REQUEST_TIMEOUT,
    flats_dir: Optional[Union[Path, str]] = None,
    precompiled_dir: Optional[Union[Path, str]] = None,
) -> bool:
    """
    Verify a deployed contract's source on a block explorer.

    Submissions are retried with exponential backoff until the explorer
    accepts one or max_attempts is reached. Running out of attempts is
    reported as a warning and returned as False, never raised.

    Args:
        artifact: Compiled artifact of the deployed contract
        address: Deployed contract address
        constructor_arguments: ABI-encoded constructor arguments, hex without 0x
        api_url: Explorer API endpoint
        api_key: Explorer API key (Etherscan only)
        max_attempts: Total number of submissions before giving up
        sleep: Function used to wait between attempts (defaults to time.sleep)
        timeout: Per-request HTTP timeout in seconds
        flats_dir: Directory of flattened sources (defaults to ./flats)
        precompiled_dir: Directory of precompiled legacy sources (defaults to ./precompiled)

    Returns:
        True if the explorer confirmed the source, False otherwise

    Raises:
        FlattenedSourceNotFoundError: If the flattened source cannot be read
        ArtifactMetadataError: If compiler settings cannot be determined
        VerificationError: If the explorer API URL is unusable
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")
    sleep = sleep or time.sleep

    logger.info("Verifying contract %s", address)
    dialect = select_dialect(api_url)
    request = VerificationRequest(
        artifact=artifact,
        address=address,
        constructor_arguments=constructor_arguments,
        api_url=api_url,
        api_key=api_key,
    )

    source = load_flattened_source(artifact, flats_dir, precompiled_dir)
    params = build_verification_params(request)

    delays = backoff_delays(max_attempts)
    for attempt in range(max_attempts):
        if submit_verification(dialect, params, source, timeout) is VerificationOutcome.VERIFIED:
            return True
        if attempt < len(delays):
            sleep(delays[attempt])

    logger.warning("It was not possible to verify %s in %s", address, dialect.value)
    return False


def verify_deployment(
    deployed: Iterable[Tuple[CompiledArtifact, DeployedContract]],
    api_url: Optional[str],
    api_key: Optional[str] = None,
    **kwargs: Any,
) -> Dict[str, bool]:
    """
    Verify every contract created by a deployment run.

    Args:
        deployed: (artifact, deployed contract) pairs, e.g. DeploymentPlanner.deployed
        api_url: Explorer API endpoint
        api_key: Explorer API key
        **kwargs: Passed through to verify()

    Returns:
        Dictionary mapping address -> verified flag
    """
    return {
        contract.address: verify(
            artifact,
            contract.address,
            contract.constructor_arguments,
            api_url,
            api_key,
            **kwargs,
        )
        for artifact, contract in deployed
    }
