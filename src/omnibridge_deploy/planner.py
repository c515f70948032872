"""Foreign-side Omnibridge deployment workflow."""

import logging
from enum import Enum
from typing import List, Mapping, Optional, Tuple

from .config import BridgeConfig
from .constants import (
    ETERNAL_STORAGE_PROXY,
    FOREIGN_OMNIBRIDGE,
    GAS_LIMIT_MANAGER,
    INITIAL_PROXY_VERSION,
    PERMITTABLE_TOKEN,
    TOKEN_FACTORY,
    WETH_OMNIBRIDGE_ROUTER,
)
from .deployer import ContractDeployer
from .exceptions import ArtifactNotFoundError, DeploymentError
from .sequencer import NonceSequencer
from .types import (
    CompiledArtifact,
    DeployedContract,
    DeploymentResult,
    FactoryToDeploy,
    ImageToDeploy,
    PreconfiguredFactory,
    PreconfiguredImage,
    TokenFactorySource,
    TokenImageSource,
)

logger = logging.getLogger(__name__)


class PlannerState(Enum):
    """
    Progress of a deployment run.

    States are only ever entered in declaration order; HELPER_DEPLOYED is
    skipped when no WETH address is configured. FAILED is terminal and may
    follow any state before COMPLETE.
    """

    PENDING = "pending"
    STORAGE_DEPLOYED = "storage-deployed"
    TOKEN_INFRA_RESOLVED = "token-infra-resolved"
    GAS_MANAGER_DEPLOYED = "gas-manager-deployed"
    IMPLEMENTATION_DEPLOYED = "implementation-deployed"
    LINKED = "linked"
    HELPER_DEPLOYED = "helper-deployed"
    COMPLETE = "complete"
    FAILED = "failed"


def resolve_token_factory_source(config: BridgeConfig) -> TokenFactorySource:
    """
    Decide how the token factory is obtained for this run.

    A configured factory wins over a configured image; an image is only
    deployed when neither is configured.
    """
    if config.token_factory:
        return PreconfiguredFactory(config.token_factory)
    if config.token_image:
        return FactoryToDeploy(PreconfiguredImage(config.token_image))
    return FactoryToDeploy(ImageToDeploy())


def required_artifacts(config: BridgeConfig) -> List[str]:
    """Names of the artifacts a run with this configuration deploys or calls."""
    names = [ETERNAL_STORAGE_PROXY]
    match resolve_token_factory_source(config):
        case FactoryToDeploy(image=ImageToDeploy()):
            names += [PERMITTABLE_TOKEN, TOKEN_FACTORY]
        case FactoryToDeploy():
            names.append(TOKEN_FACTORY)
    names += [GAS_LIMIT_MANAGER, FOREIGN_OMNIBRIDGE]
    if config.weth_address:
        names.append(WETH_OMNIBRIDGE_ROUTER)
    return names


class DeploymentPlanner:
    """
    Runs the fixed foreign-side deployment sequence once.

    Every step has an irreversible on-chain effect, so the run never loops or
    retries: a failing step moves the planner to FAILED and the exception
    propagates. Re-running with the already deployed addresses configured
    skips the shared infrastructure.
    """

    def __init__(
        self,
        deployer: ContractDeployer,
        sequencer: NonceSequencer,
        chain_id: int,
        config: BridgeConfig,
        artifacts: Mapping[str, CompiledArtifact],
    ):
        missing = [name for name in required_artifacts(config) if name not in artifacts]
        if missing:
            raise ArtifactNotFoundError(f"Missing artifacts: {', '.join(missing)}")

        self._deployer = deployer
        self._sequencer = sequencer
        self._chain_id = chain_id
        self._config = config
        self._artifacts = artifacts

        self.state = PlannerState.PENDING
        self.failed_after: Optional[PlannerState] = None
        self.deployed: List[Tuple[CompiledArtifact, DeployedContract]] = []

    @property
    def _prefix(self) -> str:
        return f"[{self._deployer.network.capitalize()}]"

    def _advance(self, state: PlannerState) -> None:
        logger.debug("%s %s -> %s", self._prefix, self.state.value, state.value)
        self.state = state

    def _deploy(self, contract_name: str, *args) -> DeployedContract:
        artifact = self._artifacts[contract_name]
        deployed = self._deployer.deploy(artifact, args, self._sequencer.next())
        self.deployed.append((artifact, deployed))
        return deployed

    def run(self) -> DeploymentResult:
        """
        Execute the deployment.

        Returns:
            DeploymentResult with the mediator (proxy), token factory,
            gas limit manager and optional WETH router addresses

        Raises:
            DeploymentError: If any step fails; state becomes FAILED
            RuntimeError: If the planner has already been run
        """
        if self.state is not PlannerState.PENDING:
            raise RuntimeError(f"Planner already ran (state: {self.state.value})")

        try:
            return self._run()
        except DeploymentError as e:
            self.failed_after = self.state
            self.state = PlannerState.FAILED
            logger.error(
                "%s Deployment failed after state '%s': %s",
                self._prefix,
                self.failed_after.value,
                e,
            )
            raise

    def _run(self) -> DeploymentResult:
        config = self._config
        p = self._prefix

        logger.info("%s Deploying Bridge Mediator storage", p)
        storage = self._deploy(ETERNAL_STORAGE_PROXY)
        logger.info("%s Bridge Mediator Storage: %s", p, storage.address)
        self._advance(PlannerState.STORAGE_DEPLOYED)

        token_factory = self._resolve_token_factory(resolve_token_factory_source(config))
        self._advance(PlannerState.TOKEN_INFRA_RESOLVED)

        logger.info(
            "%s Deploying gas limit manager contract with AMB bridge %s, owner %s",
            p,
            config.amb_bridge,
            config.bridge_owner,
        )
        gas_limit_manager = self._deploy(
            GAS_LIMIT_MANAGER,
            config.amb_bridge,
            config.bridge_owner,
            config.mediator_request_gas_limit,
        )
        logger.info("%s New Gas Limit Manager has been deployed: %s", p, gas_limit_manager.address)
        logger.info("%s Manual setup of request gas limits in the manager is recommended.", p)
        logger.info("%s Please, call setCommonRequestGasLimits on the Gas Limit Manager contract.", p)
        self._advance(PlannerState.GAS_MANAGER_DEPLOYED)

        logger.info(
            "%s Deploying Bridge Mediator implementation with TOKEN_NAME_SUFFIX %r",
            p,
            config.token_name_suffix,
        )
        implementation = self._deploy(FOREIGN_OMNIBRIDGE, config.token_name_suffix)
        logger.info("%s Bridge Mediator Implementation: %s", p, implementation.address)
        self._advance(PlannerState.IMPLEMENTATION_DEPLOYED)

        logger.info("%s Hooking up Mediator storage to Mediator implementation", p)
        self._deployer.upgrade_proxy(
            storage,
            self._artifacts[ETERNAL_STORAGE_PROXY],
            implementation.address,
            INITIAL_PROXY_VERSION,
            self._sequencer.next(),
        )
        self._advance(PlannerState.LINKED)

        helper_router_address = None
        if config.weth_address:
            logger.info("%s FOREIGN_WETH_ADDRESS was set. Deploying WETHOmnibridgeRouter helper", p)
            router = self._deploy(
                WETH_OMNIBRIDGE_ROUTER,
                storage.address,
                config.weth_address,
                config.bridge_owner,
            )
            helper_router_address = router.address
            logger.info("%s WETHOmnibridgeRouter deployed at: %s", p, router.address)
            self._advance(PlannerState.HELPER_DEPLOYED)

        self._advance(PlannerState.COMPLETE)
        logger.info("Foreign part of OMNIBRIDGE has been deployed")

        return DeploymentResult(
            mediator_address=storage.address,
            token_factory_address=token_factory,
            gas_limit_manager_address=gas_limit_manager.address,
            helper_router_address=helper_router_address,
        )

    def _resolve_token_factory(self, source: TokenFactorySource) -> str:
        p = self._prefix

        match source:
            case PreconfiguredFactory(address=address):
                logger.info("%s Using existing token factory: %s", p, address)
                return address
            case FactoryToDeploy(image=image):
                image_address = self._resolve_token_image(image)
                logger.info("%s Deploying new token factory", p)
                factory = self._deploy(TOKEN_FACTORY, self._config.bridge_owner, image_address)
                logger.info("%s New token factory has been deployed: %s", p, factory.address)
                return factory.address
            case _:
                raise TypeError(f"Unknown token factory source: {source!r}")

    def _resolve_token_image(self, source: TokenImageSource) -> str:
        p = self._prefix

        match source:
            case PreconfiguredImage(address=address):
                logger.info("%s Using existing ERC677 token image: %s", p, address)
                return address
            case ImageToDeploy():
                logger.info("%s Deploying new ERC677 token image", p)
                token = self._deploy(PERMITTABLE_TOKEN, "", "", 0, self._chain_id)
                logger.info("%s New ERC677 token image has been deployed: %s", p, token.address)
                return token.address
            case _:
                raise TypeError(f"Unknown token image source: {source!r}")
