"""Contract deployment primitive for omnibridge-deploy."""

import logging
from typing import Any, Sequence

from .abi import encode_constructor_args, encode_function_call
from .chain import ChainClient, TransactionReceipt
from .exceptions import ChainClientError, ContractDeploymentError, ProxyUpgradeError
from .types import CompiledArtifact, DeployedContract, DeploymentStep


logger = logging.getLogger(__name__)


class ContractDeployer:
    """Submits contract-creation and proxy-upgrade transactions on one network."""

    def __init__(self, client: ChainClient, network: str):
        self._client = client
        self.network = network

    def deploy(
        self,
        artifact: CompiledArtifact,
        constructor_args: Sequence[Any],
        nonce: int,
    ) -> DeployedContract:
        """
        Deploy a contract and wait for it to be mined.

        Args:
            artifact: Compiled contract to deploy
            constructor_args: Positional constructor arguments
            nonce: Nonce assigned by the sequencer

        Returns:
            DeployedContract with the new address and encoded constructor arguments

        Raises:
            ContractDeploymentError: If encoding, submission or mining fails.
                Steps are never retried; the nonce sequence is no longer valid.
        """
        step = DeploymentStep(
            network=self.network,
            nonce=nonce,
            artifact=artifact,
            constructor_args=tuple(constructor_args),
        )

        try:
            constructor_data = encode_constructor_args(artifact.abi, step.constructor_args)
        except (ValueError, TypeError) as e:
            raise ContractDeploymentError(
                f"Cannot encode constructor arguments for {artifact.contract_name}: {e}",
                contract_name=artifact.contract_name,
                nonce=nonce,
            ) from e

        logger.info(
            "[%s] Deploying %s with nonce %d", self.network, artifact.contract_name, nonce
        )
        receipt = self._submit_creation(step, constructor_data)

        deployed = DeployedContract(
            address=receipt.contract_address,
            network=self.network,
            contract_name=artifact.contract_name,
            constructor_arguments=constructor_data,
        )
        logger.info("[%s] %s deployed at %s", self.network, artifact.contract_name, deployed.address)
        return deployed

    def _submit_creation(self, step: DeploymentStep, constructor_data: str) -> TransactionReceipt:
        name = step.artifact.contract_name
        try:
            receipt = self._client.submit_contract_creation(
                step.artifact.bytecode, constructor_data, step.nonce
            )
        except ChainClientError as e:
            raise ContractDeploymentError(
                f"Deployment of {name} with nonce {step.nonce} failed: {e}",
                contract_name=name,
                nonce=step.nonce,
            ) from e

        if not receipt.contract_address:
            raise ContractDeploymentError(
                f"Deployment of {name} returned no contract address",
                contract_name=name,
                nonce=step.nonce,
            )
        return receipt

    def upgrade_proxy(
        self,
        proxy: DeployedContract,
        proxy_artifact: CompiledArtifact,
        implementation_address: str,
        version: str,
        nonce: int,
    ) -> TransactionReceipt:
        """
        Point an upgradeable proxy at a new implementation.

        Calls upgradeTo(version, implementation) on the proxy.

        Raises:
            ProxyUpgradeError: If the call cannot be encoded or the transaction fails
        """
        try:
            data = encode_function_call(
                proxy_artifact.abi, "upgradeTo", [int(version), implementation_address]
            )
        except (ValueError, TypeError) as e:
            raise ProxyUpgradeError(
                f"Cannot encode upgradeTo call for {proxy.address}: {e}",
                contract_name=proxy_artifact.contract_name,
                nonce=nonce,
            ) from e

        logger.info(
            "[%s] Upgrading proxy %s to implementation %s (version %s, nonce %d)",
            self.network,
            proxy.address,
            implementation_address,
            version,
            nonce,
        )
        try:
            receipt = self._client.submit_call(proxy.address, data, nonce)
        except ChainClientError as e:
            raise ProxyUpgradeError(
                f"Upgrade of proxy {proxy.address} with nonce {nonce} failed: {e}",
                contract_name=proxy_artifact.contract_name,
                nonce=nonce,
            ) from e

        logger.info("[%s] Proxy %s upgraded in %s", self.network, proxy.address, receipt.transaction_hash)
        return receipt
