"""
Deployment Environment
Wires the artifact registry, network, signer and transaction tooling together
"""

from typing import Dict, Optional
from web3 import Web3
from loguru import logger

from blockchain.artifact_registry import ArtifactRegistry
from blockchain.contract_factory import ContractFactory
from blockchain.errors import DeploymentError, DeploymentSubmissionError
from blockchain.nonce_manager import NonceManager
from blockchain.transaction_builder import TransactionBuilder
from utils.gas_calculator import GasCalculator
from utils.rpc_manager import RPCManager

from .config import load_deploy_config, select_network
from .wallet_manager import WalletManager


class DeploymentEnvironment:
    """
    Everything a deployment needs beyond the contract name

    Artifact lookup is offline; the network session (web3, signer,
    nonces, gas pricing) is only built on the first deploy.
    """

    def __init__(
        self,
        config: Dict,
        network: Optional[str] = None,
        w3: Optional[Web3] = None,
        private_key: Optional[str] = None
    ):
        """
        Initialize Deployment Environment

        Args:
            config: Deploy configuration
            network: Network name (None = DEPLOY_NETWORK or default)
            w3: Pre-connected Web3 instance (skips RPC endpoint selection)
            private_key: Deployer key (None = DEPLOYER_PRIVATE_KEY)
        """
        self.config = config
        self.network_config = select_network(config, network)
        self.registry = ArtifactRegistry(config.get('artifacts_dir', 'artifacts'))

        self._private_key = private_key
        self.w3 = w3

        # Network session, built by connect()
        self.rpc_manager = None
        self.wallet_manager = None
        self.nonce_manager = None
        self.gas_calculator = None
        self.tx_builder = None
        self.connected = False

        logger.info(f"Deployment environment ready for network: {self.network_config['name']}")

    @classmethod
    def from_config(
        cls,
        config_path: Optional[str] = None,
        network: Optional[str] = None
    ) -> 'DeploymentEnvironment':
        """Build an environment from the deploy config file"""
        return cls(load_deploy_config(config_path), network=network)

    async def get_contract_factory(self, contract_name: str) -> ContractFactory:
        """
        Get deployment factory for a compiled contract

        Args:
            contract_name: Bare or fully qualified contract name

        Returns:
            ContractFactory bound to this environment
        """
        artifact = self.registry.get_artifact(contract_name)

        return ContractFactory(
            contract_name,
            artifact['abi'],
            artifact['bytecode'],
            self
        )

    def connect(self) -> 'DeploymentEnvironment':
        """
        Build the network session on first use

        Returns:
            self, with w3, wallet_manager, nonce_manager, gas_calculator
            and tx_builder populated
        """
        if self.connected:
            return self

        try:
            self._connect()
        except DeploymentError:
            raise
        except Exception as e:
            raise DeploymentSubmissionError(
                f"Error preparing deployment on {self.network_config['name']}: {e}"
            ) from e

        self.connected = True
        return self

    def _connect(self):
        if self.w3 is None:
            self.rpc_manager = RPCManager(self.network_config)
            self.w3 = self.rpc_manager.get_web3()

        try:
            self.wallet_manager = WalletManager(self._private_key)
        except ValueError as e:
            raise DeploymentSubmissionError(f"No signer available: {e}") from e

        self.nonce_manager = NonceManager(self.w3, self.wallet_manager.address)
        self.gas_calculator = GasCalculator(self.w3, self.network_config['gas_settings'])
        self.tx_builder = TransactionBuilder(
            self.w3,
            self.gas_calculator,
            chain_id=self.network_config.get('chain_id')
        )
