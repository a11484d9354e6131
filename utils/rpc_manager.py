"""
RPC Manager
Connects to the deployment network with endpoint failover
"""

import os
from typing import Dict, List, Optional
from web3 import Web3
from loguru import logger
from dotenv import load_dotenv

from blockchain.errors import DeploymentSubmissionError

load_dotenv()


class RPCManager:
    """
    Ordered RPC endpoint fallback for one network

    Endpoints are tried in priority order: every env var listed in
    'http_url_envs', then 'default_http_url'. The first endpoint that
    connects is used for the rest of the run.
    """

    def __init__(self, network_config: Dict):
        """
        Initialize RPC Manager

        Args:
            network_config: One entry of the 'networks' config section
        """
        self.network_name = network_config.get('name', 'unknown')
        self.chain_id: Optional[int] = network_config.get('chain_id')
        self.request_timeout = network_config.get('request_timeout_seconds', 30)

        self.endpoints = self._init_endpoints(network_config)
        self.w3: Optional[Web3] = None
        self.active_endpoint: Optional[str] = None

        # Usage tracking
        self.failures = {endpoint: 0 for endpoint in self.endpoints}

        logger.info(f"RPC Manager initialized with {len(self.endpoints)} endpoint(s) for {self.network_name}")

    def _init_endpoints(self, network_config: Dict) -> List[str]:
        """Resolve endpoint URLs from environment, in priority order"""
        endpoints = []

        for env_name in network_config.get('http_url_envs', []):
            url = os.getenv(env_name)
            if url:
                endpoints.append(url)
            else:
                logger.debug(f"{env_name} not set, skipping")

        default_url = network_config.get('default_http_url')
        if default_url:
            endpoints.append(default_url)

        # Drop duplicates, keep order
        return list(dict.fromkeys(endpoints))

    def get_web3(self) -> Web3:
        """
        Get a connected Web3 instance

        Returns:
            Web3 instance for the first reachable endpoint
        """
        if self.w3 is not None:
            return self.w3

        if not self.endpoints:
            raise DeploymentSubmissionError(
                f"No RPC endpoint configured for network {self.network_name}"
            )

        for endpoint in self.endpoints:
            w3 = self._connect(endpoint)

            if w3 is None:
                self.failures[endpoint] += 1
                continue

            self._check_chain_id(w3)

            self.w3 = w3
            self.active_endpoint = endpoint
            return w3

        logger.critical(f"All RPC endpoints for {self.network_name} unreachable!")
        raise DeploymentSubmissionError(
            f"Network {self.network_name} unreachable: "
            f"tried {len(self.endpoints)} endpoint(s)"
        )

    def _connect(self, endpoint: str) -> Optional[Web3]:
        """Create Web3 for an endpoint and test the connection"""
        try:
            w3 = Web3(Web3.HTTPProvider(
                endpoint,
                request_kwargs={'timeout': self.request_timeout}
            ))

            if w3.is_connected():
                logger.success(f"Connected to {self.network_name} via {self._redact(endpoint)}")
                return w3

            logger.warning(f"Failed to connect to {self._redact(endpoint)}")

        except Exception as e:
            logger.error(f"Error creating Web3 for {self._redact(endpoint)}: {e}")

        return None

    def _check_chain_id(self, w3: Web3):
        """Refuse to deploy to a node on a different chain than configured"""
        if self.chain_id is None:
            return

        node_chain_id = w3.eth.chain_id

        if node_chain_id != self.chain_id:
            raise DeploymentSubmissionError(
                f"Network {self.network_name} is configured with chain id "
                f"{self.chain_id}, but the node reports chain id {node_chain_id}"
            )

    @staticmethod
    def _redact(endpoint: str) -> str:
        """Hide API keys embedded in endpoint paths"""
        scheme, sep, rest = endpoint.partition('://')
        host = rest.split('/', 1)[0]
        return f"{scheme}{sep}{host}" if sep else host
