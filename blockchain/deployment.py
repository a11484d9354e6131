"""
Deployment Handle
Tracks a submitted contract deployment until it is confirmed on-chain
"""

import asyncio
import time
from typing import Dict, List, Optional
from web3 import Web3
from web3.exceptions import TransactionNotFound
from loguru import logger

from .errors import DeploymentConfirmationError


PENDING = 'pending'
CONFIRMED = 'confirmed'
FAILED = 'failed'


class DeploymentHandle:
    """
    In-flight or completed deployment of a single contract instance

    The contract address is only available once the deployment
    transaction is mined, successful and has code at the new address.
    """

    def __init__(
        self,
        w3: Web3,
        contract_name: str,
        abi: List[Dict],
        tx_hash: bytes,
        deployer_address: str,
        nonce: int,
        confirmation_settings: Optional[Dict] = None
    ):
        """
        Initialize Deployment Handle

        Args:
            w3: Web3 instance
            contract_name: Name of the deployed contract
            abi: Contract ABI
            tx_hash: Deployment transaction hash
            deployer_address: Sender of the deployment
            nonce: Nonce of the deployment transaction
            confirmation_settings: 'confirmation' section of the deploy configuration
        """
        self.w3 = w3
        self.contract_name = contract_name
        self.abi = abi
        self.tx_hash = tx_hash
        self.deployer_address = deployer_address
        self.nonce = nonce

        settings = confirmation_settings or {}
        self.confirmations = max(int(settings.get('confirmations', 1)), 1)
        self.timeout = float(settings.get('timeout_seconds', 300))
        self.poll_interval = float(settings.get('poll_interval_seconds', 2))

        self.status = PENDING
        self.receipt = None
        self._address: Optional[str] = None

    @property
    def tx_hash_hex(self) -> str:
        return Web3.to_hex(self.tx_hash)

    @property
    def address(self) -> Optional[str]:
        """Deployed contract address (None until confirmed)"""
        return self._address

    @property
    def contract(self):
        """Contract instance bound to the deployed address"""
        if self.status != CONFIRMED:
            return None
        return self.w3.eth.contract(address=self._address, abi=self.abi)

    async def wait_for_confirmation(self) -> str:
        """
        Wait until the deployment is mined and confirmed

        Returns:
            Checksummed address of the deployed contract
        """
        if self.status == CONFIRMED:
            return self._address

        try:
            address = await self._confirm()
        except DeploymentConfirmationError:
            self.status = FAILED
            raise
        except Exception as e:
            self.status = FAILED
            raise DeploymentConfirmationError(
                f"Error confirming {self.contract_name} deployment: {e}",
                tx_hash=self.tx_hash_hex
            ) from e

        self._address = address
        self.status = CONFIRMED

        logger.success(f"{self.contract_name} deployment confirmed at {address}")
        logger.info(f"Gas used: {self.receipt['gasUsed']}")

        return address

    async def _confirm(self) -> str:
        deadline = time.monotonic() + self.timeout

        logger.info(f"Waiting for confirmation of {self.tx_hash_hex}...")
        receipt = await self._wait_for_receipt(deadline)
        self.receipt = receipt

        if receipt['status'] != 1:
            raise DeploymentConfirmationError(
                f"{self.contract_name} deployment reverted "
                f"(tx {self.tx_hash_hex}, block {receipt['blockNumber']})",
                tx_hash=self.tx_hash_hex
            )

        contract_address = receipt.get('contractAddress')

        if not contract_address:
            raise DeploymentConfirmationError(
                f"Receipt for {self.tx_hash_hex} has no contract address",
                tx_hash=self.tx_hash_hex
            )

        await self._wait_for_depth(receipt['blockNumber'], deadline)

        address = Web3.to_checksum_address(contract_address)
        code = self.w3.eth.get_code(address)

        if not code or len(code) == 0:
            raise DeploymentConfirmationError(
                f"No code at {address} after deploying {self.contract_name}",
                tx_hash=self.tx_hash_hex
            )

        return address

    async def _wait_for_receipt(self, deadline: float):
        """Poll for the transaction receipt until the deadline"""
        while True:
            try:
                return self.w3.eth.get_transaction_receipt(self.tx_hash)
            except TransactionNotFound:
                pass

            if time.monotonic() >= deadline:
                raise DeploymentConfirmationError(
                    f"Transaction {self.tx_hash_hex} not mined after {self.timeout:.0f}s",
                    tx_hash=self.tx_hash_hex
                )

            await asyncio.sleep(self.poll_interval)

    async def _wait_for_depth(self, receipt_block: int, deadline: float):
        """Wait until the receipt block has the required number of confirmations"""
        if self.confirmations <= 1:
            return

        target_block = receipt_block + self.confirmations - 1

        while self.w3.eth.block_number < target_block:
            if time.monotonic() >= deadline:
                raise DeploymentConfirmationError(
                    f"Transaction {self.tx_hash_hex} did not reach "
                    f"{self.confirmations} confirmations after {self.timeout:.0f}s",
                    tx_hash=self.tx_hash_hex
                )

            await asyncio.sleep(self.poll_interval)

        logger.debug(f"{self.confirmations} confirmations reached for {self.tx_hash_hex}")
