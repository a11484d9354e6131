"""
Nonce Manager
Handles transaction nonce sequencing for the deployer wallet
"""

import asyncio
from typing import Optional, Set
from web3 import Web3
from loguru import logger


class NonceManager:
    """
    Manages transaction nonces for the deployer wallet
    Ensures sequential nonce allocation so each deployment gets a fresh nonce
    """

    def __init__(self, w3: Web3, address: str):
        """
        Initialize Nonce Manager

        Args:
            w3: Web3 instance
            address: Deployer wallet address
        """
        self.w3 = w3
        self.address = Web3.to_checksum_address(address)

        # Internal nonce tracking
        self.current_nonce: Optional[int] = None
        self.pending_nonces: Set[int] = set()
        self.lock = asyncio.Lock()

    def _sync_nonce(self):
        """Sync nonce with blockchain"""
        # Include pending transactions
        nonce = self.w3.eth.get_transaction_count(self.address, 'pending')
        self.current_nonce = nonce
        logger.debug(f"Nonce synced: {nonce}")

    async def get_nonce(self) -> int:
        """
        Get next available nonce

        Returns:
            Next nonce to use
        """
        async with self.lock:
            if self.current_nonce is None:
                self._sync_nonce()

            nonce = self.current_nonce
            self.current_nonce += 1
            self.pending_nonces.add(nonce)

            logger.debug(f"Allocated nonce: {nonce}")
            return nonce

    async def confirm_nonce(self, nonce: int):
        """
        Mark a nonce as used by a sent transaction

        Args:
            nonce: Nonce that was consumed
        """
        async with self.lock:
            self.pending_nonces.discard(nonce)

    async def release_nonce(self, nonce: int):
        """
        Give back a nonce whose transaction was never sent

        Only the most recent allocation can be rolled back; anything older
        forces a resync from the chain.

        Args:
            nonce: Nonce to release
        """
        async with self.lock:
            self.pending_nonces.discard(nonce)

            if self.current_nonce is not None and nonce == self.current_nonce - 1:
                self.current_nonce = nonce
                logger.debug(f"Released nonce: {nonce}")
            else:
                self.current_nonce = None
                logger.debug(f"Nonce {nonce} released out of order, will resync")
