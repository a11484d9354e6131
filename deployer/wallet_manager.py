"""
Wallet Manager
Holds the deployer signing key
"""

import os
from typing import Dict, Optional
from web3 import Web3
from eth_account import Account
from loguru import logger
from dotenv import load_dotenv

load_dotenv()


class WalletManager:
    """
    Manages the wallet that signs and pays for deployments
    """

    def __init__(self, private_key: Optional[str] = None):
        """
        Initialize wallet manager

        Args:
            private_key: Deployer key (None = read DEPLOYER_PRIVATE_KEY)
        """
        # Load private key from environment
        self.private_key = private_key or os.getenv('DEPLOYER_PRIVATE_KEY')

        if not self.private_key:
            raise ValueError("DEPLOYER_PRIVATE_KEY must be set in .env")

        self.account = Account.from_key(self.private_key)
        self.address = self.account.address

        logger.info(f"Deployer wallet: {self.address}")

    def sign_transaction(self, transaction: Dict):
        """
        Sign a transaction with the deployer wallet

        Args:
            transaction: Transaction dict

        Returns:
            Signed transaction
        """
        try:
            return self.account.sign_transaction(transaction)
        except Exception as e:
            logger.error(f"Error signing transaction: {e}")
            raise

    def get_balance(self, w3: Web3) -> int:
        """
        Get deployer wallet balance

        Args:
            w3: Web3 instance

        Returns:
            Balance in wei
        """
        return w3.eth.get_balance(self.address)
