"""
Transaction Builder
Constructs contract deployment transactions
"""

from typing import Dict, Optional, Sequence
from web3 import Web3
from loguru import logger


class TransactionBuilder:
    """
    Builds deployment transactions ready for signing
    """

    def __init__(self, w3: Web3, gas_calculator, chain_id: Optional[int] = None):
        """
        Initialize Transaction Builder

        Args:
            w3: Web3 instance
            gas_calculator: GasCalculator for limits and fees
            chain_id: Chain id to sign for (None = ask the node)
        """
        self.w3 = w3
        self.gas_calculator = gas_calculator
        self.chain_id = chain_id

    async def build_deployment_tx(
        self,
        contract,
        constructor_args: Sequence,
        sender: str,
        nonce: int
    ) -> Dict:
        """
        Build transaction that deploys a contract

        Args:
            contract: web3 contract class (abi + bytecode)
            constructor_args: Constructor arguments
            sender: Deployer address
            nonce: Nonce to use

        Returns:
            Transaction dict
        """
        constructor = contract.constructor(*constructor_args)

        # Estimate gas
        try:
            gas_estimate = constructor.estimate_gas({'from': sender})
            gas_limit = self.gas_calculator.apply_buffer(gas_estimate)
        except Exception as e:
            logger.warning(f"Gas estimation failed: {e}, using default")
            gas_limit = self.gas_calculator.fallback_gas_limit

        fee_params = await self.gas_calculator.get_fee_params()
        chain_id = self.chain_id if self.chain_id is not None else self.w3.eth.chain_id

        logger.info(f"Gas limit: {gas_limit}")

        tx_params = {
            'from': sender,
            'nonce': nonce,
            'gas': gas_limit,
            'chainId': chain_id,
            **fee_params
        }

        return constructor.build_transaction(tx_params)
