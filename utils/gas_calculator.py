"""
Gas Calculator
Gas limit buffering and fee pricing for deployment transactions
"""

from typing import Dict, Optional
from web3 import Web3
from loguru import logger


class GasCalculator:
    """
    Calculates gas limits and fee parameters
    Uses EIP-1559 pricing where the network supports it, legacy gasPrice otherwise
    """

    def __init__(self, w3: Web3, gas_settings: Dict):
        """
        Initialize Gas Calculator

        Args:
            w3: Web3 instance
            gas_settings: 'gas_settings' section of the deploy configuration
        """
        self.w3 = w3

        self.estimate_buffer = float(gas_settings.get('estimate_buffer', 1.2))
        self.fallback_gas_limit = int(gas_settings.get('fallback_gas_limit', 3000000))
        self.priority_fee_gwei = gas_settings.get('priority_fee_gwei', 1)
        self.max_gas_price_gwei: Optional[float] = gas_settings.get('max_gas_price_gwei')

    def apply_buffer(self, gas_estimate: int) -> int:
        """
        Add safety margin to a gas estimate

        Args:
            gas_estimate: Estimated gas units

        Returns:
            Gas limit
        """
        return max(int(gas_estimate * self.estimate_buffer), int(gas_estimate))

    async def get_fee_params(self) -> Dict[str, int]:
        """
        Get fee parameters for the next transaction

        Returns:
            {'maxFeePerGas', 'maxPriorityFeePerGas'} on EIP-1559 networks,
            {'gasPrice'} otherwise
        """
        latest_block = self.w3.eth.get_block('latest')
        base_fee_wei = latest_block.get('baseFeePerGas')

        if base_fee_wei is None:
            gas_price_wei = self._cap(int(self.w3.eth.gas_price))
            logger.debug(f"Legacy gas price: {Web3.from_wei(gas_price_wei, 'gwei')} gwei")
            return {'gasPrice': gas_price_wei}

        priority_fee_wei = int(Web3.to_wei(self.priority_fee_gwei, 'gwei'))

        # Max fee = base fee * 2 + priority fee (buffer for fluctuations)
        max_fee_wei = self._cap((int(base_fee_wei) * 2) + priority_fee_wei)
        priority_fee_wei = min(priority_fee_wei, max_fee_wei)

        logger.debug(
            f"EIP-1559 fees: max {Web3.from_wei(max_fee_wei, 'gwei')} gwei, "
            f"tip {Web3.from_wei(priority_fee_wei, 'gwei')} gwei"
        )

        return {
            'maxFeePerGas': max_fee_wei,
            'maxPriorityFeePerGas': priority_fee_wei
        }

    def estimate_cost_wei(self, gas_limit: int, fee_params: Dict[str, int]) -> int:
        """
        Worst-case cost of a transaction

        Args:
            gas_limit: Gas limit of the transaction
            fee_params: Output of get_fee_params()

        Returns:
            Cost in wei
        """
        price = fee_params.get('maxFeePerGas', fee_params.get('gasPrice', 0))
        return int(gas_limit) * int(price)

    def _cap(self, price_wei: int) -> int:
        """Cap a price at max_gas_price_gwei, when configured"""
        if self.max_gas_price_gwei is None:
            return price_wei

        max_allowed_wei = int(Web3.to_wei(self.max_gas_price_gwei, 'gwei'))
        return min(price_wei, max_allowed_wei)
