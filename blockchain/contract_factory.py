"""
Contract Factory
Deploys new instances of a compiled contract
"""

from typing import Dict, List
from web3 import Web3
from loguru import logger

from .deployment import DeploymentHandle
from .errors import DeploymentError, DeploymentSubmissionError


class ContractFactory:
    """
    Deployment factory bound to one compiled contract
    """

    def __init__(self, contract_name: str, abi: List[Dict], bytecode: str, environment):
        """
        Initialize Contract Factory

        Args:
            contract_name: Contract name
            abi: Contract ABI
            bytecode: Creation bytecode
            environment: DeploymentEnvironment providing the network session
        """
        self.contract_name = contract_name
        self.abi = abi
        self.bytecode = bytecode
        self.environment = environment

    @property
    def constructor_inputs(self) -> List[Dict]:
        for entry in self.abi:
            if entry.get('type') == 'constructor':
                return entry.get('inputs', [])
        return []

    async def deploy(self, *constructor_args) -> DeploymentHandle:
        """
        Send the deployment transaction

        Args:
            *constructor_args: Constructor arguments

        Returns:
            DeploymentHandle for the pending deployment
        """
        expected = len(self.constructor_inputs)

        if len(constructor_args) != expected:
            raise DeploymentSubmissionError(
                f"{self.contract_name} constructor expects {expected} "
                f"argument(s), got {len(constructor_args)}"
            )

        env = self.environment.connect()
        sender = env.wallet_manager.address

        logger.info(f"Deploying {self.contract_name} from: {sender}")

        try:
            nonce = await env.nonce_manager.get_nonce()
        except Exception as e:
            raise DeploymentSubmissionError(f"Error allocating nonce for {sender}: {e}") from e

        try:
            tx_hash = await self._send(env, sender, nonce, constructor_args)
        except DeploymentError:
            await env.nonce_manager.release_nonce(nonce)
            raise
        except Exception as e:
            await env.nonce_manager.release_nonce(nonce)
            raise DeploymentSubmissionError(
                f"Error sending {self.contract_name} deployment: {e}"
            ) from e

        await env.nonce_manager.confirm_nonce(nonce)

        return DeploymentHandle(
            env.w3,
            self.contract_name,
            self.abi,
            tx_hash,
            sender,
            nonce,
            confirmation_settings=env.config.get('confirmation')
        )

    async def _send(self, env, sender: str, nonce: int, constructor_args) -> bytes:
        w3 = env.w3
        contract = w3.eth.contract(abi=self.abi, bytecode=self.bytecode)

        # Build deployment transaction
        logger.info("Building deployment transaction...")
        transaction = await env.tx_builder.build_deployment_tx(
            contract,
            constructor_args,
            sender,
            nonce
        )

        # Check balance
        cost_wei = env.gas_calculator.estimate_cost_wei(transaction['gas'], transaction)
        balance_wei = env.wallet_manager.get_balance(w3)

        logger.info(f"Estimated deployment cost: {Web3.from_wei(cost_wei, 'ether')} ETH")

        if balance_wei < cost_wei:
            raise DeploymentSubmissionError(
                f"Insufficient funds for deployment: balance "
                f"{Web3.from_wei(balance_wei, 'ether')} ETH, need up to "
                f"{Web3.from_wei(cost_wei, 'ether')} ETH"
            )

        # Sign and send
        signed_tx = env.wallet_manager.sign_transaction(transaction)
        tx_hash = w3.eth.send_raw_transaction(signed_tx.raw_transaction)

        logger.info(f"Transaction sent: {Web3.to_hex(tx_hash)}")
        return tx_hash
