"""
Deploy Runner
Deploys the HyperBlockLabs contract and reports its address
"""

import sys
import traceback
from typing import Optional, Sequence, TextIO
from loguru import logger

from .environment import DeploymentEnvironment


CONTRACT_NAME = "HyperBlockLabs"


class DeployRunner:
    """
    Deploy-and-report procedure

    acquire factory -> deploy -> await confirmation -> print address,
    with a single error boundary turning any failure into exit code 1.
    """

    def __init__(
        self,
        environment=None,
        contract_name: str = CONTRACT_NAME,
        constructor_args: Sequence = (),
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None
    ):
        """
        Initialize Deploy Runner

        Args:
            environment: Object providing get_contract_factory(name)
                (None = DeploymentEnvironment.from_config())
            contract_name: Contract to deploy
            constructor_args: Constructor arguments
            stdout: Stream for the address line (None = sys.stdout)
            stderr: Stream for errors (None = sys.stderr)
        """
        self.environment = environment
        self.contract_name = contract_name
        self.constructor_args = tuple(constructor_args)
        self._stdout = stdout
        self._stderr = stderr

    async def deploy(self) -> str:
        """
        Deploy a new contract instance

        Returns:
            Address of the confirmed deployment
        """
        if self.environment is None:
            self.environment = DeploymentEnvironment.from_config()

        factory = await self.environment.get_contract_factory(self.contract_name)
        handle = await factory.deploy(*self.constructor_args)

        return await handle.wait_for_confirmation()

    async def run(self) -> int:
        """
        Deploy and report

        Returns:
            Process exit code: 0 on success, 1 on any failure
        """
        stdout = self._stdout or sys.stdout
        stderr = self._stderr or sys.stderr

        try:
            address = await self.deploy()
        except Exception as e:
            logger.error(f"❌ {self.contract_name} deployment failed: {e}")
            stderr.write(''.join(traceback.format_exception(type(e), e, e.__traceback__)))
            stderr.flush()
            return 1

        print(f"{self.contract_name} deployed to: {address}", file=stdout)
        stdout.flush()
        return 0
