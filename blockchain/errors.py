"""
Deployment Errors
Failures surfaced by the deployment chain
"""

from typing import Optional


class DeploymentError(Exception):
    """Base class for all deployment failures"""


class ConfigurationError(DeploymentError):
    """Deploy configuration could not be loaded or is invalid"""


class FactoryResolutionError(DeploymentError):
    """Contract name is unknown to the artifact registry or not deployable"""

    def __init__(self, contract_name: str, message: str):
        super().__init__(message)
        self.contract_name = contract_name


class DeploymentSubmissionError(DeploymentError):
    """Deployment transaction could not be built, signed or sent"""


class DeploymentConfirmationError(DeploymentError):
    """Deployment transaction reverted or was not confirmed in time"""

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        super().__init__(message)
        self.tx_hash = tx_hash
