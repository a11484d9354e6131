"""
Blockchain Interaction Package
Handles artifact lookup, deployment transactions, confirmation tracking and nonce management
"""

from .artifact_registry import ArtifactRegistry
from .contract_factory import ContractFactory
from .deployment import DeploymentHandle
from .errors import (
    ConfigurationError,
    DeploymentConfirmationError,
    DeploymentError,
    DeploymentSubmissionError,
    FactoryResolutionError,
)
from .nonce_manager import NonceManager
from .transaction_builder import TransactionBuilder

__all__ = [
    'ArtifactRegistry',
    'ContractFactory',
    'DeploymentHandle',
    'NonceManager',
    'TransactionBuilder',
    'DeploymentError',
    'ConfigurationError',
    'FactoryResolutionError',
    'DeploymentSubmissionError',
    'DeploymentConfirmationError'
]
