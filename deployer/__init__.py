"""
Deployer Package
Deploy-and-report procedure and the environment it runs in
"""

from .deploy_runner import CONTRACT_NAME, DeployRunner
from .environment import DeploymentEnvironment
from .wallet_manager import WalletManager

__all__ = ['CONTRACT_NAME', 'DeployRunner', 'DeploymentEnvironment', 'WalletManager']
