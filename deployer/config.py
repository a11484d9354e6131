"""
Deploy Configuration
Loads deployment settings from config/deploy_config.json and the environment
"""

import os
import copy
import json
from typing import Dict, Optional
from loguru import logger
from dotenv import load_dotenv

from blockchain.errors import ConfigurationError

load_dotenv()


DEFAULT_CONFIG_PATH = "config/deploy_config.json"

DEFAULT_CONFIG = {
    'default_network': 'localhost',
    'artifacts_dir': 'artifacts',
    'networks': {
        'localhost': {
            'name': 'Hardhat Localhost',
            'http_url_envs': ['LOCALHOST_RPC_URL'],
            'default_http_url': 'http://127.0.0.1:8545',
            'chain_id': 31337
        }
    },
    'gas_settings': {
        'estimate_buffer': 1.2,
        'fallback_gas_limit': 3000000,
        'priority_fee_gwei': 1,
        'max_gas_price_gwei': None
    },
    'confirmation': {
        'confirmations': 1,
        'timeout_seconds': 300,
        'poll_interval_seconds': 2
    }
}


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """Merge override into a copy of base, recursing into nested dicts"""
    merged = copy.deepcopy(base)

    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)

    return merged


def load_deploy_config(config_path: Optional[str] = None) -> Dict:
    """
    Load deploy configuration

    Args:
        config_path: JSON config file (None = DEPLOY_CONFIG_PATH or the default path)

    Returns:
        Config dict with file values merged over defaults
    """
    path = config_path or os.getenv('DEPLOY_CONFIG_PATH', DEFAULT_CONFIG_PATH)

    if not os.path.exists(path):
        if config_path:
            raise ConfigurationError(f"Deploy config not found: {path}")

        logger.debug(f"{path} not found, using built-in defaults")
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(path, 'r') as f:
            file_config = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Error reading deploy config {path}: {e}") from e

    if not isinstance(file_config, dict):
        raise ConfigurationError(f"Deploy config {path} must be a JSON object")

    logger.debug(f"Loaded deploy config from {path}")
    return _deep_merge(DEFAULT_CONFIG, file_config)


def select_network(config: Dict, network: Optional[str] = None) -> Dict:
    """
    Resolve the network to deploy to

    Args:
        config: Deploy configuration
        network: Network name (None = DEPLOY_NETWORK or 'default_network')

    Returns:
        Network config with the effective 'gas_settings' merged in
    """
    network_name = network or os.getenv('DEPLOY_NETWORK') or config['default_network']
    networks = config.get('networks', {})

    if network_name not in networks:
        available = ', '.join(sorted(networks)) or 'none'
        raise ConfigurationError(
            f"Unknown network \"{network_name}\" (configured: {available})"
        )

    network_config = copy.deepcopy(networks[network_name])
    network_config.setdefault('name', network_name)
    network_config['key'] = network_name
    network_config['gas_settings'] = _deep_merge(
        config.get('gas_settings', {}),
        network_config.get('gas_settings', {})
    )

    return network_config
