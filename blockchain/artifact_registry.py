"""
Artifact Registry
Looks up compiled contract artifacts (Hardhat layout) by contract name
"""

import os
import json
import glob
from typing import Dict, List
from loguru import logger

from .errors import FactoryResolutionError


class ArtifactRegistry:
    """
    Registry of compiled contracts

    Artifacts are read from the Hardhat output layout:
        artifacts/contracts/<File>.sol/<ContractName>.json
    """

    def __init__(self, artifacts_dir: str = "artifacts"):
        """
        Initialize Artifact Registry

        Args:
            artifacts_dir: Root of the compiler output
        """
        self.artifacts_dir = artifacts_dir
        self._cache: Dict[str, Dict] = {}

    def get_artifact(self, contract_name: str) -> Dict:
        """
        Load the artifact for a contract

        Args:
            contract_name: Bare name ("Token") or fully qualified
                name ("contracts/Token.sol:Token")

        Returns:
            Artifact dict with at least 'abi' and 'bytecode'
        """
        if contract_name in self._cache:
            return self._cache[contract_name]

        path = self._resolve_path(contract_name)

        try:
            with open(path, 'r') as f:
                artifact = json.load(f)
        except (OSError, ValueError) as e:
            raise FactoryResolutionError(
                contract_name,
                f"Artifact for {contract_name} could not be read: {e}"
            ) from e

        self._validate(contract_name, artifact)

        self._cache[contract_name] = artifact
        logger.debug(f"Loaded artifact for {contract_name} from {path}")
        return artifact

    def list_contracts(self) -> List[str]:
        """Get names of all deployable contracts in the artifacts directory"""
        names = set()

        for path in self._artifact_paths():
            try:
                with open(path, 'r') as f:
                    artifact = json.load(f)
            except (OSError, ValueError):
                logger.warning(f"Skipping unreadable artifact: {path}")
                continue

            if not isinstance(artifact, dict):
                logger.warning(f"Skipping malformed artifact: {path}")
                continue

            if self._is_deployable(artifact):
                names.add(artifact.get('contractName') or self._name_from_path(path))

        return sorted(names)

    def _resolve_path(self, contract_name: str) -> str:
        """Find the artifact file for a bare or fully qualified name"""
        if ':' in contract_name:
            source, name = contract_name.rsplit(':', 1)
            path = os.path.join(self.artifacts_dir, source, f"{name}.json")

            if not os.path.isfile(path):
                raise FactoryResolutionError(
                    contract_name,
                    f"Artifact for contract \"{contract_name}\" not found. "
                    f"Run 'npx hardhat compile' first"
                )
            return path

        matches = [
            path for path in self._artifact_paths()
            if self._name_from_path(path) == contract_name
        ]

        if not matches:
            available = ', '.join(self.list_contracts()) or 'none'
            raise FactoryResolutionError(
                contract_name,
                f"Artifact for contract \"{contract_name}\" not found in "
                f"{self.artifacts_dir} (available: {available}). "
                f"Run 'npx hardhat compile' first"
            )

        if len(matches) > 1:
            candidates = ', '.join(self._qualified_name(path) for path in sorted(matches))
            raise FactoryResolutionError(
                contract_name,
                f"Multiple artifacts for contract \"{contract_name}\", "
                f"use a fully qualified name: {candidates}"
            )

        return matches[0]

    def _artifact_paths(self) -> List[str]:
        """All artifact JSON files, excluding build-info and debug files"""
        pattern = os.path.join(self.artifacts_dir, '**', '*.json')
        paths = []

        for path in glob.glob(pattern, recursive=True):
            relative = os.path.relpath(path, self.artifacts_dir)
            if relative.split(os.sep)[0] == 'build-info':
                continue
            if path.endswith('.dbg.json'):
                continue
            paths.append(path)

        return paths

    def _validate(self, contract_name: str, artifact: Dict):
        """Check the artifact can back a contract factory"""
        if not isinstance(artifact, dict):
            raise FactoryResolutionError(
                contract_name,
                f"Artifact for {contract_name} is not a JSON object"
            )

        if 'abi' not in artifact or 'bytecode' not in artifact:
            raise FactoryResolutionError(
                contract_name,
                f"Artifact for {contract_name} is missing abi or bytecode"
            )

        bytecode = artifact['bytecode'] or ''

        if not isinstance(bytecode, str):
            raise FactoryResolutionError(
                contract_name,
                f"Artifact for {contract_name} has malformed bytecode"
            )

        if bytecode in ('', '0x'):
            raise FactoryResolutionError(
                contract_name,
                f"{contract_name} is abstract or an interface and can't be deployed"
            )

        if '__$' in bytecode:
            raise FactoryResolutionError(
                contract_name,
                f"{contract_name} has unlinked library references and can't be deployed"
            )

    def _is_deployable(self, artifact: Dict) -> bool:
        bytecode = artifact.get('bytecode') or ''
        if not isinstance(bytecode, str):
            return False
        return 'abi' in artifact and bytecode not in ('', '0x') and '__$' not in bytecode

    @staticmethod
    def _name_from_path(path: str) -> str:
        return os.path.splitext(os.path.basename(path))[0]

    def _qualified_name(self, path: str) -> str:
        source = os.path.relpath(os.path.dirname(path), self.artifacts_dir)
        return f"{source.replace(os.sep, '/')}:{self._name_from_path(path)}"
