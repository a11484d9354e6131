"""
Unit Tests for the Deploy Runner
"""

import io
import pytest
from unittest.mock import Mock, AsyncMock, patch

from blockchain.errors import (
    ConfigurationError,
    DeploymentConfirmationError,
    DeploymentSubmissionError,
    FactoryResolutionError,
)
from deployer.deploy_runner import CONTRACT_NAME, DeployRunner
from deployer.environment import DeploymentEnvironment


@pytest.fixture
def handle():
    """Pending deployment that confirms at 0xABC123..."""
    handle = Mock()
    handle.address = '0xPENDING'
    handle.wait_for_confirmation = AsyncMock(return_value='0xABC123...')
    return handle


@pytest.fixture
def factory(handle):
    """Contract factory returning the pending handle"""
    factory = Mock()
    factory.deploy = AsyncMock(return_value=handle)
    return factory


@pytest.fixture
def environment(factory):
    """Deployment environment resolving HyperBlockLabs"""
    environment = Mock()
    environment.get_contract_factory = AsyncMock(return_value=factory)
    return environment


class TestSuccessfulDeployment:
    """Deploy chain completes"""

    @pytest.mark.asyncio
    async def test_prints_confirmed_address(self, environment, capsys):
        """Confirmed address is printed, not the pending one"""
        exit_code = await DeployRunner(environment).run()

        captured = capsys.readouterr()
        assert exit_code == 0
        assert captured.out == "HyperBlockLabs deployed to: 0xABC123...\n"

    @pytest.mark.asyncio
    async def test_deploys_hyperblocklabs_without_arguments(self, environment, factory, handle):
        """Factory is resolved by name and deployed with zero constructor arguments"""
        await DeployRunner(environment).run()

        environment.get_contract_factory.assert_awaited_once_with(CONTRACT_NAME)
        factory.deploy.assert_awaited_once_with()
        handle.wait_for_confirmation.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_deploy_returns_address(self, environment):
        """deploy() returns the confirmed address without printing"""
        stdout = io.StringIO()
        runner = DeployRunner(environment, stdout=stdout)

        address = await runner.deploy()

        assert address == '0xABC123...'
        assert stdout.getvalue() == ''

    @pytest.mark.asyncio
    async def test_custom_streams(self, environment):
        """Output goes to the injected streams"""
        stdout = io.StringIO()
        stderr = io.StringIO()

        exit_code = await DeployRunner(environment, stdout=stdout, stderr=stderr).run()

        assert exit_code == 0
        assert stdout.getvalue().splitlines() == ["HyperBlockLabs deployed to: 0xABC123..."]
        assert stderr.getvalue() == ''

    @pytest.mark.asyncio
    async def test_constructor_args_forwarded(self, environment, factory):
        """Explicit constructor arguments reach the factory"""
        await DeployRunner(environment, constructor_args=('HBL', 18)).run()

        factory.deploy.assert_awaited_once_with('HBL', 18)

    @pytest.mark.asyncio
    async def test_two_runs_give_two_deployments(self, environment, factory, capsys):
        """Re-running submits a new deployment each time"""
        first = Mock(wait_for_confirmation=AsyncMock(return_value='0x0000000000000000000000000000000000000001'))
        second = Mock(wait_for_confirmation=AsyncMock(return_value='0x0000000000000000000000000000000000000002'))
        factory.deploy = AsyncMock(side_effect=[first, second])

        assert await DeployRunner(environment).run() == 0
        assert await DeployRunner(environment).run() == 0

        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 2
        assert lines[0] != lines[1]
        assert factory.deploy.await_count == 2


class TestFailedDeployment:
    """Any failure in the chain exits 1 without an address line"""

    @pytest.mark.asyncio
    async def test_factory_resolution_generic_error(self, environment, capsys):
        """Resolution throwing a plain error"""
        environment.get_contract_factory = AsyncMock(side_effect=Exception("contract not found"))

        exit_code = await DeployRunner(environment).run()

        captured = capsys.readouterr()
        assert exit_code == 1
        assert captured.out == ''
        assert "contract not found" in captured.err

    @pytest.mark.asyncio
    async def test_factory_resolution_error(self, environment, factory, capsys):
        """Unknown contract stops before deploying"""
        environment.get_contract_factory = AsyncMock(
            side_effect=FactoryResolutionError(CONTRACT_NAME, "Artifact for contract \"HyperBlockLabs\" not found")
        )

        exit_code = await DeployRunner(environment).run()

        captured = capsys.readouterr()
        assert exit_code == 1
        assert captured.out == ''
        assert 'FactoryResolutionError' in captured.err
        factory.deploy.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_submission_error(self, environment, factory, capsys):
        """Transaction could not be sent"""
        factory.deploy = AsyncMock(side_effect=DeploymentSubmissionError("Insufficient funds for deployment"))

        exit_code = await DeployRunner(environment).run()

        captured = capsys.readouterr()
        assert exit_code == 1
        assert 'deployed to' not in captured.out
        assert 'Insufficient funds for deployment' in captured.err

    @pytest.mark.asyncio
    async def test_confirmation_error(self, environment, handle, capsys):
        """Reverted deployment"""
        handle.wait_for_confirmation = AsyncMock(
            side_effect=DeploymentConfirmationError("HyperBlockLabs deployment reverted", tx_hash='0x01')
        )

        exit_code = await DeployRunner(environment).run()

        captured = capsys.readouterr()
        assert exit_code == 1
        assert 'deployed to' not in captured.out
        assert 'reverted' in captured.err

    @pytest.mark.asyncio
    async def test_traceback_written_to_stderr(self, environment):
        """The full error, traceback included, goes to stderr"""
        environment.get_contract_factory = AsyncMock(side_effect=RuntimeError("boom"))
        stderr = io.StringIO()

        await DeployRunner(environment, stdout=io.StringIO(), stderr=stderr).run()

        assert 'Traceback' in stderr.getvalue()
        assert 'RuntimeError: boom' in stderr.getvalue()

    @pytest.mark.asyncio
    async def test_configuration_error_without_environment(self, capsys):
        """Default environment is built inside the error boundary"""
        with patch.object(
            DeploymentEnvironment,
            'from_config',
            side_effect=ConfigurationError("Unknown network \"mainnet\"")
        ):
            exit_code = await DeployRunner().run()

        captured = capsys.readouterr()
        assert exit_code == 1
        assert captured.out == ''
        assert 'Unknown network' in captured.err

    @pytest.mark.asyncio
    async def test_default_environment_used(self, environment, capsys):
        """Without an injected environment, one is loaded from config"""
        with patch.object(DeploymentEnvironment, 'from_config', return_value=environment) as from_config:
            exit_code = await DeployRunner().run()

        assert exit_code == 0
        from_config.assert_called_once_with()
        assert capsys.readouterr().out == "HyperBlockLabs deployed to: 0xABC123...\n"


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
