import pytest
from click.testing import CliRunner
from unittest.mock import MagicMock, patch

from vipservice.main import cli
from vipservice.modules.config.errors import InvalidConfigurationError, MissingConfigurationError
from vipservice.modules.messaging.errors import SubscriptionError


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def service_cls():
    with patch("vipservice.main.VipService") as service_cls:
        service_cls.return_value.run = MagicMock(return_value="run-coroutine")
        yield service_cls


def run_cli(runner, args, run_result=1, run_error=None):
    with patch("vipservice.main.ShutdownCoordinator") as coordinator_cls:
        coordinator = coordinator_cls.return_value
        if run_error is not None:
            coordinator.run.side_effect = run_error
        else:
            coordinator.run.return_value = run_result
        result = runner.invoke(cli, args)
    return result, coordinator


def test_default_startup_options(runner, service_cls):
    result, coordinator = run_cli(runner, [])

    options = service_cls.call_args[0][0]
    assert options.config_server_url == "http://configserver:8888"
    assert options.profile == "test"
    assert options.config_branch == "master"
    coordinator.run.assert_called_once_with("run-coroutine")
    assert result.exit_code == 1


def test_startup_options_from_flags(runner, service_cls):
    run_cli(runner, [
        "--configServerUrl", "http://localhost:8888",
        "--profile", "dev",
        "--configBranch", "P8",
        "--output", "plain",
    ])

    options = service_cls.call_args[0][0]
    assert options.config_server_url == "http://localhost:8888"
    assert options.profile == "dev"
    assert options.config_branch == "P8"


def test_fatal_startup_error_exits_non_zero(runner, service_cls):
    result, _ = run_cli(runner, ["-o", "plain"], run_error=MissingConfigurationError("amqp_server_url"))

    assert result.exit_code == 1
    assert "Fatal error: No 'amqp_server_url' set in configuration, cannot start" in result.output


def test_subscription_error_exits_non_zero(runner, service_cls):
    result, _ = run_cli(
        runner, ["-o", "plain"],
        run_error=SubscriptionError("vip_queue", "ACCESS_REFUSED")
    )

    assert result.exit_code == 1
    assert "Could not start subscribe to vip_queue" in result.output


def test_invalid_output(runner, service_cls):
    result, _ = run_cli(runner, ["--output", "xml"])

    assert result.exit_code == 2
    service_cls.assert_not_called()


def test_unexpected_error_is_logged(runner, service_cls):
    result, _ = run_cli(runner, ["-o", "plain"], run_error=OSError(98, "address already in use"))

    assert result.exit_code == 1
    assert "Fatal error: OSError: [Errno 98] address already in use" in result.output


def test_invalid_configuration_exits_non_zero(runner, service_cls):
    result, _ = run_cli(runner, ["-o", "plain"], run_error=InvalidConfigurationError("server_port", "http"))

    assert result.exit_code == 1
    assert "Fatal error: Invalid value 'http' for 'server_port' in configuration, cannot start" in result.output


def test_keyboard_interrupt_before_startup(runner, service_cls):
    result, _ = run_cli(runner, ["-o", "plain"], run_error=KeyboardInterrupt())

    assert result.exit_code == 1
    assert "Interrupted before startup completed" in result.output
