import sys

import click

from vipservice.modules.config import (
    ConfigServerError,
    InvalidConfigurationError,
    MissingConfigurationError,
    StartupOptions,
)
from vipservice.modules.config.settings import (
    DEFAULT_CONFIG_BRANCH,
    DEFAULT_CONFIG_SERVER_URL,
    DEFAULT_PROFILE,
)
from vipservice.modules.logging import create_logger
from vipservice.modules.messaging import BrokerConnectionError, SubscriptionError
from vipservice.modules.service import APP_NAME, FATAL_EXIT_CODE, VipService
from vipservice.modules.shutdown import ShutdownCoordinator

FATAL_ERRORS = (
    ConfigServerError,
    MissingConfigurationError,
    InvalidConfigurationError,
    BrokerConnectionError,
    SubscriptionError,
)


@click.command(name=APP_NAME)
@click.option('--configServerUrl', 'config_server_url',
              default=DEFAULT_CONFIG_SERVER_URL,
              show_default=True,
              help='Address to config server')
@click.option('--profile',
              default=DEFAULT_PROFILE,
              show_default=True,
              help='Environment profile, something similar to spring profiles')
@click.option('--configBranch', 'config_branch',
              default=DEFAULT_CONFIG_BRANCH,
              show_default=True,
              help='git branch to fetch configuration from')
@click.option('--output', '-o',
              type=click.Choice(['json', 'plain', 'colorful']),
              default='json',
              help='Log output format (json for log shippers, plain for files, colorful for local runs)',
              envvar='VIPSERVICE_OUTPUT')
@click.option('--log-level', '-l',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
              default='INFO',
              help='Set the logging level',
              envvar='VIPSERVICE_LOG_LEVEL')
def cli(config_server_url, profile, config_branch, output, log_level):
    """VIP service: consumes VIP events and serves HTTP."""
    logger = create_logger(output, log_level)
    options = StartupOptions(
        config_server_url=config_server_url,
        profile=profile,
        config_branch=config_branch
    )
    coordinator = ShutdownCoordinator(logger)
    service = VipService(options, logger, coordinator)

    try:
        exit_code = coordinator.run(service.run())
    except FATAL_ERRORS as err:
        logger.log_error(f"Fatal error: {str(err)}")
        exit_code = FATAL_EXIT_CODE
    except KeyboardInterrupt:
        logger.log_info("Interrupted before startup completed")
        exit_code = FATAL_EXIT_CODE
    except Exception as err:
        logger.log_error(f"Fatal error: {type(err).__name__}: {str(err)}")
        exit_code = FATAL_EXIT_CODE

    sys.exit(exit_code)

def main():
    cli()

if __name__ == '__main__':
    main()
