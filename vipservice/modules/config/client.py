import asyncio
from typing import Optional

import aiohttp
from pydantic import ValidationError

from .aio_client_cache import AioSessionCache
from .errors import ConfigServerError
from .settings import CloudConfig
from ..logging import BaseLogger


def build_config_url(server_url: str, app_name: str, profile: str, branch: str) -> str:
    """Build the config server resource URL for an application."""
    return f"{server_url.rstrip('/')}/{app_name}/{profile}/{branch}"


class ConfigServerClient:
    """Fetches application configuration from a Spring Cloud Config server."""

    def __init__(
        self,
        logger: BaseLogger,
        timeout: float = 10,
        session_cache: Optional[AioSessionCache] = None,
    ):
        """Initialize the client.

        Args:
            logger: Logger instance
            timeout: Total request timeout in seconds
            session_cache: Optional session cache for the HTTP session
        """
        self.logger = logger
        self.timeout = timeout
        self.session_cache = session_cache or AioSessionCache(headers={"Accept": "application/json"})

    async def fetch(self, server_url: str, app_name: str, profile: str, branch: str) -> CloudConfig:
        """Fetch the configuration for an application.

        Args:
            server_url: Base address of the config server
            app_name: Application name
            profile: Environment profile
            branch: Configuration branch (label)

        Returns:
            CloudConfig: The parsed server response

        Raises:
            ConfigServerError: If the server cannot be reached, answers with a
                non-success status, or returns a body that cannot be parsed
        """
        url = build_config_url(server_url, app_name, profile, branch)
        self.logger.log_info(f"Loading config from {url}")

        client = await self.session_cache.get_session(timeout=self.timeout)
        try:
            response = await client.get(url)
            body = await response.read()
            if response.status >= 300:
                raise ConfigServerError(
                    f"Couldn't load configuration, config server at {url} returned status {response.status}"
                )
            return CloudConfig.model_validate_json(body)
        except aiohttp.ClientError as err:
            raise ConfigServerError(f"Couldn't load configuration from {url}: {str(err)}") from err
        except asyncio.TimeoutError as err:
            raise ConfigServerError(f"Timed out loading configuration from {url}") from err
        except ValidationError as err:
            raise ConfigServerError(f"Couldn't parse configuration from {url}: {str(err)}") from err
        finally:
            await self.session_cache.close()
