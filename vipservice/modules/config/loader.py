from typing import Optional

from .client import ConfigServerClient
from .errors import ConfigServerError
from .settings import ServiceConfig, StartupOptions
from ..logging import BaseLogger


class ConfigLoader:
    """Loads the service configuration and keeps the current copy.

    The loader is created once at startup and handed to every component that
    needs configuration, including the refresh handler that reloads it.
    """

    def __init__(
        self,
        client: ConfigServerClient,
        options: StartupOptions,
        app_name: str,
        logger: BaseLogger,
    ):
        self.client = client
        self.options = options
        self.app_name = app_name
        self.logger = logger
        self._current: Optional[ServiceConfig] = None

    @property
    def current(self) -> ServiceConfig:
        """The most recently loaded configuration."""
        if self._current is None:
            raise ConfigServerError("Configuration has not been loaded yet")
        return self._current

    async def load(self) -> ServiceConfig:
        """Fetch configuration from the config server and make it current.

        Raises:
            ConfigServerError: If the configuration cannot be fetched
        """
        cloud_config = await self.client.fetch(
            self.options.config_server_url,
            self.app_name,
            self.options.profile,
            self.options.config_branch,
        )
        if not cloud_config.propertySources:
            self.logger.log_warning(
                f"Config server returned no property sources for {self.app_name}/{self.options.profile}"
            )
        for property_source in cloud_config.propertySources:
            self.logger.log_config_source(property_source.name, len(property_source.source))

        config = ServiceConfig(properties=cloud_config.merged_source())
        self._current = config

        if config.server_name:
            self.logger.log_info(f"Successfully loaded configuration for service {config.server_name}")
        return config

    async def reload(self) -> ServiceConfig:
        """Reload configuration, replacing the current copy on success."""
        self.logger.log_info("Reloading config from config server")
        return await self.load()
