from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .errors import InvalidConfigurationError, MissingConfigurationError

DEFAULT_CONFIG_SERVER_URL = "http://configserver:8888"
DEFAULT_PROFILE = "test"
DEFAULT_CONFIG_BRANCH = "master"

BROKER_URL_KEY = "amqp_server_url"
CONFIG_EVENT_BUS_KEY = "config_event_bus"
SERVER_PORT_KEY = "server_port"
SERVER_NAME_KEY = "server_name"


class StartupOptions(BaseModel):
    """Parameters needed to reach the config server."""
    config_server_url: str = DEFAULT_CONFIG_SERVER_URL
    profile: str = DEFAULT_PROFILE  # Environment profile, similar to spring profiles
    config_branch: str = DEFAULT_CONFIG_BRANCH  # git branch to fetch configuration from


class PropertySource(BaseModel):
    name: str = ""
    source: Dict[str, Any] = Field(default_factory=dict)


class CloudConfig(BaseModel):
    """Response body of a Spring Cloud Config server."""
    name: str = ""
    profiles: List[str] = Field(default_factory=list)
    label: Optional[str] = None
    version: Optional[str] = None
    state: Optional[str] = None
    propertySources: List[PropertySource] = Field(default_factory=list)

    def merged_source(self) -> Dict[str, Any]:
        """Merge all property sources, earlier sources taking precedence."""
        merged: Dict[str, Any] = {}
        for property_source in reversed(self.propertySources):
            merged.update(property_source.source)
        return merged


class ServiceConfig(BaseModel):
    """Configuration values loaded for one run of the service."""
    properties: Dict[str, Any] = Field(default_factory=dict)

    def is_set(self, key: str) -> bool:
        return self.properties.get(key) not in (None, "")

    def get(self, key: str, default: Any = None) -> Any:
        return self.properties.get(key, default)

    def require(self, key: str) -> Any:
        """Return a configuration value, failing if it is absent.

        Raises:
            MissingConfigurationError: If the key is not set
        """
        if not self.is_set(key):
            raise MissingConfigurationError(key)
        return self.properties[key]

    def require_port(self, key: str = SERVER_PORT_KEY) -> int:
        """Return a required TCP port number.

        Raises:
            MissingConfigurationError: If the key is not set
            InvalidConfigurationError: If the value is not a port number
        """
        value = self.require(key)
        try:
            port = int(value)
        except (TypeError, ValueError) as err:
            raise InvalidConfigurationError(key, value) from err
        if isinstance(value, bool) or not 0 <= port <= 65535:
            raise InvalidConfigurationError(key, value)
        return port

    @property
    def amqp_server_url(self) -> Optional[str]:
        return self.get(BROKER_URL_KEY)

    @property
    def config_event_bus(self) -> Optional[str]:
        return self.get(CONFIG_EVENT_BUS_KEY)

    @property
    def server_port(self) -> Optional[int]:
        return self.require_port() if self.is_set(SERVER_PORT_KEY) else None

    @property
    def server_name(self) -> Optional[str]:
        return self.get(SERVER_NAME_KEY)
