from .errors import ConfigServerError, InvalidConfigurationError, MissingConfigurationError
from .settings import StartupOptions, CloudConfig, PropertySource, ServiceConfig
from .client import ConfigServerClient, build_config_url
from .loader import ConfigLoader
from .refresh import RefreshEventHandler, UpdateToken

__all__ = [
    'ConfigServerError',
    'MissingConfigurationError',
    'InvalidConfigurationError',
    'StartupOptions',
    'CloudConfig',
    'PropertySource',
    'ServiceConfig',
    'ConfigServerClient',
    'build_config_url',
    'ConfigLoader',
    'RefreshEventHandler',
    'UpdateToken'
]
