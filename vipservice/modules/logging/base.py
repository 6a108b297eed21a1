from abc import ABC, abstractmethod
from loguru import logger


class BaseLogger(ABC):
    """Abstract base class for service loggers."""

    def __init__(self, log_level: str = "INFO"):
        self.logger = logger
        self.log_level = log_level

    @abstractmethod
    def log_delivery(self, source: str, body: str):
        """Log a message delivered by the broker."""
        pass

    @abstractmethod
    def log_config_source(self, name: str, key_count: int):
        """Log a property source received from the config server."""
        pass

    @abstractmethod
    def log_error(self, message: str):
        """Log an error message."""
        pass

    @abstractmethod
    def log_warning(self, message: str):
        """Log a warning message."""
        pass

    @abstractmethod
    def log_info(self, message: str):
        """Log an info message."""
        pass

    @abstractmethod
    def log_debug(self, message: str):
        """Log a debug message."""
        pass
