import sys
from .base import BaseLogger


class JsonLogger(BaseLogger):
    """Logger that emits one JSON record per line for log shippers."""

    def __init__(self, log_level: str = "INFO"):
        super().__init__(log_level)
        # Configure loguru for JSON output
        self.logger.configure(
            handlers=[{
                "sink": sys.stdout,
                "serialize": True,
                "format": "{time} | {level} | {message}",
                "level": log_level
            }]
        )

    def log_delivery(self, source: str, body: str):
        self.logger.bind(type="delivery", source=source, body=body).info(f"Got a message: {body}")

    def log_config_source(self, name: str, key_count: int):
        self.logger.bind(type="config_source", name=name, key_count=key_count).info(
            f"Loaded property source {name}"
        )

    def log_error(self, message: str):
        self.logger.bind(type="error").error(message)

    def log_warning(self, message: str):
        self.logger.bind(type="warning").warning(message)

    def log_info(self, message: str):
        self.logger.bind(type="info").info(message)

    def log_debug(self, message: str):
        self.logger.bind(type="debug").debug(message)
