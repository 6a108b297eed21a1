import click
from .base import BaseLogger
import sys


class ColorfulLogger(BaseLogger):
    """Logger that outputs colorful text for local development."""

    def __init__(self, log_level: str = "INFO"):
        super().__init__(log_level)
        self.logger.configure(
            handlers=[{
                "sink": sys.stdout,
                "colorize": True,
                "format": "<cyan>{time:YYYY-MM-DD HH:mm:ss.SSS}</cyan> | "
                         "<level>{level: <8}</level> | "
                         "<white>{message}</white>",
                "level": log_level
            }]
        )

    def log_delivery(self, source: str, body: str):
        self.logger.info(click.style(f"Got a message from {source}:", fg="cyan", bold=True))
        self.logger.info(click.style(body, fg="white"))

    def log_config_source(self, name: str, key_count: int):
        self.logger.info(
            click.style("Property source ", fg="blue") +
            click.style(name, fg="blue", bold=True) +
            click.style(f" ({key_count} keys)", fg="white")
        )

    def log_error(self, message: str):
        self.logger.error(click.style(message, fg="red", bold=True))

    def log_warning(self, message: str):
        self.logger.warning(click.style(message, fg="yellow", bold=True))

    def log_info(self, message: str):
        self.logger.info(click.style(message, fg="white"))

    def log_debug(self, message: str):
        self.logger.debug(click.style(message, fg="blue"))
