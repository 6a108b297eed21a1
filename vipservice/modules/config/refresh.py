"""Handling of configuration refresh events published on the config bus."""

from typing import Optional

from pydantic import BaseModel, ValidationError

from .loader import ConfigLoader
from ..logging import BaseLogger
from ..messaging.delivery import Delivery


class UpdateToken(BaseModel):
    """Body of a RefreshRemoteApplicationEvent."""
    type: str = ""
    timestamp: Optional[int] = None
    originService: str = ""
    destinationService: str = ""
    id: str = ""


class RefreshEventHandler:
    """Reloads configuration when a refresh event targets this application."""

    def __init__(self, loader: ConfigLoader, app_name: str, logger: BaseLogger):
        self.loader = loader
        self.app_name = app_name
        self.logger = logger

    def parse(self, delivery: Delivery) -> Optional[UpdateToken]:
        try:
            return UpdateToken.model_validate_json(delivery.body)
        except ValidationError as err:
            self.logger.log_error(f"Problem parsing UpdateToken: {str(err)}")
            return None

    def targets_this_service(self, token: UpdateToken) -> bool:
        return self.app_name in token.destinationService

    async def __call__(self, delivery: Delivery) -> bool:
        """Handle one refresh event.

        Returns:
            bool: True if the configuration was reloaded
        """
        token = self.parse(delivery)
        if token is None:
            return False

        if not self.targets_this_service(token):
            self.logger.log_debug(
                f"Ignoring refresh event {token.id} for {token.destinationService}"
            )
            return False

        await self.loader.reload()
        return True
