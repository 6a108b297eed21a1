from typing import Callable, Optional

from ..config import (
    ConfigLoader,
    ConfigServerClient,
    RefreshEventHandler,
    ServiceConfig,
    StartupOptions,
)
from ..config.settings import BROKER_URL_KEY, CONFIG_EVENT_BUS_KEY, SERVER_PORT_KEY
from ..logging import BaseLogger
from ..messaging import Delivery, MessagingClient
from ..shutdown import ShutdownCoordinator
from ..web import WebServer

APP_NAME = "vipservice"
VIP_QUEUE = "vip_queue"
CONFIG_EVENT_EXCHANGE_TYPE = "topic"

# No graceful exit path exists: stopping on a signal is reported as a failure.
SIGNAL_EXIT_CODE = 1
FATAL_EXIT_CODE = 1

MessagingClientFactory = Callable[[BaseLogger], MessagingClient]
WebServerFactory = Callable[[int, BaseLogger], WebServer]


class VipService:
    """Bootstraps the service: configuration, messaging, shutdown and HTTP."""

    def __init__(
        self,
        options: StartupOptions,
        logger: BaseLogger,
        coordinator: ShutdownCoordinator,
        config_client: Optional[ConfigServerClient] = None,
        messaging_factory: Optional[MessagingClientFactory] = None,
        web_server_factory: Optional[WebServerFactory] = None,
        app_name: str = APP_NAME,
    ):
        """
        Initialize the service.

        Args:
            options: Parameters for reaching the config server
            logger: Logger instance
            coordinator: Shutdown coordinator owning signal handling and cleanup
            config_client: Client used to fetch configuration
            messaging_factory: Creates the messaging client
            web_server_factory: Creates the web server for a port
            app_name: Application name used for config lookup and consumer tags
        """
        self.options = options
        self.logger = logger
        self.coordinator = coordinator
        self.app_name = app_name
        self.config_loader = ConfigLoader(
            config_client or ConfigServerClient(logger),
            options,
            app_name,
            logger
        )
        self.messaging_factory = messaging_factory or MessagingClient
        self.web_server_factory = web_server_factory or WebServer
        self.messaging_client: Optional[MessagingClient] = None
        self.web_server: Optional[WebServer] = None

    async def run(self) -> int:
        """Run the bootstrap sequence and serve until shutdown is requested.

        Returns:
            int: The process exit code

        Raises:
            ConfigServerError: If configuration can't be loaded
            MissingConfigurationError: If a required key is absent
            BrokerConnectionError: If the broker can't be reached
            SubscriptionError: If a subscription can't be set up
        """
        self.logger.log_info(f"Starting {self.app_name}...")

        config = await self.config_loader.load()
        await self.initialize_messaging(config)

        self.coordinator.setup_signal_handlers()

        port = config.require_port(SERVER_PORT_KEY)
        self.web_server = self.web_server_factory(port, self.logger)
        await self.web_server.serve(self.coordinator.stop_event)

        if self.coordinator.received_signal is not None:
            self.logger.log_info(
                f"{self.app_name} stopped by {self.coordinator.received_signal.name}"
            )
        return SIGNAL_EXIT_CODE

    async def initialize_messaging(self, config: ServiceConfig) -> None:
        """Connect to the broker and set up both subscriptions."""
        broker_url = config.require(BROKER_URL_KEY)

        self.messaging_client = self.messaging_factory(self.logger)
        # Makes sure the connection is closed when the service exits.
        self.coordinator.register_handler("messaging", self.close_messaging)
        await self.messaging_client.connect(broker_url)

        await self.messaging_client.subscribe_to_queue(VIP_QUEUE, self.app_name, self.on_message)

        event_bus = config.require(CONFIG_EVENT_BUS_KEY)
        await self.messaging_client.subscribe(
            event_bus,
            CONFIG_EVENT_EXCHANGE_TYPE,
            self.app_name,
            RefreshEventHandler(self.config_loader, self.app_name, self.logger)
        )

    def on_message(self, delivery: Delivery) -> None:
        self.logger.log_delivery(VIP_QUEUE, delivery.text())

    async def close_messaging(self) -> None:
        if self.messaging_client is not None:
            await self.messaging_client.close()
