import asyncio
from typing import Optional

from aiohttp import web

from ..logging import BaseLogger


async def health(request: web.Request) -> web.Response:
    return web.json_response({"status": "UP"})


def create_app() -> web.Application:
    """Create the aiohttp application with the service routes."""
    app = web.Application()
    app.router.add_get('/health', health)
    return app


class WebServer:
    """HTTP listener for the service."""

    def __init__(self, port: int, logger: BaseLogger, host: str = "0.0.0.0"):
        self.port = port
        self.host = host
        self.logger = logger
        self.app: Optional[web.Application] = None
        self.runner: Optional[web.AppRunner] = None
        self.site: Optional[web.TCPSite] = None

    async def start(self) -> None:
        """Start listening on the configured port."""
        self.logger.log_info(f"Starting HTTP service at {self.port}")
        self.app = create_app()
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()

        self.site = web.TCPSite(self.runner, self.host, self.port)
        await self.site.start()
        self.logger.log_info(f"HTTP service started on http://{self.host}:{self.port}")

    async def stop(self) -> None:
        """Stop the listener and release the runner."""
        if self.site:
            await self.site.stop()
            self.site = None
        if self.runner:
            await self.runner.cleanup()
            self.runner = None
        self.logger.log_info("HTTP service stopped")

    async def serve(self, stop_event: asyncio.Event) -> None:
        """Serve HTTP until stop_event is set."""
        await self.start()
        try:
            await stop_event.wait()
        finally:
            await self.stop()
