from typing import Dict, Optional
import aiohttp
from aiohttp import ClientTimeout


class AioSessionCache:
    """Lazily creates one aiohttp session and hands it out until closed."""

    def __init__(self, headers: Optional[Dict[str, str]] = None):
        self.headers = headers or {}
        self.client_session: Optional[aiohttp.ClientSession] = None

    async def get_session(self, timeout: float) -> aiohttp.ClientSession:
        if self.client_session is None or self.client_session.closed is True:
            self.client_session = aiohttp.ClientSession(
                timeout=ClientTimeout(total=timeout),
                headers=self.headers
            )
        return self.client_session

    async def close(self):
        if self.client_session:
            await self.client_session.close()
            self.client_session = None
