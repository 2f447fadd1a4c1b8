"""Gopher client."""

import logging

from .protocols import decode
from .transport import LineTransport

DEFAULT_PORT = 70

logger = logging.getLogger(__name__)


class GopherClient:
    """Sends a selector and returns whatever the server streams back."""

    def __init__(self, transport: LineTransport | None = None):
        self.transport = transport or LineTransport()

    async def fetch(self, host: str, port: int, selector: str) -> str:
        logger.debug("gopher request %s:%d selector=%r", host, port, selector)
        return decode(await self.transport.request(host, port, selector))
