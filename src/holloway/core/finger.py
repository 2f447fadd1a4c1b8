"""Finger client."""

import logging

from .protocols import decode
from .transport import LineTransport

DEFAULT_PORT = 79

logger = logging.getLogger(__name__)


class FingerClient:
    """Queries a finger server. An empty username asks for the user listing."""

    def __init__(self, transport: LineTransport | None = None):
        self.transport = transport or LineTransport()

    async def fetch(self, host: str, port: int, username: str) -> str:
        logger.debug("finger request %s:%d user=%r", host, port, username)
        return decode(await self.transport.request(host, port, username))
