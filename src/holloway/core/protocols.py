"""Protocol definitions for the protocol clients."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class ParsedTarget:
    """Where and what to fetch for one navigation."""

    scheme: str
    host: str
    port: int
    selector: str


class Client(Protocol):
    """Protocol for scheme clients."""

    async def fetch(self, host: str, port: int, selector: str) -> str:
        """Send ``selector`` to host:port and return the decoded reply."""
        ...


def decode(content: bytes) -> str:
    """Decode content as UTF-8, replacing invalid sequences."""
    return content.decode("utf-8", errors="replace")
