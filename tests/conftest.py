import asyncio

import pytest


class FakeClient:
    """Client double that records requests and replays canned results."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls: list[tuple[str, int, str]] = []

    async def fetch(self, host: str, port: int, selector: str) -> str:
        self.calls.append((host, port, selector))
        result = self.results.pop(0) if self.results else "ok"
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
async def line_server():
    """Start local TCP servers that read one request line and reply with canned bytes."""
    servers = []

    async def start(response: bytes = b"", hold_open: bool = False):
        received: list[bytes] = []

        async def handle(reader, writer):
            received.append(await reader.readline())
            writer.write(response)
            await writer.drain()
            if hold_open:
                await reader.read()
            writer.close()

        server = await asyncio.start_server(handle, "127.0.0.1", 0)
        servers.append(server)
        port = server.sockets[0].getsockname()[1]
        return port, received

    yield start

    for server in servers:
        server.close()
        await server.wait_closed()
