"""One-shot line request over TCP (optionally TLS), read until the peer closes."""

import asyncio
import logging
import socket
import ssl

from ..errors import (
    AddressResolutionError,
    ConnectionFailedError,
    TlsHandshakeError,
    TransportIOError,
)

logger = logging.getLogger(__name__)

CRLF = b"\r\n"
READ_CHUNK_SIZE = 65536


def make_tls_context(verify_certificates: bool = False) -> ssl.SSLContext:
    """Build the client TLS context.

    With ``verify_certificates`` off, any certificate chain and any hostname
    are accepted.
    """
    ctx = ssl.create_default_context()
    if not verify_certificates:
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
    # Many capsules close the socket without sending close_notify.
    ctx.options |= getattr(ssl, "OP_IGNORE_UNEXPECTED_EOF", 0)
    return ctx


class LineTransport:
    """Send a single request line and collect the response until EOF.

    A new connection is opened for every request and closed afterwards.
    """

    def __init__(
        self,
        connect_timeout: float = 10.0,
        read_timeout: float | None = None,
        max_response_bytes: int | None = None,
    ):
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self.max_response_bytes = max_response_bytes

    async def request(
        self,
        host: str,
        port: int,
        line: str,
        tls: ssl.SSLContext | None = None,
    ) -> bytes:
        """Write ``line + CRLF`` to host:port and return every byte received."""
        address = await self._resolve(host, port)

        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(address, port),
                timeout=self.connect_timeout,
            )
        except TimeoutError as e:
            raise ConnectionFailedError(
                f"TCP connection failed: timed out after {self.connect_timeout}s"
            ) from e
        except OSError as e:
            raise ConnectionFailedError(f"TCP connection failed: {e}") from e
        logger.debug("Connected to %s:%d (%s)", host, port, address)

        try:
            if tls is not None:
                try:
                    await writer.start_tls(tls, server_hostname=host)
                except (ssl.SSLError, OSError) as e:
                    raise TlsHandshakeError(f"TLS connection failed: {e}") from e

            try:
                writer.write(line.encode("utf-8") + CRLF)
                await writer.drain()
            except OSError as e:
                raise TransportIOError(f"Failed to send request: {e}") from e

            data = await self._read_to_close(reader)
        finally:
            await self._close(writer)

        logger.debug("Read %d bytes from %s:%d", len(data), host, port)
        return data

    async def _resolve(self, host: str, port: int) -> str:
        loop = asyncio.get_running_loop()
        try:
            infos = await loop.getaddrinfo(host, port, type=socket.SOCK_STREAM)
        except (socket.gaierror, UnicodeError) as e:
            raise AddressResolutionError(f"Failed to resolve socket address: {e}") from e
        if not infos:
            raise AddressResolutionError("No socket addresses found")
        return infos[0][4][0]

    async def _read_to_close(self, reader: asyncio.StreamReader) -> bytes:
        chunks: list[bytes] = []
        total = 0
        while True:
            try:
                chunk = await asyncio.wait_for(
                    reader.read(READ_CHUNK_SIZE), timeout=self.read_timeout
                )
            except TimeoutError as e:
                raise TransportIOError(
                    f"Failed to read response: no data for {self.read_timeout}s"
                ) from e
            except (ssl.SSLError, OSError) as e:
                raise TransportIOError(f"Failed to read response: {e}") from e

            if not chunk:
                break
            chunks.append(chunk)
            total += len(chunk)
            if self.max_response_bytes is not None and total > self.max_response_bytes:
                raise TransportIOError(
                    f"Failed to read response: exceeded {self.max_response_bytes} bytes"
                )
        return b"".join(chunks)

    async def _close(self, writer: asyncio.StreamWriter):
        writer.close()
        try:
            await writer.wait_closed()
        except (ssl.SSLError, OSError) as e:
            # The response is already complete at this point.
            logger.debug("Ignoring error while closing connection: %s", e)
