"""Gemini client and response header parsing."""

import logging
import ssl
from dataclasses import dataclass

from ..errors import GeminiStatusError, MalformedHeaderError
from .protocols import decode
from .transport import CRLF, LineTransport, make_tls_context

DEFAULT_PORT = 1965

STATUS_CATEGORIES = {
    "3": "Redirect",
    "4": "Temporary failure",
    "5": "Permanent failure",
    "6": "Client certificate required",
}

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeminiHeader:
    status: str
    meta: str


@dataclass
class GeminiResponse:
    """Successful Gemini response."""

    header: GeminiHeader
    body: bytes

    @property
    def status(self) -> str:
        return self.header.status

    @property
    def meta(self) -> str:
        return self.header.meta

    @property
    def text(self) -> str:
        """Body decoded as UTF-8."""
        return decode(self.body)

    def render(self) -> str:
        """Body with the status and meta prepended, separated by a blank line."""
        return f"Status: {self.status}\nMeta: {self.meta}\n\n{self.text}"


def split_header(raw: bytes) -> tuple[bytes, bytes]:
    """Split at the first CRLF. Without one, the header is empty."""
    header, sep, body = raw.partition(CRLF)
    if not sep:
        return b"", raw
    return header, body


def parse_header(line: str) -> GeminiHeader:
    tokens = line.split()
    if len(tokens) < 2:
        raise MalformedHeaderError("Invalid status line format")
    return GeminiHeader(status=tokens[0], meta=" ".join(tokens[1:]))


def parse_response(raw: bytes) -> GeminiResponse:
    """Parse a full Gemini response.

    Returns the response for 2x statuses and raises for everything else:
    ``GeminiStatusError`` for non-success codes, ``MalformedHeaderError`` when
    the status line is unusable.
    """
    header_bytes, body = split_header(raw)
    header = parse_header(decode(header_bytes))
    code = header.status

    if len(code) == 2 and code.isdigit() and code[0] == "2":
        return GeminiResponse(header=header, body=body)

    category = STATUS_CATEGORIES.get(code[0]) if len(code) == 2 and code.isdigit() else None
    if category is None:
        detail = f"Unknown status code: {code} - {header.meta}"
    else:
        detail = f"{category} ({code}): {header.meta}"
    raise GeminiStatusError(detail, status=code, meta=header.meta)


class GeminiClient:
    """Fetches a Gemini URL over TLS."""

    def __init__(
        self,
        transport: LineTransport | None = None,
        verify_certificates: bool = False,
    ):
        self.transport = transport or LineTransport()
        self.tls_context: ssl.SSLContext = make_tls_context(verify_certificates)

    async def request(self, host: str, port: int, url: str) -> GeminiResponse:
        """Send ``url`` and return the parsed successful response."""
        logger.debug("gemini request %s:%d url=%s", host, port, url)
        raw = await self.transport.request(host, port, url, tls=self.tls_context)
        response = parse_response(raw)
        logger.debug("gemini %s %s (%d body bytes)", response.status, response.meta, len(response.body))
        return response

    async def fetch(self, host: str, port: int, url: str) -> str:
        return (await self.request(host, port, url)).render()
