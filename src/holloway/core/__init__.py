"""Protocol clients."""

from .finger import FingerClient
from .gemini import GeminiClient, GeminiHeader, GeminiResponse, parse_response
from .gopher import GopherClient
from .protocols import Client, ParsedTarget
from .transport import LineTransport

__all__ = [
    "Client",
    "FingerClient",
    "GeminiClient",
    "GeminiHeader",
    "GeminiResponse",
    "GopherClient",
    "LineTransport",
    "ParsedTarget",
    "parse_response",
]
