"""URL resolution: parse the input, pick a client, apply the search fallback."""

import logging
import re
from collections.abc import Callable
from urllib.parse import SplitResult, quote, unquote, urlsplit, urlunsplit

from .config import NavigatorSettings, settings
from .core import Client, FingerClient, GeminiClient, GopherClient, LineTransport, ParsedTarget
from .core import finger, gemini, gopher
from .errors import InvalidUrlError, MissingHostError, NavigationError, UnsupportedSchemeError

START_PAGE = "gemini://gemini.circumlunar.space/"
GEMINI_PREFIX = "gemini://"

DEFAULT_PORTS = {
    "gemini": gemini.DEFAULT_PORT,
    "gopher": gopher.DEFAULT_PORT,
    "finger": finger.DEFAULT_PORT,
}

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
_FORBIDDEN_HOST_CHARS = frozenset(" \t\n\r<>^|\"\\")
_QUERY_SAFE = "/:@!$&()*+,;="

logger = logging.getLogger(__name__)


def get_start_page() -> str:
    """Default page for a new session."""
    return START_PAGE


def parse_absolute(text: str) -> SplitResult | None:
    """Parse ``text`` as an absolute URL, or return None if it is not one."""
    if not _SCHEME_RE.match(text):
        return None
    try:
        parts = urlsplit(text)
        parts.port  # raises ValueError for a non-numeric or out-of-range port
    except ValueError:
        return None
    if any(c in _FORBIDDEN_HOST_CHARS for c in parts.netloc):
        return None
    return parts


def _parse_direct(text: str) -> tuple[str, SplitResult | None]:
    return text, parse_absolute(text)


def _parse_gemini_prefixed(text: str) -> tuple[str, SplitResult | None]:
    prefixed = GEMINI_PREFIX + text
    return prefixed, parse_absolute(prefixed)


# Tried in order; the first strategy that yields a URL wins.
PARSE_STRATEGIES: tuple[tuple[str, Callable[[str], tuple[str, SplitResult | None]]], ...] = (
    ("direct", _parse_direct),
    ("gemini-prefix", _parse_gemini_prefixed),
)


def parse_input(text: str) -> tuple[str, SplitResult] | None:
    """Run the parse strategies. Returns the URL text that parsed and its parts."""
    for name, strategy in PARSE_STRATEGIES:
        url, parts = strategy(text)
        if parts is not None:
            logger.debug("Parsed %r using %s strategy", text, name)
            return url, parts
    return None


def gemini_request_url(url: str, parts: SplitResult) -> str:
    """Normalize the URL sent on the wire: ``gemini://`` prefix and a non-empty path."""
    if not url.startswith(GEMINI_PREFIX):
        url = urlunsplit(parts._replace(scheme="gemini"))
    normalized = urlsplit(url)
    if not normalized.path:
        url = urlunsplit(normalized._replace(path="/"))
    return url


def finger_username(parts: SplitResult) -> str:
    if parts.username:
        return parts.username
    path = parts.path
    return path[1:] if path.startswith("/") else path


def build_target(url: str, parts: SplitResult) -> ParsedTarget:
    """Turn a parsed URL into a host, port and scheme-specific selector."""
    scheme = parts.scheme.lower()
    if scheme not in DEFAULT_PORTS:
        raise UnsupportedSchemeError(scheme)
    if not parts.hostname:
        raise MissingHostError()
    port = parts.port or DEFAULT_PORTS[scheme]

    if scheme == "gemini":
        selector = gemini_request_url(url, parts)
    elif scheme == "gopher":
        selector = unquote(parts.path)
    else:
        selector = finger_username(parts)

    return ParsedTarget(scheme=scheme, host=parts.hostname, port=port, selector=selector)


class Resolver:
    """Resolves a user-entered URL into page text.

    Gemini targets that fail are retried once as a search query; Gopher and
    Finger failures are returned as they are.
    """

    def __init__(
        self,
        gemini_client: Client | None = None,
        gopher_client: Client | None = None,
        finger_client: Client | None = None,
        search_host: str = "kennedy.gemi.dev",
        search_port: int = gemini.DEFAULT_PORT,
    ):
        self.clients: dict[str, Client] = {
            "gemini": gemini_client or GeminiClient(),
            "gopher": gopher_client or GopherClient(),
            "finger": finger_client or FingerClient(),
        }
        self.search_host = search_host
        self.search_port = search_port

    @classmethod
    def from_settings(cls, config: NavigatorSettings = settings) -> "Resolver":
        transport = LineTransport(
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
            max_response_bytes=config.max_response_bytes,
        )
        return cls(
            gemini_client=GeminiClient(transport, verify_certificates=config.verify_certificates),
            gopher_client=GopherClient(transport),
            finger_client=FingerClient(transport),
            search_host=config.search_host,
            search_port=config.search_port,
        )

    def search_target(self, query: str) -> ParsedTarget:
        """Gemini target that searches for ``query`` on the search host."""
        netloc = self.search_host
        if self.search_port != gemini.DEFAULT_PORT:
            netloc = f"{netloc}:{self.search_port}"
        url = f"gemini://{netloc}/search?{quote(query, safe=_QUERY_SAFE)}"
        return ParsedTarget(scheme="gemini", host=self.search_host, port=self.search_port, selector=url)

    def gemini_attempts(self, target: ParsedTarget, query: str) -> list[tuple[str, ParsedTarget]]:
        """Ordered fetch attempts for a Gemini target."""
        return [("primary", target), ("search", self.search_target(query))]

    async def navigate(self, url: str) -> str:
        """Fetch ``url`` and return its text, raising ``NavigationError`` on failure."""
        parsed = parse_input(url.strip())
        if parsed is None:
            return await self._search_unparseable(url)

        try:
            target = build_target(*parsed)
        except NavigationError as e:
            e.url = e.url or url
            raise

        if target.scheme == "gemini":
            return await self._fetch_gemini(target, url)

        try:
            return await self._fetch(target)
        except NavigationError as e:
            e.url = e.url or url
            raise

    async def _fetch(self, target: ParsedTarget) -> str:
        client = self.clients[target.scheme]
        return await client.fetch(target.host, target.port, target.selector)

    async def _fetch_gemini(self, target: ParsedTarget, query: str) -> str:
        *earlier, (_, last) = self.gemini_attempts(target, query)
        for name, attempt in earlier:
            try:
                return await self._fetch(attempt)
            except NavigationError as e:
                logger.warning("Gemini %s fetch of %s failed: %s", name, attempt.selector, e)

        try:
            return await self._fetch(last)
        except NavigationError as e:
            e.url = target.selector
            raise

    async def _search_unparseable(self, url: str) -> str:
        search = self.search_target(url)
        logger.info("Could not parse %r as a URL, searching via %s", url, search.selector)
        try:
            return await self._fetch(search)
        except NavigationError as e:
            raise InvalidUrlError(
                f"Invalid URL format: {url!r} (search fallback failed: {e})"
            ) from e


async def navigate(url: str) -> str:
    """Navigate to a Gemini, Gopher or Finger URL and return the plaintext content."""
    return await Resolver.from_settings().navigate(url)
