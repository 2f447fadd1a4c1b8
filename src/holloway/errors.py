"""Error kinds raised while resolving and fetching a URL."""


class NavigationError(Exception):
    """Base class for every navigation failure.

    ``str(error)`` is the text shown to the caller. When ``url`` is set the
    detail is prefixed with the URL that was being fetched.
    """

    def __init__(self, detail: str, url: str | None = None):
        super().__init__(detail)
        self.detail = detail
        self.url = url

    def __str__(self) -> str:
        if self.url:
            return f"Failed to fetch {self.url}: {self.detail}"
        return self.detail


class InvalidUrlError(NavigationError):
    """Input could not be parsed and the search fallback failed too."""


class UnsupportedSchemeError(NavigationError):
    def __init__(self, scheme: str, url: str | None = None):
        super().__init__(
            f"Unsupported scheme {scheme!r}: only gemini://, gopher://, "
            "and finger:// URLs are supported",
            url=url,
        )
        self.scheme = scheme


class MissingHostError(NavigationError):
    def __init__(self, url: str | None = None):
        super().__init__("Invalid host in URL", url=url)


class AddressResolutionError(NavigationError):
    """Host name did not resolve to any address."""


class ConnectionFailedError(NavigationError):
    """TCP connect failed or timed out."""


class TlsHandshakeError(NavigationError):
    """TLS session could not be established."""


class TransportIOError(NavigationError):
    """Read or write failed after the connection was open."""


class MalformedHeaderError(NavigationError):
    """Gemini status line is missing required tokens."""


class GeminiStatusError(NavigationError):
    """Gemini server answered with a non-success status."""

    def __init__(self, detail: str, status: str, meta: str, url: str | None = None):
        super().__init__(detail, url=url)
        self.status = status
        self.meta = meta
