"""Tests for URL resolution and the fallback chain."""

import pytest

from holloway.config import NavigatorSettings
from holloway.core import FingerClient, GeminiClient, GopherClient
from holloway.errors import (
    ConnectionFailedError,
    GeminiStatusError,
    InvalidUrlError,
    MissingHostError,
    UnsupportedSchemeError,
)
from holloway.parsers.gophermap import parse_menu
from holloway.resolver import (
    PARSE_STRATEGIES,
    Resolver,
    get_start_page,
    parse_absolute,
    parse_input,
)

from .conftest import FakeClient


@pytest.fixture
def clients():
    return {"gemini": FakeClient(), "gopher": FakeClient(), "finger": FakeClient()}


@pytest.fixture
def resolver(clients):
    return Resolver(
        gemini_client=clients["gemini"],
        gopher_client=clients["gopher"],
        finger_client=clients["finger"],
    )


class TestParsing:
    def test_strategy_order(self):
        """Direct parse is tried before the gemini:// prefix."""
        assert [name for name, _ in PARSE_STRATEGIES] == ["direct", "gemini-prefix"]

    def test_absolute_url_parses_directly(self):
        url, parts = parse_input("gopher://example.org/1/menu")
        assert url == "gopher://example.org/1/menu"
        assert parts.scheme == "gopher"

    def test_bare_host_gets_gemini_prefix(self):
        """Input without a scheme is retried with gemini://."""
        url, parts = parse_input("example.org/page")
        assert url == "gemini://example.org/page"
        assert parts.hostname == "example.org"

    def test_text_with_spaces_does_not_parse(self):
        assert parse_input("hello world") is None

    def test_bad_port_does_not_parse(self):
        assert parse_absolute("gemini://example.org:99999/") is None
        assert parse_absolute("gemini://example.org:abc/") is None

    def test_scheme_required(self):
        assert parse_absolute("example.org") is None


class TestGemini:
    async def test_adds_trailing_slash(self, resolver, clients):
        """gemini://example.org is requested as gemini://example.org/."""
        await resolver.navigate("gemini://example.org")
        assert clients["gemini"].calls == [("example.org", 1965, "gemini://example.org/")]

    async def test_prefixed_input_is_reconstructed(self, resolver, clients):
        await resolver.navigate("example.org")
        assert clients["gemini"].calls == [("example.org", 1965, "gemini://example.org/")]

    async def test_url_with_path_is_sent_verbatim(self, resolver, clients):
        await resolver.navigate("gemini://example.org:1966/docs/index.gmi")
        assert clients["gemini"].calls == [
            ("example.org", 1966, "gemini://example.org:1966/docs/index.gmi")
        ]

    async def test_slash_inserted_before_query(self, resolver, clients):
        await resolver.navigate("gemini://example.org?query")
        assert clients["gemini"].calls[0][2] == "gemini://example.org/?query"

    async def test_success_returns_content(self, clients):
        clients["gemini"] = FakeClient("Status: 20\nMeta: text/gemini\n\nhi")
        resolver = Resolver(gemini_client=clients["gemini"])

        assert await resolver.navigate("gemini://example.org/") == "Status: 20\nMeta: text/gemini\n\nhi"

    async def test_failure_falls_back_to_search(self):
        """A failed primary fetch is retried as a search for the original input."""
        gemini = FakeClient(ConnectionFailedError("TCP connection failed"), "search results")
        resolver = Resolver(gemini_client=gemini)

        content = await resolver.navigate("example.gmi")

        assert content == "search results"
        assert gemini.calls == [
            ("example.gmi", 1965, "gemini://example.gmi/"),
            ("kennedy.gemi.dev", 1965, "gemini://kennedy.gemi.dev/search?example.gmi"),
        ]

    async def test_fallback_failure_echoes_target(self):
        """When both attempts fail, the fallback error is reported for the original URL."""
        gemini = FakeClient(
            ConnectionFailedError("TCP connection failed"),
            GeminiStatusError("Temporary failure (41): busy", status="41", meta="busy"),
        )
        resolver = Resolver(gemini_client=gemini)

        with pytest.raises(GeminiStatusError) as exc_info:
            await resolver.navigate("gemini://example.org")

        assert str(exc_info.value) == (
            "Failed to fetch gemini://example.org/: Temporary failure (41): busy"
        )
        assert len(gemini.calls) == 2

    async def test_fallback_uses_unmodified_input(self):
        gemini = FakeClient(ConnectionFailedError("down"), "ok")
        resolver = Resolver(gemini_client=gemini)

        await resolver.navigate("gemini://example.org")

        assert gemini.calls[1][2] == "gemini://kennedy.gemi.dev/search?gemini://example.org"

    async def test_missing_host(self, resolver, clients):
        with pytest.raises(MissingHostError, match="Invalid host in URL"):
            await resolver.navigate("gemini://")
        assert clients["gemini"].calls == []


class TestSearchFallback:
    async def test_unparseable_input_is_searched(self, resolver, clients):
        """Input failing both parses goes straight to the search host."""
        await resolver.navigate("hello world")
        assert clients["gemini"].calls == [
            ("kennedy.gemi.dev", 1965, "gemini://kennedy.gemi.dev/search?hello%20world")
        ]

    async def test_search_failure_is_invalid_url(self):
        gemini = FakeClient(ConnectionFailedError("TCP connection failed"))
        resolver = Resolver(gemini_client=gemini)

        with pytest.raises(InvalidUrlError, match="Invalid URL format"):
            await resolver.navigate("hello world")
        assert len(gemini.calls) == 1

    def test_search_target_default(self, resolver):
        target = resolver.search_target("example.gmi")
        assert (target.host, target.port) == ("kennedy.gemi.dev", 1965)
        assert target.selector == "gemini://kennedy.gemi.dev/search?example.gmi"

    def test_search_target_custom_port(self):
        resolver = Resolver(search_host="search.local", search_port=1966)
        target = resolver.search_target("a b")
        assert target.selector == "gemini://search.local:1966/search?a%20b"
        assert target.port == 1966


class TestGopher:
    async def test_default_port_and_selector(self, resolver, clients):
        await resolver.navigate("gopher://example.org/1/menu")
        assert clients["gopher"].calls == [("example.org", 70, "/1/menu")]

    async def test_menu_item_url_round_trip(self, resolver, clients):
        """A selector with spaces reaches the server decoded."""
        (item,) = parse_menu("0My file\t/docs/my file.txt\texample.org\t70")

        await resolver.navigate(item.url)

        assert clients["gopher"].calls == [("example.org", 70, "/0/docs/my file.txt")]

    async def test_explicit_port(self, resolver, clients):
        await resolver.navigate("gopher://example.org:7070/")
        assert clients["gopher"].calls == [("example.org", 7070, "/")]

    async def test_failure_is_not_retried(self, clients):
        gopher = FakeClient(ConnectionFailedError("TCP connection failed: refused"))
        resolver = Resolver(gemini_client=clients["gemini"], gopher_client=gopher)

        with pytest.raises(ConnectionFailedError) as exc_info:
            await resolver.navigate("gopher://example.org/")

        assert str(exc_info.value) == (
            "Failed to fetch gopher://example.org/: TCP connection failed: refused"
        )
        assert clients["gemini"].calls == []


class TestFinger:
    @pytest.mark.parametrize(
        "url, username",
        [
            ("finger://user@example.org", "user"),
            ("finger://example.org/bob", "bob"),
            ("finger://example.org", ""),
            ("finger://example.org/", ""),
        ],
    )
    async def test_username(self, resolver, clients, url, username):
        await resolver.navigate(url)
        assert clients["finger"].calls == [("example.org", 79, username)]

    async def test_failure_is_not_retried(self, clients):
        finger = FakeClient(ConnectionFailedError("timed out"))
        resolver = Resolver(gemini_client=clients["gemini"], finger_client=finger)

        with pytest.raises(ConnectionFailedError):
            await resolver.navigate("finger://example.org")
        assert clients["gemini"].calls == []


class TestUnsupported:
    async def test_http_rejected(self, resolver, clients):
        with pytest.raises(UnsupportedSchemeError) as exc_info:
            await resolver.navigate("http://example.org/")
        assert "Failed to fetch http://example.org/" in str(exc_info.value)
        assert all(not client.calls for client in clients.values())


class TestResolverSetup:
    def test_start_page(self):
        assert get_start_page() == "gemini://gemini.circumlunar.space/"

    def test_default_clients(self):
        resolver = Resolver()
        assert isinstance(resolver.clients["gemini"], GeminiClient)
        assert isinstance(resolver.clients["gopher"], GopherClient)
        assert isinstance(resolver.clients["finger"], FingerClient)

    def test_from_settings(self):
        config = NavigatorSettings(connect_timeout=3.0, search_host="search.local", read_timeout=None)
        resolver = Resolver.from_settings(config)

        assert resolver.search_host == "search.local"
        transport = resolver.clients["gopher"].transport
        assert transport.connect_timeout == 3.0
        assert transport.read_timeout is None
