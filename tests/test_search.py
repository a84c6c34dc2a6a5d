"""Tests for search provider queries and result parsing."""

from urllib.parse import quote

import httpx
import pytest

from mcp_server_deep_search.config import SelectorSettings
from mcp_server_deep_search.exceptions import SearchError
from mcp_server_deep_search.fetcher import is_absolute_url
from mcp_server_deep_search.search import (
    academic_search,
    news_search,
    parse_search_results,
    unwrap_redirect_url,
    web_search,
)

ENDPOINT = "https://html.duckduckgo.com/html/"


def _wrap(url: str) -> str:
    return f"//duckduckgo.com/l/?uddg={quote(url, safe='')}&rut=f00"


class TestUnwrapRedirectUrl:
    """Redirect link decoding."""

    @pytest.mark.parametrize(
        "target",
        [
            "https://example.com/",
            "https://example.com/path/to/page.html",
            "https://example.com/search?q=rust+ownership&page=2",
            "http://example.com/unicode/caf%C3%A9",
            "https://sub.example.co.uk/a#section",
        ],
    )
    def test_round_trip(self, target):
        """Decoding a wrapped URL should give back the original target."""
        assert unwrap_redirect_url(_wrap(target)) == target

    def test_param_at_end_of_href(self):
        assert unwrap_redirect_url("/l/?kh=-1&uddg=https%3A%2F%2Fexample.com%2Fx") == "https://example.com/x"

    def test_plain_href_unchanged(self):
        assert unwrap_redirect_url("https://example.com/page") == "https://example.com/page"

    def test_custom_param(self):
        assert unwrap_redirect_url("/url?target=https%3A%2F%2Fexample.com&x=1", param="target") == "https://example.com"

    def test_similar_param_name_ignored(self):
        href = "https://example.com/?xuddg=abc"
        assert unwrap_redirect_url(href) == href


class TestParseSearchResults:
    """Parsing of saved result pages."""

    def test_cap_returns_first_results_in_document_order(self, search_html):
        """web_search("rust ownership", 3) over five results yields exactly the first three."""
        results = parse_search_results(search_html, 3, SelectorSettings(), base_url=ENDPOINT)

        assert [r.title for r in results] == [
            "What is Ownership? - The Rust Programming Language",
            "Understanding Ownership in Rust",
            "The Borrow Checker Explained",
        ]

    def test_all_results_parsed(self, search_html):
        results = parse_search_results(search_html, 20, SelectorSettings(), base_url=ENDPOINT)

        assert len(results) == 5
        assert all(r.title for r in results)
        assert all(is_absolute_url(r.url) for r in results)

    def test_redirect_urls_unwrapped(self, search_html):
        results = parse_search_results(search_html, 20, SelectorSettings(), base_url=ENDPOINT)

        assert results[0].url == "https://doc.rust-lang.org/book/ch04-01-what-is-ownership.html"
        assert results[1].url == "https://www.example.org/rust/ownership?ref=ddg&lang=en"
        assert results[2].url == "https://blog.example.com/posts/rust-borrow-checker"

    def test_snippet_and_source(self, search_html):
        results = parse_search_results(search_html, 20, SelectorSettings(), base_url=ENDPOINT)

        assert results[1].snippet == "A practical guide to ownership, borrowing and lifetimes."
        assert results[0].source == "doc.rust-lang.org/book/ch04-01-what-is-ownership.html"
        assert results[3].source is None

    def test_malformed_entries_dropped(self):
        html = """
        <div class="result"><h2 class="result__title"><a href="https://example.com/ok">Good</a></h2></div>
        <div class="result"><h2 class="result__title"><a href="https://example.com/no-title">   </a></h2></div>
        <div class="result"><h2 class="result__title"><a>No link</a></h2></div>
        <div class="result"><h2 class="result__title"><a href="javascript:void(0)">Script link</a></h2></div>
        <div class="result"><a class="result__snippet">Only a snippet</a></div>
        <div class="result"><h2 class="result__title"><a href="//example.net/relative">Protocol relative</a></h2></div>
        """
        results = parse_search_results(html, 10, SelectorSettings(), base_url=ENDPOINT)

        assert [(r.title, r.url) for r in results] == [
            ("Good", "https://example.com/ok"),
            ("Protocol relative", "https://example.net/relative"),
        ]

    def test_malformed_nodes_use_up_cap_slots(self):
        """The cap counts visited result nodes, so a dropped node still takes its slot."""
        html = """
        <div class="result"><h2 class="result__title"><a>Broken</a></h2></div>
        <div class="result"><h2 class="result__title"><a href="https://a.example">A</a></h2></div>
        <div class="result"><h2 class="result__title"><a href="https://b.example">B</a></h2></div>
        """
        assert [r.title for r in parse_search_results(html, 2, SelectorSettings(), base_url=ENDPOINT)] == ["A"]
        assert [r.title for r in parse_search_results(html, 1, SelectorSettings(), base_url=ENDPOINT)] == []
        assert [r.title for r in parse_search_results(html, 3, SelectorSettings(), base_url=ENDPOINT)] == ["A", "B"]

    def test_zero_cap(self, search_html):
        assert parse_search_results(search_html, 0, SelectorSettings(), base_url=ENDPOINT) == []

    def test_no_matching_nodes_is_empty(self):
        assert parse_search_results("<html><body><p>No results.</p></body></html>", 10, SelectorSettings()) == []

    def test_injected_selector_table(self):
        """A different result markup should parse with a different selector table and no code change."""
        html = """
        <ol>
          <li class="hit"><h3><a href="/go?to=https%3A%2F%2Fexample.com%2Fa">Alpha</a></h3><p class="desc">First</p><cite>example.com</cite></li>
          <li class="hit"><h3><a href="https://example.com/b">Beta</a></h3><p class="desc">Second</p></li>
        </ol>
        """
        selectors = SelectorSettings(
            result="li.hit",
            result_title="h3 a",
            result_snippet="p.desc",
            result_source="cite",
            redirect_param="to",
        )
        results = parse_search_results(html, 10, selectors, base_url="https://search.example/")

        assert [(r.title, r.url, r.snippet, r.source) for r in results] == [
            ("Alpha", "https://example.com/a", "First", "example.com"),
            ("Beta", "https://example.com/b", "Second", None),
        ]


class TestWebSearch:
    """web_search against an in-process transport."""

    @pytest.mark.anyio
    async def test_sends_query_and_browser_headers(self, search_html, app_config, make_client):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text=search_html)

        async with make_client(handler) as client:
            results = await web_search("rust ownership", 3, client=client, config=app_config)

        assert len(results) == 3
        assert len(seen) == 1
        request = seen[0]
        assert request.method == "GET"
        assert request.url.host == "html.duckduckgo.com"
        assert request.url.params["q"] == "rust ownership"
        assert "Mozilla/5.0" in request.headers["User-Agent"]
        assert request.headers["Accept-Language"] == "en-US,en;q=0.5"

    @pytest.mark.anyio
    async def test_empty_page_returns_no_results(self, app_config, make_client):
        async with make_client(lambda request: httpx.Response(200, text="<html></html>")) as client:
            assert await web_search("nothing", client=client, config=app_config) == []

    @pytest.mark.anyio
    async def test_non_success_status_raises(self, app_config, make_client):
        async with make_client(lambda request: httpx.Response(503, text="busy")) as client:
            with pytest.raises(SearchError, match="503"):
                await web_search("rust", client=client, config=app_config)

    @pytest.mark.anyio
    async def test_timeout_raises(self, app_config, make_client):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("read timed out", request=request)

        async with make_client(handler) as client:
            with pytest.raises(SearchError, match="timed out"):
                await web_search("rust", client=client, config=app_config)

    @pytest.mark.anyio
    async def test_transport_error_raises(self, app_config, make_client):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with make_client(handler) as client:
            with pytest.raises(SearchError, match="Web search failed"):
                await web_search("rust", client=client, config=app_config)


class TestQueryRewritingSearches:
    """news_search and academic_search only rewrite the query."""

    @pytest.mark.anyio
    @pytest.mark.parametrize(
        ("search", "suffix"),
        [(news_search, "news latest"), (academic_search, "research paper study")],
    )
    async def test_matches_web_search_with_suffix(self, search, suffix, search_html, app_config, make_client):
        queries: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            queries.append(request.url.params["q"])
            return httpx.Response(200, text=search_html)

        async with make_client(handler) as client:
            wrapped = await search("rust ownership", 4, client=client, config=app_config)
            direct = await web_search(f"rust ownership {suffix}", 4, client=client, config=app_config)

        assert queries == [f"rust ownership {suffix}", f"rust ownership {suffix}"]
        assert wrapped == direct

    @pytest.mark.anyio
    async def test_suffix_is_configurable(self, search_html, app_config, make_client):
        queries: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            queries.append(request.url.params["q"])
            return httpx.Response(200, text=search_html)

        config = app_config.model_copy(update={"search": app_config.search.model_copy(update={"news_suffix": "headlines"})})
        async with make_client(handler) as client:
            await news_search("rust", client=client, config=config)

        assert queries == ["rust headlines"]
