"""Pytest configuration and fixtures for mcp-server-deep-search tests."""

from collections.abc import Awaitable, Callable
from pathlib import Path

import httpx
import pytest

from mcp_server_deep_search.config import AppSettings

FIXTURES_DIR = Path(__file__).parent / "fixtures"

Handler = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "e2e: End-to-end tests against the live search provider")


@pytest.fixture
def anyio_backend():
    return "asyncio"


def load_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def search_html() -> str:
    """Saved DuckDuckGo HTML results page with five results."""
    return load_fixture("search_results.html")


@pytest.fixture
def article_html() -> str:
    """Saved blog article page with metadata and page chrome."""
    return load_fixture("article.html")


@pytest.fixture
def app_config() -> AppSettings:
    """Settings built from defaults, independent of the user's config file."""
    return AppSettings()


@pytest.fixture
def make_client() -> Callable[[Handler], httpx.AsyncClient]:
    """Factory for httpx clients served by an in-process handler instead of the network."""

    def _make(handler: Handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)

    return _make
