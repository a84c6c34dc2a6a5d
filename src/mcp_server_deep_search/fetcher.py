"""Single-shot HTTP fetches with a browser-like identity."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import urlparse

import httpx

from .config import SearchSettings
from .exceptions import FetchError

logger = logging.getLogger(__name__)


def is_absolute_url(url: str) -> bool:
    """Return True for well-formed absolute http(s) URLs."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def ensure_absolute_url(url: str) -> str:
    """Validate that url is an absolute http(s) URL and return it unchanged."""
    if not is_absolute_url(url):
        raise ValueError(f"Invalid URL '{url}': expected an absolute http(s) URL")
    return url


def browser_headers(search: SearchSettings, include_language: bool = True) -> dict[str, str]:
    """Headers mimicking a desktop browser; search requests also send Accept-Language."""
    headers = {
        "User-Agent": search.user_agent,
        "Accept": search.accept,
    }
    if include_language:
        headers["Accept-Language"] = search.accept_language
    return headers


@asynccontextmanager
async def http_client(client: httpx.AsyncClient | None = None, timeout: float = 10.0) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the given client, or a short-lived one that is closed on exit."""
    if client is not None:
        yield client
        return

    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as owned:
        yield owned


async def fetch_html(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
    timeout: float = 10.0,
) -> str:
    """GET a page and return its body text.

    Timeouts, transport errors and non-2xx responses all raise FetchError;
    there is no retry.
    """
    try:
        async with http_client(client, timeout) as session:
            response = await session.get(url, headers=headers, params=params, timeout=timeout)
    except httpx.TimeoutException as e:
        raise FetchError(f"Request to {url} timed out after {timeout:g}s", url=url) from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise FetchError(f"Request to {url} failed: {str(e) or type(e).__name__}", url=url) from e

    if not response.is_success:
        raise FetchError(
            f"Request to {url} failed with status {response.status_code}",
            url=url,
            status_code=response.status_code,
        )

    logger.debug(f"Fetched {response.url} ({len(response.content)} bytes)")
    return response.text
