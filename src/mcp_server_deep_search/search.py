"""Search provider queries and result-list parsing."""

import logging
import re
from urllib.parse import unquote, urljoin

import httpx
from bs4 import BeautifulSoup, Tag

from .config import AppSettings, SelectorSettings, settings
from .exceptions import FetchError, SearchError
from .fetcher import browser_headers, fetch_html, is_absolute_url
from .models import SearchResult

logger = logging.getLogger(__name__)


def unwrap_redirect_url(href: str, param: str = "uddg") -> str:
    """Return the decoded target of a provider redirect link, or href unchanged.

    DuckDuckGo wraps outbound links as ``//duckduckgo.com/l/?uddg=<encoded>&rut=...``.
    """
    if f"{param}=" not in href:
        return href

    match = re.search(rf"(?:^|[?&;]){re.escape(param)}=([^&#]+)", href)
    if not match:
        return href
    return unquote(match.group(1))


def _text(node: Tag | None) -> str:
    if node is None:
        return ""
    return node.get_text().strip()


def parse_search_results(
    html: str,
    max_results: int,
    selectors: SelectorSettings,
    base_url: str = "",
) -> list[SearchResult]:
    """Parse a provider results page into at most max_results records, in document order.

    Only the first max_results result nodes are visited. Entries without a
    title or without a resolvable absolute URL are skipped but still use up
    their slot. A page with no matching nodes yields an empty list, not an error.
    """
    soup = BeautifulSoup(html, "html.parser")
    results: list[SearchResult] = []

    for index, node in enumerate(soup.select(selectors.result)):
        if index >= max_results:
            break

        title_el = node.select_one(selectors.result_title)
        title = _text(title_el)
        href = str(title_el.get("href") or "") if title_el is not None else ""

        url = unwrap_redirect_url(href, selectors.redirect_param) if href else ""
        if url and base_url:
            url = urljoin(base_url, url)

        if not title or not is_absolute_url(url):
            logger.debug(f"Skipping result without title or URL: title={title[:50]!r} href={href[:100]!r}")
            continue

        source = _text(node.select_one(selectors.result_source))
        results.append(
            SearchResult(
                title=title,
                url=url,
                snippet=_text(node.select_one(selectors.result_snippet)),
                source=source or None,
            )
        )

    return results


async def web_search(
    query: str,
    max_results: int = 10,
    *,
    client: httpx.AsyncClient | None = None,
    config: AppSettings | None = None,
) -> list[SearchResult]:
    """Query the search provider and return up to max_results results.

    Raises:
        SearchError: On transport failure, timeout, or a non-2xx response.
    """
    cfg = config or settings
    search = cfg.search

    logger.info(f"Searching for: {query[:100]} (max_results={max_results})")
    try:
        html = await fetch_html(
            search.endpoint,
            client=client,
            headers=browser_headers(search),
            params={search.query_param: query},
            timeout=search.timeout,
        )
    except FetchError as e:
        logger.error(f"Web search error: {e}")
        raise SearchError(f"Web search failed: {e}") from e

    results = parse_search_results(html, max_results, cfg.selectors, base_url=search.endpoint)
    logger.info(f"Search returned {len(results)} results for: {query[:100]}")
    return results


async def news_search(
    query: str,
    max_results: int = 10,
    *,
    client: httpx.AsyncClient | None = None,
    config: AppSettings | None = None,
) -> list[SearchResult]:
    """Search for recent news by appending the news keyword suffix."""
    cfg = config or settings
    return await web_search(f"{query} {cfg.search.news_suffix}", max_results, client=client, config=cfg)


async def academic_search(
    query: str,
    max_results: int = 10,
    *,
    client: httpx.AsyncClient | None = None,
    config: AppSettings | None = None,
) -> list[SearchResult]:
    """Search for papers and studies by appending the academic keyword suffix."""
    cfg = config or settings
    return await web_search(f"{query} {cfg.search.academic_suffix}", max_results, client=client, config=cfg)
