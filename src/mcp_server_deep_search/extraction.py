"""Best-effort main content and metadata extraction from arbitrary HTML pages."""

import logging
import re

import httpx
from bs4 import BeautifulSoup

from .config import AppSettings, ExtractionSettings, SelectorSettings, settings
from .exceptions import ExtractionError, FetchError
from .fetcher import browser_headers, ensure_absolute_url, fetch_html
from .models import ContentMetadata, ExtractedContent

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run, newlines included, to a single space and trim."""
    return _WHITESPACE.sub(" ", text).strip()


def count_words(text: str) -> int:
    return len(text.split())


def _first_meta_value(soup: BeautifulSoup, selectors: list[str]) -> str | None:
    """Value of the first matching tag that has a non-empty content or datetime attribute."""
    for selector in selectors:
        el = soup.select_one(selector)
        if el is None:
            continue
        value = el.get("content") or el.get("datetime")
        if isinstance(value, list):
            value = " ".join(value)
        if value and value.strip():
            return value.strip()
    return None


def _resolve_title(soup: BeautifulSoup, selectors: SelectorSettings, fallback: str) -> str:
    title_el = soup.select_one("title")
    if title_el is not None and title_el.get_text().strip():
        return title_el.get_text().strip()

    meta_title = _first_meta_value(soup, selectors.title_meta)
    if meta_title:
        return meta_title

    heading = soup.select_one("h1")
    if heading is not None and heading.get_text().strip():
        return heading.get_text().strip()

    return fallback


def _main_text(soup: BeautifulSoup, containers: list[str]) -> str:
    for selector in containers:
        el = soup.select_one(selector)
        if el is None:
            continue
        text = el.get_text(" ")
        if text.strip():
            logger.debug(f"Main content matched selector {selector!r}")
            return text

    body = soup.body or soup
    return body.get_text(" ")


def parse_content(
    html: str,
    url: str,
    selectors: SelectorSettings,
    extraction: ExtractionSettings,
) -> ExtractedContent:
    """Build an ExtractedContent record from a raw HTML document."""
    soup = BeautifulSoup(html, "html.parser")

    if selectors.strip_tags:
        for element in soup.select(", ".join(selectors.strip_tags)):
            element.decompose()

    title = _resolve_title(soup, selectors, extraction.fallback_title)
    content = normalize_whitespace(_main_text(soup, selectors.content_containers))
    content = content[: extraction.max_content_length]

    return ExtractedContent(
        title=title,
        content=content,
        url=url,
        metadata=ContentMetadata(
            description=_first_meta_value(soup, selectors.description_meta),
            author=_first_meta_value(soup, selectors.author_meta),
            published_date=_first_meta_value(soup, selectors.published_meta),
            word_count=count_words(content),
        ),
    )


async def extract_content(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    config: AppSettings | None = None,
) -> ExtractedContent:
    """Fetch a page and extract its title, main text and metadata.

    Raises:
        ExtractionError: If the URL is not absolute, or the fetch fails.
    """
    cfg = config or settings

    try:
        ensure_absolute_url(url)
        html = await fetch_html(
            url,
            client=client,
            headers=browser_headers(cfg.search, include_language=False),
            timeout=cfg.search.timeout,
        )
    except (ValueError, FetchError) as e:
        logger.error(f"Content extraction error: {e}")
        raise ExtractionError(f"Content extraction failed: {e}") from e

    extracted = parse_content(html, url, cfg.selectors, cfg.extraction)
    logger.info(f"Extracted {extracted.metadata.word_count} words from {url}")
    return extracted
