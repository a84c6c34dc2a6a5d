"""Templated summary and key-finding heuristics for deep research.

This is placeholder logic: findings are the first long-enough sentence of each
source, and the summary is a fixed sentence template. No semantic synthesis.
"""

import re
from urllib.parse import urlparse

from ..models import ExtractedContent, SearchResult

_SENTENCE_BOUNDARY = re.compile(r"[.!?]+")


def first_meaningful_sentence(text: str, min_length: int = 50, max_length: int = 200) -> str | None:
    """Return the first sentence longer than min_length characters, cut to max_length."""
    for sentence in _SENTENCE_BOUNDARY.split(text):
        sentence = sentence.strip()
        if len(sentence) > min_length:
            return sentence[:max_length]
    return None


def extract_key_findings(
    contents: list[ExtractedContent],
    min_length: int = 50,
    max_length: int = 200,
    limit: int = 5,
) -> list[str]:
    """One finding per source, in source order, capped at limit."""
    findings: list[str] = []
    for content in contents:
        if len(findings) >= limit:
            break
        finding = first_meaningful_sentence(content.content, min_length, max_length)
        if finding:
            findings.append(finding)
    return findings


def source_label(result: SearchResult) -> str:
    """Displayed source label of a result, or its URL hostname."""
    return result.source or urlparse(result.url).hostname or result.url


def build_summary(
    query: str,
    contents: list[ExtractedContent],
    analyzed: list[SearchResult],
    total_results: int,
) -> str:
    """Summary sentence for a research run.

    Args:
        query: The research query.
        contents: Successful extractions.
        analyzed: Search results that extraction was attempted on.
        total_results: Number of search results found.
    """
    if not contents:
        return (
            f'Research for "{query}" found {total_results} results but analyzed 0 sources: '
            "could not extract detailed content."
        )

    total_words = sum(c.metadata.word_count for c in contents)
    labels = ", ".join(source_label(r) for r in analyzed)
    return (
        f'Research completed for "{query}". Analyzed {len(contents)} sources with a total of '
        f"{total_words} words. Key topics covered include information from {labels}."
    )
