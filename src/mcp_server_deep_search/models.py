"""Data models for search results, extracted pages, and research reports."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

MAX_KEY_FINDINGS = 5


class SearchResult(BaseModel):
    """A single entry parsed from a search provider's result list."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)
    url: str  # absolute http(s) URL, redirect wrapper already removed
    snippet: str = ""
    source: str | None = None  # displayed source label, e.g. "example.com/page"


class ContentMetadata(BaseModel):
    """Metadata gathered from <meta> tags and the extracted text."""

    model_config = ConfigDict(frozen=True)

    description: str | None = None
    author: str | None = None
    published_date: str | None = None
    word_count: int = 0


class ExtractedContent(BaseModel):
    """Best-effort main content of a fetched page."""

    model_config = ConfigDict(frozen=True)

    title: str
    content: str
    url: str
    metadata: ContentMetadata = Field(default_factory=ContentMetadata)


class ResearchResult(BaseModel):
    """Outcome of a deep research run."""

    model_config = ConfigDict(frozen=True)

    query: str
    summary: str
    sources: list[SearchResult] = Field(default_factory=list)
    key_findings: list[str] = Field(default_factory=list, max_length=MAX_KEY_FINDINGS)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
