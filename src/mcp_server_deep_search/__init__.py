"""MCP server for web search, content extraction, and deep research."""

from .config import settings
from .exceptions import DeepSearchError, ExtractionError, FetchError, ResearchError, SearchError
from .extraction import extract_content
from .research import deep_research
from .search import academic_search, news_search, web_search
from .server import main, serve

__all__ = [
    "main",
    "serve",
    "settings",
    "web_search",
    "news_search",
    "academic_search",
    "extract_content",
    "deep_research",
    "DeepSearchError",
    "FetchError",
    "SearchError",
    "ExtractionError",
    "ResearchError",
]
