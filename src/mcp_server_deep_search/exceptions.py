"""Custom exceptions for the MCP deep search server."""


class DeepSearchError(Exception):
    """Base exception for MCP deep search errors."""

    pass


class FetchError(DeepSearchError):
    """Raised when an outbound HTTP fetch fails (transport, timeout or non-2xx status)."""

    def __init__(self, message: str, url: str, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class SearchError(DeepSearchError):
    """Raised when a search provider query fails."""

    pass


class ExtractionError(DeepSearchError):
    """Raised when content extraction from a URL fails."""

    pass


class ResearchError(DeepSearchError):
    """Raised when a deep research run cannot complete."""

    pass
