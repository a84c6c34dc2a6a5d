"""Configuration management using Pydantic settings with optional file persistence."""

import json
import os
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Paths ---

APP_NAME = "mcp-server-deep-search"


def get_config_dir() -> Path:
    """Get the configuration directory (e.g. ~/.config/mcp-server-deep-search)."""
    if os.name == "nt":
        base = Path(os.environ.get("APPDATA", Path.home() / ".config")).expanduser()
    else:
        base = Path("~/.config").expanduser()

    path = base / APP_NAME
    path.mkdir(parents=True, exist_ok=True)
    return path


CONFIG_FILE = get_config_dir() / "config.json"


def load_config_file() -> dict[str, Any]:
    """Load settings from the JSON config file if it exists."""
    if not CONFIG_FILE.exists():
        return {}

    try:
        text = CONFIG_FILE.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        return json.loads(text)
    except (OSError, json.JSONDecodeError):
        return {}


def save_config_file(config_data: dict[str, Any]) -> None:
    """Save settings to the JSON config file."""
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(config_data, indent=2), encoding="utf-8")


DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"


class SearchSettings(BaseSettings):
    """Search provider and outbound HTTP configuration."""

    model_config = SettingsConfigDict(env_prefix="MCP_SEARCH_")

    endpoint: str = Field(default="https://html.duckduckgo.com/html/", description="HTML results page of the search provider")
    query_param: str = Field(default="q")
    timeout: float = Field(default=10.0, description="Timeout per outbound fetch in seconds")
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    accept: str = Field(default="text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8")
    accept_language: str = Field(default="en-US,en;q=0.5")
    default_max_results: int = Field(default=10)
    max_results_limit: int = Field(default=20)
    news_suffix: str = Field(default="news latest", description="Appended to news_search queries")
    academic_suffix: str = Field(default="research paper study", description="Appended to academic_search queries")


class SelectorSettings(BaseSettings):
    """CSS selector table for scraping search results and pages.

    Kept in configuration so upstream markup changes need no code change.
    """

    model_config = SettingsConfigDict(env_prefix="MCP_SELECTORS_")

    result: str = Field(default=".result")
    result_title: str = Field(default=".result__title a")
    result_snippet: str = Field(default=".result__snippet")
    result_source: str = Field(default=".result__url")
    redirect_param: str = Field(default="uddg", description="Query parameter carrying the encoded target of redirect links")

    strip_tags: list[str] = Field(default_factory=lambda: ["script", "style", "nav", "header", "footer", "aside", "iframe", "noscript"])
    content_containers: list[str] = Field(
        default_factory=lambda: ["article", "main", ".content", ".post-content", ".entry-content", "#content"],
    )
    title_meta: list[str] = Field(default_factory=lambda: ['meta[property="og:title"]'])
    description_meta: list[str] = Field(
        default_factory=lambda: ['meta[name="description"]', 'meta[property="og:description"]'],
    )
    author_meta: list[str] = Field(default_factory=lambda: ['meta[name="author"]', 'meta[property="article:author"]'])
    published_meta: list[str] = Field(default_factory=lambda: ['meta[property="article:published_time"]', "time[datetime]"])


class ExtractionSettings(BaseSettings):
    """Content extraction configuration."""

    model_config = SettingsConfigDict(env_prefix="MCP_EXTRACTION_")

    max_content_length: int = Field(default=50_000, description="Hard cap on extracted content length in characters")
    fallback_title: str = Field(default="Untitled")


class ResearchSettings(BaseSettings):
    """Deep research configuration.

    The finding thresholds drive a naive sentence-length filter, not summarization.
    """

    model_config = SettingsConfigDict(env_prefix="MCP_RESEARCH_")

    default_depth: int = Field(default=3)
    max_depth: int = Field(default=5)
    results_per_depth: int = Field(default=3, description="Search results requested per depth level")
    finding_min_length: int = Field(default=50, description="Sentences must be longer than this to become a finding")
    finding_max_length: int = Field(default=200)
    max_findings: int = Field(default=5, ge=0, le=5)
    report_source_limit: int = Field(default=10, description="Sources listed in the rendered report")


TransportType = Literal["stdio", "streamable-http", "sse"]


class ServerSettings(BaseSettings):
    """Server configuration."""

    model_config = SettingsConfigDict(env_prefix="MCP_SERVER_")

    logging_level: str = Field(default="INFO")
    transport: TransportType = Field(default="stdio", description="MCP transport: stdio, streamable-http, or sse")
    host: str = Field(default="127.0.0.1", description="Host for HTTP transports")
    port: int = Field(default=8383, description="Port for HTTP transports")
    public_url: Optional[str] = Field(default=None, description="Public base URL advertised in resource metadata")

    def get_public_url(self) -> str:
        """Public URL of the server, derived from host and port when not configured."""
        if self.public_url:
            return self.public_url.rstrip("/")
        return f"http://{self.host}:{self.port}"


class OAuthSettings(BaseSettings):
    """Protected resource metadata advertised at /.well-known/oauth-protected-resource."""

    model_config = SettingsConfigDict(env_prefix="MCP_OAUTH_")

    authorization_servers: list[str] = Field(default_factory=list)
    bearer_methods_supported: list[str] = Field(default_factory=lambda: ["header"])
    scopes_supported: list[str] = Field(default_factory=lambda: ["read", "write", "search"])
    cache_max_age: int = Field(default=3600)


class AppSettings(BaseSettings):
    """Root application settings.

    Priority: Environment Variables > Config File > Defaults
    """

    model_config = SettingsConfigDict(env_prefix="MCP_", extra="ignore")

    search: SearchSettings = Field(default_factory=SearchSettings)
    selectors: SelectorSettings = Field(default_factory=SelectorSettings)
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    research: ResearchSettings = Field(default_factory=ResearchSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    oauth: OAuthSettings = Field(default_factory=OAuthSettings)

    def save(self) -> Path:
        """Save current configuration to file."""
        data = self.model_dump(mode="json", exclude_none=True)
        save_config_file(data)
        return CONFIG_FILE


def _load_settings() -> AppSettings:
    """Load settings with file config as base, env vars overlay."""
    file_data = load_config_file()
    # Pydantic will overlay env vars on top
    return AppSettings(**file_data)


settings = _load_settings()
