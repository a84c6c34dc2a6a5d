"""MCP server exposing web search, content extraction, and deep research as tools."""

import logging
import sys
from typing import Annotated


def _configure_stdio_logging() -> None:
    """Configure logging for stdio MCP mode - all logs MUST go to stderr.

    In stdio mode, stdout is reserved exclusively for JSON-RPC messages.
    Any logging or print() to stdout corrupts the protocol stream.
    """
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))

    root = logging.getLogger()
    root.handlers = [stderr_handler]
    root.setLevel(logging.WARNING)

    # Suppress verbose loggers from dependencies
    for logger_name in ["httpx", "httpcore", "asyncio"]:
        dep_logger = logging.getLogger(logger_name)
        dep_logger.setLevel(logging.WARNING)
        dep_logger.handlers = [stderr_handler]
        dep_logger.propagate = False


# Configure logging BEFORE importing fastmcp and other noisy dependencies
_configure_stdio_logging()

# ruff: noqa: E402 - Intentional late imports after logging configuration
from fastmcp import Context, FastMCP
from fastmcp.exceptions import ToolError
from pydantic import AfterValidator, Field
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from .config import settings
from .extraction import extract_content
from .fetcher import ensure_absolute_url
from .formatting import format_extracted_content, format_research_report, format_search_results
from .observability import setup_structured_logging, tool_call_context
from .research import ResearchMachine
from .search import academic_search, news_search, web_search

# Apply configured log level (may override the default WARNING)
logger = logging.getLogger("mcp_server_deep_search")
logger.setLevel(getattr(logging, settings.server.logging_level.upper()))

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
}


def serve() -> FastMCP:
    """Create and configure the MCP server."""
    setup_structured_logging(settings.server.logging_level)

    server = FastMCP("mcp_server_deep_search")

    search_config = settings.search
    research_config = settings.research
    results_limit = search_config.max_results_limit
    MaxResults = Annotated[int, Field(ge=1, le=results_limit, description=f"Maximum number of results to return (1-{results_limit})")]
    depth_help = f"Research depth (1-{research_config.max_depth}). Higher values analyze more sources but take longer."

    @server.tool(name="web_search")
    async def web_search_tool(
        query: Annotated[str, Field(min_length=1, max_length=500, description="The search query to find information about")],
        max_results: MaxResults = search_config.default_max_results,
    ) -> str:
        """
        Search the web for information.

        Returns a list of relevant search results with titles, URLs, and snippets.
        """
        async with tool_call_context("web_search", query=query[:100], max_results=max_results) as tool_logger:
            try:
                results = await web_search(query, max_results, config=settings)
            except Exception as e:
                logger.error(f"Web search failed: {e}")
                raise ToolError(f"Search failed: {e}") from e

            tool_logger.info("tool_completed", result_count=len(results))
            return format_search_results(results, query)

    @server.tool(name="extract_content")
    async def extract_content_tool(
        url: Annotated[str, AfterValidator(ensure_absolute_url), Field(description="The URL to extract content from")],
        ctx: Context,
    ) -> str:
        """
        Extract the main content from a URL.

        Returns the title, cleaned text content, and metadata.
        """
        async with tool_call_context("extract_content", url=url) as tool_logger:
            await ctx.info(f"Fetching: {url}")
            try:
                content = await extract_content(url, config=settings)
            except Exception as e:
                logger.error(f"Content extraction failed: {e}")
                raise ToolError(f"Content extraction failed: {e}") from e

            tool_logger.info("tool_completed", word_count=content.metadata.word_count)
            return format_extracted_content(content)

    @server.tool(name="deep_research")
    async def deep_research_tool(
        query: Annotated[str, Field(min_length=1, max_length=500, description="The research topic or question")],
        ctx: Context,
        depth: Annotated[
            int,
            Field(ge=1, le=research_config.max_depth, description=depth_help),
        ] = research_config.default_depth,
    ) -> str:
        """
        Perform deep research on a topic.

        Searches multiple sources, extracts their content, and provides a summary with key findings.
        """
        async with tool_call_context("deep_research", query=query[:100], depth=depth) as tool_logger:
            try:
                machine = ResearchMachine(query=query, depth=depth, config=settings, ctx=ctx)
                research = await machine.run()
            except Exception as e:
                logger.error(f"Deep research failed: {e}")
                raise ToolError(f"Deep research failed: {e}") from e

            tool_logger.info("tool_completed", source_count=len(research.sources), finding_count=len(research.key_findings))
            return format_research_report(research, source_limit=settings.research.report_source_limit)

    @server.tool(name="news_search")
    async def news_search_tool(
        query: Annotated[str, Field(min_length=1, max_length=500, description="The news topic to search for")],
        max_results: MaxResults = search_config.default_max_results,
    ) -> str:
        """
        Search for recent news articles on a topic.

        Returns news-focused search results.
        """
        async with tool_call_context("news_search", query=query[:100], max_results=max_results) as tool_logger:
            try:
                results = await news_search(query, max_results, config=settings)
            except Exception as e:
                logger.error(f"News search failed: {e}")
                raise ToolError(f"News search failed: {e}") from e

            tool_logger.info("tool_completed", result_count=len(results))
            return format_search_results(results, query, kind="News", noun="news articles")

    @server.tool(name="academic_search")
    async def academic_search_tool(
        query: Annotated[str, Field(min_length=1, max_length=500, description="The academic topic or research question")],
        max_results: MaxResults = search_config.default_max_results,
    ) -> str:
        """
        Search for academic papers, research studies, and scholarly content.
        """
        async with tool_call_context("academic_search", query=query[:100], max_results=max_results) as tool_logger:
            try:
                results = await academic_search(query, max_results, config=settings)
            except Exception as e:
                logger.error(f"Academic search failed: {e}")
                raise ToolError(f"Academic search failed: {e}") from e

            tool_logger.info("tool_completed", result_count=len(results))
            return format_search_results(results, query, kind="Academic", noun="academic sources")

    # --- Protected resource metadata (HTTP transports only) ---

    @server.custom_route("/.well-known/oauth-protected-resource", methods=["GET", "OPTIONS"])
    async def oauth_protected_resource(request: Request) -> Response:
        """Static OAuth protected resource descriptor with permissive CORS."""
        if request.method == "OPTIONS":
            return Response(
                status_code=204,
                headers={**CORS_HEADERS, "Access-Control-Allow-Headers": "Content-Type, Authorization"},
            )

        oauth = settings.oauth
        return JSONResponse(
            {
                "resource": settings.server.get_public_url(),
                "authorization_servers": oauth.authorization_servers,
                "bearer_methods_supported": oauth.bearer_methods_supported,
                "scopes_supported": oauth.scopes_supported,
            },
            headers={**CORS_HEADERS, "Cache-Control": f"public, max-age={oauth.cache_max_age}"},
        )

    return server


server_instance = serve()


def main() -> None:
    """Entry point for MCP server."""
    transport = settings.server.transport

    if transport == "stdio":
        server_instance.run()
    elif transport in ("streamable-http", "sse"):
        logger.info(f"Starting MCP deep search server (transport: {transport})")
        logger.info(f"HTTP server at http://{settings.server.host}:{settings.server.port}/mcp")
        server_instance.run(transport=transport, host=settings.server.host, port=settings.server.port)
    else:
        raise ValueError(f"Unknown transport: {transport}")


if __name__ == "__main__":
    main()
