"""CLI interface for the deep search MCP server."""

import asyncio
from typing import NoReturn

import typer

from .config import settings
from .exceptions import DeepSearchError
from .formatting import format_extracted_content, format_research_report, format_search_results

app = typer.Typer(help="Web search, content extraction and research from the command line")


def _fail(e: Exception) -> NoReturn:
    print(f"Error: {e}")
    raise typer.Exit(code=1)


@app.command()
def search(
    query: str = typer.Argument(..., help="Search query"),
    max_results: int = typer.Option(
        settings.search.default_max_results, "--max-results", "-n", min=1, max=settings.search.max_results_limit, help="Maximum number of results"
    ),
) -> None:
    """Search the web."""
    from .search import web_search

    try:
        results = asyncio.run(web_search(query, max_results, config=settings))
    except DeepSearchError as e:
        _fail(e)
    print(format_search_results(results, query))


@app.command()
def news(
    query: str = typer.Argument(..., help="News topic"),
    max_results: int = typer.Option(
        settings.search.default_max_results, "--max-results", "-n", min=1, max=settings.search.max_results_limit, help="Maximum number of results"
    ),
) -> None:
    """Search for recent news articles."""
    from .search import news_search

    try:
        results = asyncio.run(news_search(query, max_results, config=settings))
    except DeepSearchError as e:
        _fail(e)
    print(format_search_results(results, query, kind="News", noun="news articles"))


@app.command()
def academic(
    query: str = typer.Argument(..., help="Academic topic or research question"),
    max_results: int = typer.Option(
        settings.search.default_max_results, "--max-results", "-n", min=1, max=settings.search.max_results_limit, help="Maximum number of results"
    ),
) -> None:
    """Search for academic papers and studies."""
    from .search import academic_search

    try:
        results = asyncio.run(academic_search(query, max_results, config=settings))
    except DeepSearchError as e:
        _fail(e)
    print(format_search_results(results, query, kind="Academic", noun="academic sources"))


@app.command()
def extract(url: str = typer.Argument(..., help="Absolute URL of the page")) -> None:
    """Extract the main content of a web page."""
    from .extraction import extract_content

    try:
        content = asyncio.run(extract_content(url, config=settings))
    except DeepSearchError as e:
        _fail(e)
    print(format_extracted_content(content))


@app.command()
def research(
    query: str = typer.Argument(..., help="Topic to research"),
    depth: int = typer.Option(
        settings.research.default_depth, "--depth", "-d", min=1, max=settings.research.max_depth, help="Number of top results to analyze"
    ),
    save_to: str = typer.Option(None, "--save", "-s", help="File path to save the report"),
) -> None:
    """Run a deep research pass on a topic."""
    from .research import deep_research
    from .utils import save_report

    try:
        result = asyncio.run(deep_research(query, depth, config=settings))
    except DeepSearchError as e:
        _fail(e)

    report = format_research_report(result, source_limit=settings.research.report_source_limit)
    if save_to:
        path = save_report(report, save_to)
        print(f"Saved to: {path}")
    print(report)


@app.command()
def config(save: bool = typer.Option(False, "--save", help="Write the current configuration to the config file")) -> None:
    """Show current configuration."""
    print(f"Search endpoint: {settings.search.endpoint}")
    print(f"Timeout: {settings.search.timeout:g}s")
    print(f"Max results: {settings.search.default_max_results} (limit {settings.search.max_results_limit})")
    print(f"Result selector: {settings.selectors.result}")
    print(f"Content containers: {', '.join(settings.selectors.content_containers)}")
    print(f"Max content length: {settings.extraction.max_content_length}")
    print(f"Research depth: {settings.research.default_depth} (max {settings.research.max_depth})")
    print(f"Transport: {settings.server.transport}")
    if save:
        print(f"Saved to: {settings.save()}")


@app.command()
def serve() -> None:
    """Start the MCP server with the configured transport."""
    from .server import main

    main()


if __name__ == "__main__":
    app()
