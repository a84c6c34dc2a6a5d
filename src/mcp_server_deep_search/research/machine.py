"""Research workflow: search, concurrent extraction of the top results, templated synthesis."""

import asyncio
import logging
from typing import TYPE_CHECKING, Optional

import httpx

from ..config import AppSettings, settings
from ..exceptions import ResearchError, SearchError
from ..extraction import extract_content
from ..fetcher import http_client
from ..models import ExtractedContent, ResearchResult, SearchResult
from ..search import web_search
from .synthesis import build_summary, extract_key_findings

if TYPE_CHECKING:
    from fastmcp.server.context import Context

logger = logging.getLogger(__name__)


def clamp_depth(depth: int, max_depth: int = 5) -> int:
    """Clamp a requested research depth into [1, max_depth]."""
    return min(max(depth, 1), max_depth)


class ResearchMachine:
    """Research workflow with optional MCP progress reporting."""

    def __init__(
        self,
        query: str,
        depth: int = 3,
        config: AppSettings | None = None,
        client: httpx.AsyncClient | None = None,
        ctx: Optional["Context"] = None,
    ):
        self.config = config or settings
        self.query = query
        self.depth = clamp_depth(depth, self.config.research.max_depth)
        self.client = client
        self.ctx = ctx
        self._steps_done = 0

    @property
    def search_cap(self) -> int:
        return self.depth * self.config.research.results_per_depth

    @property
    def total_steps(self) -> int:
        # search (1) + one per extraction + synthesis (1)
        return self.depth + 2

    async def _report_progress(self, message: str | None = None, advance: int = 0) -> None:
        """Report progress if a request context is available."""
        if not self.ctx:
            return
        self._steps_done += advance
        if message:
            await self.ctx.info(message)
        await self.ctx.report_progress(progress=self._steps_done, total=self.total_steps)

    async def run(self) -> ResearchResult:
        """Execute the research workflow and return the result."""
        async with http_client(self.client, self.config.search.timeout) as client:
            # Phase 1: Searching
            await self._report_progress(message=f"Searching: {self.query}")
            logger.info(f"Research search for '{self.query}' (depth={self.depth}, cap={self.search_cap})")
            try:
                results = await web_search(self.query, self.search_cap, client=client, config=self.config)
            except SearchError as e:
                logger.error(f"Deep research error: {e}")
                raise ResearchError(f"Deep research failed: {e}") from e
            await self._report_progress(advance=1)

            # Phase 2: Extracting
            targets = results[: self.depth]
            await self._report_progress(message=f"Extracting content from {len(targets)} sources")
            contents = await self._extract_all(client, targets)
            await self._report_progress(advance=len(targets))

        # Phase 3: Synthesizing
        await self._report_progress(message="Synthesizing findings")
        research = self.config.research
        result = ResearchResult(
            query=self.query,
            summary=build_summary(self.query, contents, targets, len(results)),
            sources=results,
            key_findings=extract_key_findings(
                contents,
                min_length=research.finding_min_length,
                max_length=research.finding_max_length,
                limit=research.max_findings,
            ),
        )
        await self._report_progress(advance=1)
        logger.info(f"Research completed: {len(contents)}/{len(targets)} sources extracted, {len(result.key_findings)} findings")
        return result

    async def _extract_all(self, client: httpx.AsyncClient, targets: list[SearchResult]) -> list[ExtractedContent]:
        """Extract every target concurrently, keeping successes in target order.

        Each extraction settles independently; a failure drops that source only.
        """
        outcomes = await asyncio.gather(
            *(extract_content(target.url, client=client, config=self.config) for target in targets),
            return_exceptions=True,
        )

        contents: list[ExtractedContent] = []
        for target, outcome in zip(targets, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning(f"Dropping source {target.url}: {outcome}")
                continue
            contents.append(outcome)
        return contents


async def deep_research(
    query: str,
    depth: int = 3,
    *,
    client: httpx.AsyncClient | None = None,
    config: AppSettings | None = None,
) -> ResearchResult:
    """Search, extract the top depth results, and summarize them.

    Raises:
        ResearchError: If the initial search fails. Per-source extraction
            failures never raise.
    """
    machine = ResearchMachine(query=query, depth=depth, config=config, client=client)
    return await machine.run()
