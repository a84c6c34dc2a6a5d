"""Markdown rendering of tool results."""

from .models import ExtractedContent, ResearchResult, SearchResult


def format_search_results(
    results: list[SearchResult],
    query: str,
    kind: str = "",
    noun: str = "results",
) -> str:
    """Render a numbered result list.

    Args:
        results: Search results in provider order.
        query: The caller's original query.
        kind: Optional qualifier such as "News" or "Academic".
        noun: What the results are called in the count line.
    """
    qualifier = f"{kind} " if kind else ""
    if not results:
        return f'No {qualifier.lower()}results found for: "{query}"'

    items = "\n\n".join(f"{i}. **{r.title}**\n   URL: {r.url}\n   {r.snippet}" for i, r in enumerate(results, start=1))
    return f'# {qualifier}Search Results for: "{query}"\n\nFound {len(results)} {noun}:\n\n{items}'


def format_extracted_content(content: ExtractedContent) -> str:
    meta = content.metadata
    lines = [
        f"# {content.title}",
        "",
        f"**URL:** {content.url}",
        f"**Word Count:** {meta.word_count}",
    ]
    if meta.author:
        lines.append(f"**Author:** {meta.author}")
    if meta.published_date:
        lines.append(f"**Published:** {meta.published_date}")
    if meta.description:
        lines.append(f"**Description:** {meta.description}")
    lines += ["", "---", "", "## Content", "", content.content]
    return "\n".join(lines)


def format_research_report(research: ResearchResult, source_limit: int = 10) -> str:
    """Render a research result as a markdown report listing at most source_limit sources."""
    if research.key_findings:
        findings = "\n".join(f"{i}. {finding}" for i, finding in enumerate(research.key_findings, start=1))
    else:
        findings = "No specific key findings extracted."

    sources = "\n\n".join(
        f"{i}. [{s.title}]({s.url})\n   {s.snippet}" for i, s in enumerate(research.sources[:source_limit], start=1)
    )

    return f"""# Deep Research Report

**Query:** {research.query}
**Timestamp:** {research.timestamp.isoformat().replace("+00:00", "Z")}

---

## Summary

{research.summary}

---

## Key Findings

{findings}

---

## Sources ({len(research.sources)} found)

{sources}"""
