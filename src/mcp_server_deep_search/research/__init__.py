"""Deep research: search, concurrent extraction, and templated synthesis."""

from .machine import ResearchMachine, clamp_depth, deep_research
from .synthesis import build_summary, extract_key_findings, first_meaningful_sentence

__all__ = [
    "ResearchMachine",
    "build_summary",
    "clamp_depth",
    "deep_research",
    "extract_key_findings",
    "first_meaningful_sentence",
]
