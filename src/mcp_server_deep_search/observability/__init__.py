"""Observability module for structured, per-call logging."""

from .logging import (
    bind_request_context,
    clear_request_context,
    get_request_logger,
    setup_structured_logging,
    tool_call_context,
)

__all__ = [
    "bind_request_context",
    "clear_request_context",
    "get_request_logger",
    "setup_structured_logging",
    "tool_call_context",
]
