"""Structured JSON logging with a per-tool-call context."""

import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import structlog

_configured = False


def setup_structured_logging(level: str = "INFO") -> None:
    """Configure structlog with JSON output and the tool call context merged in.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
    """
    global _configured
    if _configured:
        return

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,  # request_id, tool_name
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # stdlib handlers are already pointed at stderr by the server
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))

    _configured = True


def bind_request_context(request_id: str, tool_name: str) -> None:
    """Attach request_id and tool_name to every log line emitted in this async context."""
    structlog.contextvars.bind_contextvars(request_id=request_id, tool_name=tool_name)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_request_logger(name: str = "mcp_server_deep_search") -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


@asynccontextmanager
async def tool_call_context(tool_name: str, **params: Any) -> AsyncIterator[structlog.stdlib.BoundLogger]:
    """Scope one tool call: bind a fresh request ID, log start and failure, then clear.

    Exceptions are logged as ``tool_failed`` and re-raised unchanged.

    Args:
        tool_name: Name of the MCP tool being executed
        **params: Call arguments to record on the ``tool_started`` line
    """
    bind_request_context(str(uuid.uuid4()), tool_name)
    call_logger = get_request_logger()
    call_logger.info("tool_started", **params)
    try:
        yield call_logger
    except Exception as e:
        call_logger.error("tool_failed", error=str(e))
        raise
    finally:
        clear_request_context()
