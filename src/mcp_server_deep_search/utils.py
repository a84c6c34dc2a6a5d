"""Utilities for writing rendered reports to disk."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def save_report(content: str, path: str | Path) -> Path:
    """Write a rendered report to path, creating parent directories.

    Args:
        content: The markdown text to save.
        path: Destination file; "~" is expanded.

    Returns:
        Path to the saved file.
    """
    file_path = Path(path).expanduser()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(content, encoding="utf-8")

    logger.info(f"Saved report to {file_path}")
    return file_path
