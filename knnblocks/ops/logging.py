"""Logging setup for the CLI and host integrations."""

import logging
import os
import sys
from typing import Optional

LOG_LEVEL_ENV = "KNNBLOCKS_LOG_LEVEL"


def resolve_level(name: Optional[str]) -> int:
    """Map a level name or number ("debug", "20") to a logging level; INFO otherwise."""
    if not name:
        return logging.INFO
    name = name.strip()
    if name.isdigit():
        return int(name)
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(target_id: Optional[str] = None, level: Optional[str] = None) -> int:
    """Send log records to stderr, tagged with the target being worked on.

    ``level`` wins over ``KNNBLOCKS_LOG_LEVEL``. Returns the level applied.
    """
    resolved = resolve_level(level or os.environ.get(LOG_LEVEL_ENV))
    target_tag = f"[target={target_id}] " if target_id else ""
    logging.basicConfig(
        level=resolved,
        format=f"%(asctime)s %(levelname)s {target_tag}%(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )
    return resolved
