"""Process-wide logging setup.

Library modules only call ``logging.getLogger(__name__)``; entrypoints call
:func:`configure_logging` once at startup.
"""

from __future__ import annotations

import logging
import sys
from typing import IO

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_CONFIGURED = False


def _parse_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    level = level.strip().upper()
    if level.isdigit():
        return int(level)
    numeric = getattr(logging, level, None)
    if isinstance(numeric, int):
        return numeric
    return logging.INFO


def configure_logging(level: int | str = logging.INFO, *, stream: IO[str] = sys.stderr) -> None:
    """Attach a single stream handler to the root logger, once."""
    global _CONFIGURED
    root = logging.getLogger()
    root.setLevel(_parse_level(level))
    if _CONFIGURED:
        return
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
    root.addHandler(handler)
    # The Bot API client logs every poll request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    _CONFIGURED = True
