"""Log sink setup (loguru).

The library only emits records through `loguru.logger`; installing sinks is
left to applications. The CLI uses `configure_logging` to get a single stderr
sink at the requested level.
"""

from __future__ import annotations

import sys

from loguru import logger

_FORMAT = "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> - {message}"


def configure_logging(level: str = "WARNING") -> int:
    """Replace loguru's default sink with a stderr sink at `level`."""

    logger.remove()
    return logger.add(sys.stderr, level=level.upper(), format=_FORMAT)
