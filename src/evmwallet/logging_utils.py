from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO, Union

LOGGER_NAME = "evmwallet"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class _StderrHandler(logging.StreamHandler):
    # Resolves sys.stderr on every record so redirected streams are honoured
    def __init__(self, level: int = logging.NOTSET):
        logging.Handler.__init__(self, level)

    @property
    def stream(self) -> TextIO:
        return sys.stderr


def configure_logging(
    level: Union[int, str] = logging.WARNING,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Attach a single handler to the ``evmwallet`` logger.

    Calling again only updates the level; handlers are never stacked.

    Args:
        level: Level name or number (unknown names fall back to WARNING)
        stream: Output stream (default: whatever ``sys.stderr`` is at emit time)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    if getattr(lg, "_evmwallet_configured", False):
        return lg

    handler = logging.StreamHandler(stream) if stream is not None else _StderrHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, "%Y-%m-%dT%H:%M:%S"))
    lg.addHandler(handler)
    setattr(lg, "_evmwallet_configured", True)
    return lg
