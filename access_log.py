"""One-line-per-request access logging."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TextIO

from config import ACCESS_LOGGER_NAME
from request import HTTPRequest

access_logger = logging.getLogger(ACCESS_LOGGER_NAME)


def format_access_line(method: str, path: str, status: int, now: datetime) -> str:
    stamp = now.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
    return f"[{stamp}] [{method}] {path} {status}"


def log_access(request: HTTPRequest, status: int, *, now: datetime | None = None) -> None:
    """Emit ``[YYYY-MM-DD HH:MM:SS] [METHOD] /path STATUS`` at DEBUG on the access logger.

    The access logger is separate from the module loggers so request lines can
    be silenced or routed without touching startup and error output.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    access_logger.debug("%s", format_access_line(request.method, request.path, status, now))


def configure_access_log(stream: TextIO | None = None) -> logging.Handler:
    """Print access lines to ``stream`` whatever level the root logger is at."""
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(message)s"))
    access_logger.addHandler(handler)
    access_logger.setLevel(logging.DEBUG)
    access_logger.propagate = False
    return handler
