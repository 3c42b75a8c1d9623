"""Configuration constants and startup option resolution for httpd."""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

HOST: str = "127.0.0.1"
DEFAULT_PORT: int = 5000
BUFFER_SIZE: int = 1024
READ_CHUNK_SIZE: int = 65_536
SOCKET_TIMEOUT_SECS: int = 5
KEEPALIVE_TIMEOUT_SECS: int = 5
MAX_KEEPALIVE_REQUESTS: int = 100
MAX_REQUEST_BYTES: int = 1_048_576
MAX_HEADER_BYTES: int = 16_384
MAX_BODY_BYTES: int = 524_288
MAX_TARGET_LENGTH: int = 8_192
WORKER_COUNT: int = 16
REQUEST_QUEUE_SIZE: int = 128
SERVER_NAME: str = "httpd/1.0"
ACCESS_LOGGER_NAME: str = "httpd.access"

CORS_ALLOW_HEADERS: str = "Origin, X-Requested-With, Content-Type, Accept, Range"

_PORT_FLAG = re.compile(r"^-p([0-9]{3,5})$")
_OPTION_KEYS = frozenset({"port", "cors", "ls", "headers", "root", "host"})

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when resolved settings cannot be used to start the server."""


@dataclass(slots=True)
class ServerOptions:
    """Caller-supplied overrides; ``None`` means the option was not given."""

    port: int | None = None
    cors: bool | None = None
    ls: bool | None = None
    headers: Sequence[str] | None = None
    root: str | Path | None = None
    host: str | None = None

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "ServerOptions":
        """Build options from a plain dict, keeping absent keys distinct from falsy ones."""
        unknown = set(options) - _OPTION_KEYS
        if unknown:
            logger.debug("Ignoring unknown option(s): %s", ", ".join(sorted(unknown)))

        return cls(
            port=options.get("port"),
            cors=bool(options["cors"]) if "cors" in options else None,
            ls=bool(options["ls"]) if "ls" in options else None,
            headers=options.get("headers"),
            root=options.get("root"),
            host=options.get("host"),
        )


@dataclass(frozen=True, slots=True)
class ServerConfig:
    port: int
    cors_enabled: bool
    dir_listing_enabled: bool
    extra_headers: tuple[str, ...]
    root: Path
    host: str = HOST


def port_from_argv(argv: Sequence[str]) -> int | None:
    for arg in argv:
        match = _PORT_FLAG.match(arg)
        if match is None:
            continue
        port = int(match.group(1))
        if 1 <= port <= 65_535:
            return port
    return None


def resolve_config(
    options: ServerOptions | Mapping[str, Any] | None = None,
    argv: Sequence[str] | None = None,
) -> ServerConfig:
    """Overlay defaults with caller options and the ``-pNNNN`` command-line flag.

    An explicit ``port`` option beats the flag; the first matching flag wins
    over the default. ``cors`` and ``ls`` are on unless explicitly disabled.
    """
    if options is None:
        options = ServerOptions()
    elif not isinstance(options, ServerOptions):
        options = ServerOptions.from_mapping(options)
    if argv is None:
        argv = sys.argv[1:]

    if options.port is not None:
        port = int(options.port)
        if not 0 <= port <= 65_535:
            raise ConfigError(f"Port out of range: {port}")
    else:
        port = port_from_argv(argv) or DEFAULT_PORT

    root = Path(options.root) if options.root is not None else Path.cwd()

    return ServerConfig(
        port=port,
        cors_enabled=True if options.cors is None else options.cors,
        dir_listing_enabled=True if options.ls is None else options.ls,
        extra_headers=tuple(options.headers or ()),
        root=root.resolve(),
        host=options.host or HOST,
    )
