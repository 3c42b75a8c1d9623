"""Static file and directory serving below a fixed root."""

from __future__ import annotations

import html
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from email.utils import formatdate, parsedate_to_datetime
from pathlib import Path
from urllib.parse import quote

from headers import Headers, cors_headers, parse_header_spec
from request import HTTPRequest
from response import HTTPResponse
from utils import get_content_type, resolve_under_root

INDEX_FILENAME = "index.html"
SERVABLE_METHODS = {"GET", "HEAD"}


class StaticNotFound(LookupError):
    """Raised when the request has no static resource to serve."""


@dataclass(slots=True)
class ServeDirOptions:
    enable_cors: bool = True
    show_dir_listing: bool = True
    headers: Sequence[str] = field(default_factory=tuple)


def serve_dir(request: HTTPRequest, root: Path, options: ServeDirOptions) -> HTTPResponse:
    """Serve the file or directory named by ``request.path`` below ``root``.

    Raises StaticNotFound when nothing servable exists at that path, which
    includes a directory with no index page while listings are disabled.
    """
    target = resolve_under_root(root, request.path.lstrip("/") or ".")
    if target is None or not target.exists():
        raise StaticNotFound(request.path)

    if request.method not in SERVABLE_METHODS:
        response = HTTPResponse(
            status_code=405,
            headers={"Allow": "GET, HEAD"},
            body="Method Not Allowed",
        )
    elif target.is_dir():
        response = _serve_directory(request, root.resolve(), target, options)
    else:
        response = _serve_file(request, target)

    if options.enable_cors:
        response.headers.extend(cors_headers())
    for raw in options.headers:
        response.headers.append(*parse_header_spec(raw))
    return response


def _serve_directory(
    request: HTTPRequest,
    root: Path,
    directory: Path,
    options: ServeDirOptions,
) -> HTTPResponse:
    if not request.path.endswith("/"):
        location = quote(request.path + "/", safe="/%")
        if request.query:
            location = f"{location}?{request.query}"
        return HTTPResponse(status_code=301, headers={"Location": location}, body=b"")

    index_file = directory / INDEX_FILENAME
    if index_file.is_file():
        return _serve_file(request, index_file)

    if not options.show_dir_listing:
        raise StaticNotFound(request.path)

    return HTTPResponse(
        status_code=200,
        headers={"Content-Type": "text/html; charset=utf-8"},
        body=render_listing(root, directory),
    )


def render_listing(root: Path, directory: Path) -> str:
    """HTML index of ``directory``; dotfiles are left out."""
    relative = os.fsencode(directory.relative_to(root).as_posix()).decode("utf-8", errors="replace")
    display_path = "/" if relative == "." else f"/{relative}/"
    title = html.escape(f"Index of {display_path}")

    rows: list[str] = []
    if display_path != "/":
        rows.append('<li><a href="../">../</a></li>')

    entries = sorted(
        (entry for entry in directory.iterdir() if not entry.name.startswith(".")),
        key=lambda entry: (not entry.is_dir(), entry.name.lower()),
    )
    for entry in entries:
        raw_name = os.fsencode(entry.name) + (b"/" if entry.is_dir() else b"")
        label = html.escape(raw_name.decode("utf-8", errors="replace"))
        rows.append(f'<li><a href="{quote(raw_name)}">{label}</a></li>')

    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        f'<head><meta charset="utf-8"><title>{title}</title></head>\n'
        f"<body>\n<h1>{title}</h1>\n<ul>\n"
        + "\n".join(rows)
        + "\n</ul>\n</body>\n</html>\n"
    )


def _serve_file(request: HTTPRequest, file_path: Path) -> HTTPResponse:
    file_stat = file_path.stat()
    etag = f'W/"{file_stat.st_mtime_ns:x}-{file_stat.st_size:x}"'
    last_modified = formatdate(file_stat.st_mtime, usegmt=True)
    validators = {"ETag": etag, "Last-Modified": last_modified}

    if _not_modified(request, etag, file_stat.st_mtime):
        return HTTPResponse(status_code=304, headers=validators, body=b"")

    headers = Headers(validators)
    headers.set("Content-Type", get_content_type(file_path))
    headers.set("Accept-Ranges", "bytes")

    range_header = request.headers.get("range")
    if range_header is None:
        return HTTPResponse(status_code=200, headers=headers, file_path=file_path)

    size = file_stat.st_size
    byte_range = parse_range(range_header, size)
    if byte_range is None:
        return HTTPResponse(status_code=200, headers=headers, file_path=file_path)
    if byte_range == ():
        headers.set("Content-Range", f"bytes */{size}")
        return HTTPResponse(status_code=416, headers=headers, body=b"")

    start, end = byte_range
    headers.set("Content-Range", f"bytes {start}-{end}/{size}")
    return HTTPResponse(
        status_code=206,
        headers=headers,
        file_path=file_path,
        file_range=(start, end),
    )


def _not_modified(request: HTTPRequest, etag: str, mtime: float) -> bool:
    if_none_match = request.headers.get("if-none-match")
    if if_none_match is not None:
        return if_none_match.strip() == etag

    if_modified_since = request.headers.get("if-modified-since")
    if if_modified_since is None:
        return False
    try:
        since_ts = parsedate_to_datetime(if_modified_since).timestamp()
    except (TypeError, ValueError, OverflowError):
        return False
    return int(mtime) <= int(since_ts)


def parse_range(value: str, size: int) -> tuple[int, int] | tuple[()] | None:
    """Parse a single ``bytes=`` range against a file of ``size`` bytes.

    Returns ``(start, end)`` inclusive, ``()`` when unsatisfiable, or None when
    the header should be ignored (other units, multiple ranges, bad syntax).
    """
    unit, _sep, ranges = value.strip().partition("=")
    if unit.strip().lower() != "bytes" or not ranges or "," in ranges:
        return None

    first, sep, last = ranges.strip().partition("-")
    if not sep:
        return None
    try:
        if not first:
            suffix = int(last)
            if suffix <= 0:
                return ()
            return (max(0, size - suffix), size - 1) if size else ()
        start = int(first)
        end = int(last) if last else None
    except ValueError:
        return None

    if start < 0 or (end is not None and end < start):
        return None
    if start >= size:
        return ()
    return start, size - 1 if end is None else min(end, size - 1)
