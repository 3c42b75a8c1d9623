"""Utility helpers shared across server modules."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from urllib.parse import unquote

TEXT_TYPES_WITH_CHARSET = {"text/html", "text/plain", "text/css", "text/javascript"}


def get_content_type(file_path: Path) -> str:
    content_type, _encoding = mimetypes.guess_type(file_path.name)
    if content_type is None:
        return "application/octet-stream"
    if content_type in TEXT_TYPES_WITH_CHARSET:
        return f"{content_type}; charset=utf-8"
    return content_type


def resolve_under_root(root: Path, relative_path: str) -> Path | None:
    """Resolve ``relative_path`` below ``root``; None for traversal or invalid paths."""
    decoded_relative_path = unquote(relative_path)
    if "\x00" in decoded_relative_path:
        return None

    static_root = root.resolve()
    try:
        candidate = (static_root / decoded_relative_path).resolve()
        candidate.relative_to(static_root)
    except (OSError, ValueError):
        return None

    return candidate
