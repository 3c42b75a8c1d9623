"""Decide whether a request path names an existing file or directory under the root."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from utils import resolve_under_root


@dataclass(frozen=True, slots=True)
class StaticFound:
    path: Path


@dataclass(frozen=True, slots=True)
class StaticMiss:
    reason: str


ProbeResult = StaticFound | StaticMiss


def candidate_for(url_path: str, dir_listing_enabled: bool) -> str:
    """Map a URL path to a root-relative candidate.

    The bare root maps to the directory itself when listings are enabled and
    to ``index.html`` otherwise.
    """
    relative = url_path.lstrip("/")
    if relative:
        return relative
    return "." if dir_listing_enabled else "index.html"


def probe_static(root: Path, url_path: str, dir_listing_enabled: bool) -> ProbeResult:
    candidate = candidate_for(url_path, dir_listing_enabled)
    resolved = resolve_under_root(root, candidate)
    if resolved is None:
        return StaticMiss("outside root")

    try:
        exists = resolved.exists()
    except OSError:
        return StaticMiss("unreadable")
    if not exists:
        return StaticMiss("missing")
    return StaticFound(resolved)
