"""Unit tests for the header collection and default header policy."""

from config import CORS_ALLOW_HEADERS, resolve_config
from headers import Headers, build_default_headers, parse_header_spec


def test_parse_header_spec_splits_on_first_colon_only() -> None:
    name, value = parse_header_spec("Content-Security-Policy: default-src 'self' https://cdn.example:443")

    assert name == "Content-Security-Policy"
    assert value == "default-src 'self' https://cdn.example:443"


def test_parse_header_spec_without_name_is_best_effort() -> None:
    assert parse_header_spec(": orphan") == ("", "orphan")
    assert parse_header_spec("X-Flag") == ("X-Flag", "")


def test_default_headers_with_cors() -> None:
    headers = build_default_headers(resolve_config({}, argv=[]))

    assert headers.items() == [
        ("content-type", "text/html"),
        ("access-control-allow-origin", "*"),
        ("access-control-allow-headers", CORS_ALLOW_HEADERS),
    ]


def test_default_headers_without_cors() -> None:
    headers = build_default_headers(resolve_config({"cors": False}, argv=[]))

    assert "access-control-allow-origin" not in headers
    assert "access-control-allow-headers" not in headers
    assert headers["Content-Type"] == "text/html"


def test_duplicate_extra_headers_are_both_kept() -> None:
    config = resolve_config(
        {"cors": False, "headers": ["Link: </a.css>", "link: </b.css>"]},
        argv=[],
    )

    headers = build_default_headers(config)

    assert headers.get_all("Link") == ["</a.css>", "</b.css>"]
    assert headers.get("LINK") == "</a.css>, </b.css>"


def test_set_replaces_all_values_case_insensitively() -> None:
    headers = Headers([("Content-Type", "text/plain"), ("X-A", "1"), ("content-type", "x")])

    headers.set("CONTENT-TYPE", "text/html")

    assert headers.items() == [("CONTENT-TYPE", "text/html"), ("X-A", "1")]


def test_copy_is_independent() -> None:
    template = Headers({"content-type": "text/html"})

    copy = template.copy()
    copy.set("content-type", "application/json")
    copy.append("x-extra", "1")

    assert template.items() == [("content-type", "text/html")]
    assert copy["content-type"] == "application/json"


def test_delete_and_contains() -> None:
    headers = Headers({"X-A": "1", "X-B": "2"})

    headers.delete("x-a")

    assert "X-A" not in headers
    assert "x-b" in headers
    assert len(headers) == 1
