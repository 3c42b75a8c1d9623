"""Unit tests for HTTP response serialization."""

from pathlib import Path

from headers import Headers
from response import HTTPResponse, as_head_response


def test_response_serialization_sets_length_and_default_content_type() -> None:
    response = HTTPResponse(status_code=200, body="hello")

    raw = response.to_bytes()

    assert raw.startswith(b"HTTP/1.1 200 OK\r\n")
    assert b"Content-Type: text/plain; charset=utf-8\r\n" in raw
    assert b"Content-Length: 5\r\n" in raw
    assert raw.endswith(b"\r\n\r\nhello")


def test_response_serialization_preserves_custom_content_type() -> None:
    response = HTTPResponse(
        status_code=404,
        headers={"content-type": "text/html"},
        body=b"<h1>Not Found</h1>",
    )

    raw = response.to_bytes()

    assert raw.startswith(b"HTTP/1.1 404 Not Found\r\n")
    assert b"content-type: text/html\r\n" in raw
    assert b"Content-Type: text/plain" not in raw
    assert b"Content-Length: 18\r\n" in raw


def test_repeated_headers_are_written_separately() -> None:
    headers = Headers([("Set-Cookie", "a=1"), ("Set-Cookie", "b=2"), ("", "nameless")])
    raw = HTTPResponse(status_code=200, headers=headers).to_bytes()

    assert b"Set-Cookie: a=1\r\n" in raw
    assert b"Set-Cookie: b=2\r\n" in raw
    assert b": nameless" not in raw


def test_head_response_keeps_length_of_file(tmp_path: Path) -> None:
    file_path = tmp_path / "page.html"
    file_path.write_bytes(b"0123456789")

    head = as_head_response(HTTPResponse(status_code=200, file_path=file_path))
    raw = head.to_bytes()

    assert b"Content-Length: 10\r\n" in raw
    assert raw.endswith(b"\r\n\r\n")


def test_head_response_for_range_uses_slice_length(tmp_path: Path) -> None:
    file_path = tmp_path / "data.bin"
    file_path.write_bytes(b"0123456789")

    head = as_head_response(HTTPResponse(status_code=206, file_path=file_path, file_range=(2, 5)))

    assert b"Content-Length: 4\r\n" in head.to_bytes()
