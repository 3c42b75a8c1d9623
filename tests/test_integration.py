"""Socket-level integration tests for the static server with a dynamic fallback."""

from __future__ import annotations

import socket
import threading
import time
from pathlib import Path

import pytest

from handlers.example_handlers import build_example_router
from server import HTTPServer, httpd

CSP = "Content-Security-Policy: default-src 'none'"


def _start_server(root: Path, **options) -> tuple[HTTPServer, threading.Thread]:
    server = httpd(build_example_router(), {"port": 0, "root": root, **options}, argv=[])
    thread = threading.Thread(target=server.start, daemon=True)
    thread.start()

    deadline = time.time() + 3
    while not server.running and time.time() < deadline:
        time.sleep(0.01)

    if not server.running:
        raise RuntimeError("Server did not bind to a port")

    return server, thread


def _stop_server(server: HTTPServer, thread: threading.Thread) -> None:
    server.stop()
    thread.join(timeout=2.0)


def _recv_response(sock: socket.socket) -> tuple[bytes, dict[str, str], bytes]:
    buffer = bytearray()
    while b"\r\n\r\n" not in buffer:
        chunk = sock.recv(4096)
        if not chunk:
            break
        buffer.extend(chunk)

    head, _sep, body = bytes(buffer).partition(b"\r\n\r\n")
    lines = head.split(b"\r\n")
    headers: dict[str, str] = {}
    for line in lines[1:]:
        key, value = line.split(b":", 1)
        headers[key.strip().lower().decode("ascii")] = value.strip().decode("latin-1")

    content_length = int(headers.get("content-length", "0"))
    while len(body) < content_length:
        chunk = sock.recv(4096)
        if not chunk:
            break
        body += chunk
    return lines[0], headers, body


def _request(server: HTTPServer, payload: bytes) -> tuple[bytes, dict[str, str], bytes]:
    with socket.create_connection((server.host, server.port), timeout=2.0) as client:
        client.sendall(payload)
        return _recv_response(client)


def _get(server: HTTPServer, target: str, method: str = "GET") -> tuple[bytes, dict[str, str], bytes]:
    payload = f"{method} {target} HTTP/1.1\r\nHost: localhost\r\nConnection: close\r\n\r\n"
    return _request(server, payload.encode("ascii"))


@pytest.fixture
def site(tmp_path: Path) -> Path:
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "index.html").write_text("<h1>Docs</h1>", encoding="utf-8")
    (tmp_path / "hello.txt").write_text("static hello", encoding="utf-8")
    return tmp_path


def test_static_file_is_served(site: Path) -> None:
    server, thread = _start_server(site)
    try:
        status, headers, body = _get(server, "/hello.txt")
    finally:
        _stop_server(server, thread)

    assert status == b"HTTP/1.1 200 OK"
    assert body == b"static hello"
    assert headers["access-control-allow-origin"] == "*"


def test_static_file_shadows_dynamic_route(site: Path) -> None:
    (site / "hello").write_text("from disk", encoding="utf-8")
    server, thread = _start_server(site)
    try:
        _status, _headers, body = _get(server, "/hello")
    finally:
        _stop_server(server, thread)

    assert body == b"from disk"


def test_dynamic_route_is_used_when_no_file(site: Path) -> None:
    server, thread = _start_server(site)
    try:
        status, headers, body = _get(server, "/hello")
    finally:
        _stop_server(server, thread)

    assert status == b"HTTP/1.1 200 OK"
    assert body == b"<h1>Hello World</h1>"
    assert headers["content-type"] == "text/html"


def test_async_route_is_awaited(site: Path) -> None:
    server, thread = _start_server(site)
    try:
        status, _headers, body = _get(server, "/slow")
    finally:
        _stop_server(server, thread)

    assert status == b"HTTP/1.1 200 OK"
    assert body == b"done waiting"


def test_unknown_path_gets_custom_404(site: Path) -> None:
    server, thread = _start_server(site)
    try:
        status, headers, body = _get(server, "/no/such/page")
    finally:
        _stop_server(server, thread)

    assert status == b"HTTP/1.1 404 Not Found"
    assert headers["content-type"] == "text/html"
    assert b"<svg" in body
    assert b"Not Found" in body


def test_failing_route_gets_custom_500(site: Path) -> None:
    server, thread = _start_server(site)
    try:
        status, headers, body = _get(server, "/boom")
    finally:
        _stop_server(server, thread)

    assert status == b"HTTP/1.1 500 Internal Server Error"
    assert headers["content-type"] == "text/html"
    assert b"Internal Server Error" in body
    assert b"example handler failure" not in body


def test_post_body_reaches_handler(site: Path) -> None:
    server, thread = _start_server(site)
    try:
        status, headers, body = _request(
            server,
            (
                b"POST /echo HTTP/1.1\r\n"
                b"Host: localhost\r\n"
                b"Content-Length: 9\r\n"
                b"Connection: close\r\n\r\n"
                b"name=test"
            ),
        )
    finally:
        _stop_server(server, thread)

    assert status == b"HTTP/1.1 200 OK"
    assert headers["content-type"] == "application/json"
    assert b'"body": "name=test"' in body


def test_csp_dropped_only_for_plain_html_get(site: Path) -> None:
    server, thread = _start_server(site, headers=[CSP])
    try:
        _status, plain_headers, _body = _get(server, "/docs/index.html")
        _status, query_headers, _body = _get(server, "/docs/index.html?x=1")
        _status, dynamic_headers, _body = _get(server, "/no/such/page")
    finally:
        _stop_server(server, thread)

    assert "content-security-policy" not in plain_headers
    assert query_headers["content-security-policy"] == "default-src 'none'"
    assert dynamic_headers["content-security-policy"] == "default-src 'none'"


def test_cors_disabled_omits_headers(site: Path) -> None:
    server, thread = _start_server(site, cors=False)
    try:
        _status, static_headers, _body = _get(server, "/hello.txt")
        _status, dynamic_headers, _body = _get(server, "/missing")
    finally:
        _stop_server(server, thread)

    assert "access-control-allow-origin" not in static_headers
    assert "access-control-allow-origin" not in dynamic_headers


def test_root_listing_follows_ls_option(site: Path) -> None:
    server, thread = _start_server(site)
    try:
        listed_status, _headers, listed_body = _get(server, "/")
    finally:
        _stop_server(server, thread)

    server, thread = _start_server(site, ls=False)
    try:
        unlisted_status, _headers, _body = _get(server, "/")
    finally:
        _stop_server(server, thread)

    assert listed_status == b"HTTP/1.1 200 OK"
    assert b"hello.txt" in listed_body
    assert unlisted_status == b"HTTP/1.1 404 Not Found"


def test_head_request_has_no_body(site: Path) -> None:
    server, thread = _start_server(site)
    try:
        status, headers, body = _get(server, "/hello.txt", method="HEAD")
    finally:
        _stop_server(server, thread)

    assert status == b"HTTP/1.1 200 OK"
    assert headers["content-length"] == str(len("static hello"))
    assert body == b""


def test_repeated_gets_return_identical_bodies(site: Path) -> None:
    server, thread = _start_server(site)
    try:
        first = _get(server, "/hello.txt")
        second = _get(server, "/hello.txt")
    finally:
        _stop_server(server, thread)

    assert first[0] == second[0]
    assert first[2] == second[2]


def test_keep_alive_serves_multiple_requests(site: Path) -> None:
    server, thread = _start_server(site)
    try:
        with socket.create_connection((server.host, server.port), timeout=2.0) as client:
            client.sendall(b"GET /hello.txt HTTP/1.1\r\nHost: localhost\r\n\r\n")
            first = _recv_response(client)
            client.sendall(b"GET /hello HTTP/1.1\r\nHost: localhost\r\nConnection: close\r\n\r\n")
            second = _recv_response(client)
    finally:
        _stop_server(server, thread)

    assert first[2] == b"static hello"
    assert second[2] == b"<h1>Hello World</h1>"


def test_malformed_request_returns_400(site: Path) -> None:
    server, thread = _start_server(site)
    try:
        status, _headers, _body = _request(server, b"BROKEN\r\n\r\n")
    finally:
        _stop_server(server, thread)

    assert status == b"HTTP/1.1 400 Bad Request"
