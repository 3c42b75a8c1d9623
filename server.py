"""Main HTTP server entry point and connection lifecycle orchestration."""

from __future__ import annotations

import argparse
import logging
import socket
import time
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from access_log import configure_access_log, log_access
from config import (
    HOST,
    KEEPALIVE_TIMEOUT_SECS,
    MAX_KEEPALIVE_REQUESTS,
    REQUEST_QUEUE_SIZE,
    SOCKET_TIMEOUT_SECS,
    WORKER_COUNT,
    ServerOptions,
    resolve_config,
)
from dispatch import Dispatcher, DynamicHandler
from request import HTTPRequest, HTTPRequestParseError
from response import REASON_PHRASES, HTTPResponse, as_head_response
from socket_handler import (
    READ_ERROR_STATUS,
    HTTPReadError,
    read_http_request_message,
    write_http_response_message,
)
from thread_pool import ThreadPool

logger = logging.getLogger(__name__)

App = Callable[[HTTPRequest], HTTPResponse]


class HTTPServer:
    """Accepts connections and runs ``app`` for each parsed request on a worker pool."""

    def __init__(
        self,
        host: str = HOST,
        port: int = 0,
        app: App | None = None,
        worker_count: int = WORKER_COUNT,
        request_queue_size: int = REQUEST_QUEUE_SIZE,
        *,
        keepalive_timeout_secs: int = KEEPALIVE_TIMEOUT_SECS,
    ) -> None:
        self.host = host
        self.port = port
        self.app = app or _not_found_app
        self.worker_count = worker_count
        self.request_queue_size = request_queue_size
        self.keepalive_timeout_secs = keepalive_timeout_secs

        self._server_socket: socket.socket | None = None
        self._pool: ThreadPool | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Bind, listen and serve until ``stop`` is called."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server_socket:
            self._server_socket = server_socket
            server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            server_socket.bind((self.host, self.port))
            server_socket.listen(128)
            server_socket.settimeout(0.2)
            self.port = server_socket.getsockname()[1]
            self._pool = ThreadPool(
                worker_count=self.worker_count,
                queue_size=self.request_queue_size,
                handler=self._handle_client,
            )
            self._pool.start()
            logger.info("Listening on http://%s:%s", self.host, self.port)

            self._running = True
            try:
                while self._running:
                    try:
                        client_socket, address = server_socket.accept()
                    except socket.timeout:
                        continue
                    except OSError:
                        break

                    if self._pool is None or not self._pool.submit(client_socket, address):
                        self._send_queue_full_response(client_socket)
            finally:
                self._running = False
                if self._pool is not None:
                    self._pool.shutdown()
                    self._pool = None

    def stop(self) -> None:
        self._running = False
        if self._server_socket is not None:
            self._server_socket.close()
            self._server_socket = None
        if self._pool is not None:
            self._pool.shutdown()
            self._pool = None

    def _send_queue_full_response(self, client_socket: socket.socket) -> None:
        with client_socket:
            response = HTTPResponse(
                status_code=503,
                headers={"Connection": "close"},
                body="Service Unavailable",
            )
            try:
                write_http_response_message(client_socket, response)
            except OSError:
                logger.debug("Client went away before 503 was written")

    def _handle_client(self, client_socket: socket.socket, address: tuple[str, int]) -> None:
        with client_socket:
            client_socket.settimeout(min(SOCKET_TIMEOUT_SECS, self.keepalive_timeout_secs))
            carry = b""
            for _ in range(MAX_KEEPALIVE_REQUESTS):
                started_at = time.perf_counter()
                try:
                    raw_request, carry = read_http_request_message(client_socket, carry)
                except HTTPReadError as exc:
                    self._reject(client_socket, READ_ERROR_STATUS.get(type(exc), 400))
                    return
                except OSError:
                    return

                if not raw_request:
                    return

                try:
                    request = HTTPRequest.from_bytes(raw_request)
                except HTTPRequestParseError as exc:
                    self._reject(client_socket, exc.status_code)
                    return

                response = self.app(request)
                if request.method == "HEAD":
                    response = as_head_response(response)
                close_after = response.should_close or not request.keep_alive
                if close_after:
                    response.headers.set("Connection", "close")

                try:
                    bytes_sent = write_http_response_message(client_socket, response)
                except OSError:
                    logger.debug("Client %s disconnected mid-response", address[0])
                    return

                logger.debug(
                    "client=%s status=%s bytes_out=%s duration_ms=%.2f",
                    address[0],
                    response.status_code,
                    bytes_sent,
                    (time.perf_counter() - started_at) * 1000,
                )
                if close_after:
                    return

    def _reject(self, client_socket: socket.socket, status_code: int) -> None:
        response = HTTPResponse(
            status_code=status_code,
            headers={"Connection": "close"},
            body=REASON_PHRASES.get(status_code, "Bad Request"),
        )
        log_access(HTTPRequest(method="-", path="-", http_version="-"), status_code)
        try:
            write_http_response_message(client_socket, response)
        except OSError:
            logger.debug("Client went away before %s was written", status_code)


def _not_found_app(request: HTTPRequest) -> HTTPResponse:
    _ = request
    return HTTPResponse(status_code=404, body="Not Found")


def httpd(
    handler: DynamicHandler | None = None,
    options: ServerOptions | Mapping[str, Any] | None = None,
    argv: Sequence[str] | None = None,
) -> HTTPServer:
    """Build a server for the resolved root that falls back to ``handler``.

    The returned server is not started; call ``start()`` to serve.
    """
    config = resolve_config(options, argv)
    logger.info("docroot=%s", config.root)
    dispatcher = Dispatcher(config, handler)
    return HTTPServer(host=config.host, port=config.port, app=dispatcher)


def _parse_args(argv: Sequence[str] | None = None) -> tuple[argparse.Namespace, list[str]]:
    parser = argparse.ArgumentParser(description="Serve a directory with a dynamic fallback")
    parser.add_argument("--root", default=None, help="directory to serve (default: cwd)")
    parser.add_argument("--host", default=None)
    parser.add_argument("--no-cors", action="store_true", help="omit CORS headers")
    parser.add_argument("--no-ls", action="store_true", help="disable directory listings")
    parser.add_argument(
        "--header",
        action="append",
        default=None,
        metavar="'Name: value'",
        help="extra response header, repeatable",
    )
    parser.add_argument("--verbose", action="store_true", help="debug logging")
    parser.add_argument("--quiet", action="store_true", help="no access log")
    return parser.parse_known_args(argv)


def _options_from_args(args: argparse.Namespace) -> dict[str, Any]:
    options: dict[str, Any] = {}
    if args.root is not None:
        options["root"] = args.root
    if args.host is not None:
        options["host"] = args.host
    if args.no_cors:
        options["cors"] = False
    if args.no_ls:
        options["ls"] = False
    if args.header:
        options["headers"] = args.header
    return options


if __name__ == "__main__":
    from handlers.example_handlers import build_example_router

    args, remaining = _parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    if not args.quiet:
        configure_access_log()
    server = httpd(build_example_router(), _options_from_args(args), argv=None)
    if remaining:
        logger.debug("Unrecognised arguments ignored: %s", remaining)
    try:
        server.start()
    except KeyboardInterrupt:
        server.stop()
