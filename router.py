"""Exact method/path routing usable as the dynamic fallback handler."""

from __future__ import annotations

from collections.abc import Callable

from headers import Headers
from request import HTTPRequest
from response import HTTPResponse

RouteHandler = Callable[[HTTPRequest, Headers], object]


class Router:
    """Maps (method, path) to dynamic handlers.

    A Router is itself a dynamic handler: calling it with a request that has
    no route returns None, which the dispatcher turns into the 404 page.
    HEAD requests fall back to the GET route for the same path.
    """

    def __init__(self) -> None:
        self._routes: dict[tuple[str, str], RouteHandler] = {}

    def add_route(self, method: str, path: str, handler: RouteHandler) -> None:
        normalized_method = method.upper().strip()
        if not normalized_method:
            raise ValueError("method cannot be empty")
        if not path.startswith("/"):
            raise ValueError("path must start with '/'")
        self._routes[(normalized_method, path)] = handler

    def route(self, method: str, path: str) -> Callable[[RouteHandler], RouteHandler]:
        def register(handler: RouteHandler) -> RouteHandler:
            self.add_route(method, path, handler)
            return handler

        return register

    def resolve(self, method: str, path: str) -> RouteHandler | None:
        normalized_method = method.upper().strip()
        handler = self._routes.get((normalized_method, path))
        if handler is None and normalized_method == "HEAD":
            handler = self._routes.get(("GET", path))
        return handler

    def __call__(self, request: HTTPRequest, headers: Headers) -> HTTPResponse | object | None:
        handler = self.resolve(request.method, request.path)
        if handler is None:
            return None
        return handler(request, headers)
