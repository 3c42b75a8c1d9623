"""Per-request routing between static files and the dynamic fallback handler."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any

from access_log import log_access
from config import ServerConfig
from error_pages import INTERNAL_ERROR_PAGE, NOT_FOUND_PAGE
from file_server import ServeDirOptions, StaticNotFound, serve_dir
from headers import Headers, build_default_headers, parse_header_spec
from request import HTTPRequest
from response import HTTPResponse
from static_probe import StaticFound, probe_static

logger = logging.getLogger(__name__)

HandlerReturn = HTTPResponse | Awaitable[HTTPResponse | None] | None
DynamicHandler = Callable[[HTTPRequest, Headers], HandlerReturn]

CSP_HEADER_PREFIX = "content-security-policy"
SAFE_HTML_SUFFIXES = (".html", ".htm")


@dataclass(frozen=True, slots=True)
class StaticServed:
    response: HTTPResponse

    @property
    def status(self) -> int:
        return self.response.status_code


@dataclass(frozen=True, slots=True)
class DynamicServed:
    response: HTTPResponse

    @property
    def status(self) -> int:
        return self.response.status_code


@dataclass(frozen=True, slots=True)
class NotFound:
    response: HTTPResponse

    @property
    def status(self) -> int:
        return 404


@dataclass(frozen=True, slots=True)
class InternalError:
    response: HTTPResponse
    detail: BaseException

    @property
    def status(self) -> int:
        return 500


ResponseOutcome = StaticServed | DynamicServed | NotFound | InternalError


@dataclass(frozen=True, slots=True)
class HandlerSuccess:
    response: HTTPResponse | None


@dataclass(frozen=True, slots=True)
class HandlerFailure:
    error: Exception


HandlerResult = HandlerSuccess | HandlerFailure


def is_safe_html(request: HTTPRequest) -> bool:
    """GET for a .htm(l) document with a bare target: no query, fragment or credentials."""
    return (
        request.method == "GET"
        and request.has_plain_target
        and request.path.endswith(SAFE_HTML_SUFFIXES)
    )


def static_header_specs(extra_headers: Sequence[str], request: HTTPRequest) -> tuple[str, ...]:
    """Extra headers for a static response, minus CSP headers for safe HTML pages.

    Documentation pages may rely on inline scripts, so a content security
    policy is not sent with them. Names are compared case-insensitively.
    """
    if not is_safe_html(request):
        return tuple(extra_headers)
    return tuple(
        raw
        for raw in extra_headers
        if not parse_header_spec(raw)[0].lower().startswith(CSP_HEADER_PREFIX)
    )


async def _resolve(pending: Awaitable[Any]) -> Any:
    return await pending


def invoke_handler(handler: DynamicHandler, request: HTTPRequest, headers: Headers) -> HandlerResult:
    """Call the handler and wait for at most one pending result.

    Coroutines and other awaitables run to completion on a fresh event loop in
    the calling worker thread; ``concurrent.futures.Future`` results are waited on.
    """
    try:
        result = handler(request, headers)
        if inspect.isawaitable(result):
            result = asyncio.run(_resolve(result))
        elif isinstance(result, Future):
            result = result.result()
    except Exception as exc:
        return HandlerFailure(exc)

    if result is not None and not isinstance(result, HTTPResponse):
        return HandlerFailure(
            TypeError(f"Handler returned {type(result).__name__}, expected HTTPResponse or None")
        )
    return HandlerSuccess(result)


class Dispatcher:
    """Serves static resources from the configured root, else the dynamic handler.

    The default header template is built once; every dynamic request gets its
    own copy so handler mutations stay request-local.
    """

    def __init__(self, config: ServerConfig, handler: DynamicHandler | None = None) -> None:
        self.config = config
        self.handler = handler
        self.default_headers = build_default_headers(config)

    def __call__(self, request: HTTPRequest) -> HTTPResponse:
        return self.dispatch(request).response

    def dispatch(self, request: HTTPRequest) -> ResponseOutcome:
        outcome = self._route(request)
        log_access(request, outcome.status)
        return outcome

    def _route(self, request: HTTPRequest) -> ResponseOutcome:
        probe = probe_static(self.config.root, request.path, self.config.dir_listing_enabled)
        if isinstance(probe, StaticFound):
            try:
                return StaticServed(self._serve_static(request))
            except StaticNotFound:
                logger.debug("No servable static resource at %s, falling back", request.path)
            except Exception as exc:
                logger.exception("Static serving failed for %s", request.path)
                return self._internal_error(self.default_headers.copy(), exc)
        return self._serve_dynamic(request)

    def _serve_static(self, request: HTTPRequest) -> HTTPResponse:
        options = ServeDirOptions(
            enable_cors=self.config.cors_enabled,
            show_dir_listing=self.config.dir_listing_enabled,
            headers=static_header_specs(self.config.extra_headers, request),
        )
        return serve_dir(request, self.config.root, options)

    def _serve_dynamic(self, request: HTTPRequest) -> ResponseOutcome:
        headers = self.default_headers.copy()
        if self.handler is None:
            result: HandlerResult = HandlerSuccess(None)
        else:
            result = invoke_handler(self.handler, request, headers)

        if isinstance(result, HandlerFailure):
            logger.error(
                "Dynamic handler failed for %s %s",
                request.method,
                request.path,
                exc_info=result.error,
            )
            return self._internal_error(headers, result.error)

        if result.response is None:
            headers.set("content-type", "text/html")
            return NotFound(HTTPResponse(status_code=404, headers=headers, body=NOT_FOUND_PAGE))

        return DynamicServed(result.response)

    def _internal_error(self, headers: Headers, detail: BaseException) -> InternalError:
        headers.set("content-type", "text/html")
        return InternalError(
            HTTPResponse(status_code=500, headers=headers, body=INTERNAL_ERROR_PAGE),
            detail=detail,
        )
