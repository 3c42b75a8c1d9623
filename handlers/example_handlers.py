"""Example dynamic handlers served when no static file matches."""

from __future__ import annotations

import asyncio
import json

from headers import Headers
from request import HTTPRequest
from response import HTTPResponse
from router import Router


def hello(request: HTTPRequest, headers: Headers) -> HTTPResponse:
    _ = request
    return HTTPResponse(status_code=200, headers=headers, body="<h1>Hello World</h1>")


def echo(request: HTTPRequest, headers: Headers) -> HTTPResponse:
    headers.set("content-type", "application/json")
    payload = {
        "method": request.method,
        "path": request.path,
        "query": request.query_params,
        "body": request.body.decode("utf-8", errors="replace"),
    }
    return HTTPResponse(status_code=200, headers=headers, body=json.dumps(payload, sort_keys=True))


async def slow(request: HTTPRequest, headers: Headers) -> HTTPResponse:
    _ = request
    await asyncio.sleep(0.05)
    headers.set("content-type", "text/plain; charset=utf-8")
    return HTTPResponse(status_code=200, headers=headers, body="done waiting")


def boom(request: HTTPRequest, headers: Headers) -> HTTPResponse:
    _ = request, headers
    raise RuntimeError("example handler failure")


def build_example_router() -> Router:
    router = Router()
    router.add_route("GET", "/hello", hello)
    router.add_route("POST", "/echo", echo)
    router.add_route("GET", "/slow", slow)
    router.add_route("GET", "/boom", boom)
    return router
