"""HTTP response model and serializer."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from email.utils import formatdate
from pathlib import Path

from config import SERVER_NAME
from headers import Headers

REASON_PHRASES: dict[int, str] = {
    200: "OK",
    206: "Partial Content",
    301: "Moved Permanently",
    304: "Not Modified",
    400: "Bad Request",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    408: "Request Timeout",
    413: "Payload Too Large",
    414: "URI Too Long",
    416: "Range Not Satisfiable",
    431: "Request Header Fields Too Large",
    500: "Internal Server Error",
    501: "Not Implemented",
    503: "Service Unavailable",
    505: "HTTP Version Not Supported",
}


@dataclass(slots=True)
class FileSlice:
    """Byte window of a file body; ``length`` bytes starting at ``offset``."""

    path: Path
    offset: int
    length: int


@dataclass(slots=True)
class PreparedResponse:
    head: bytes
    body: bytes | None = None
    stream: Iterator[bytes] | None = None
    file_slice: FileSlice | None = None


@dataclass(slots=True)
class HTTPResponse:
    status_code: int
    reason_phrase: str | None = None
    headers: Headers | Mapping[str, str] = field(default_factory=Headers)
    body: bytes | str = b""
    stream: Iterable[bytes] | None = None
    file_path: Path | None = None
    file_range: tuple[int, int] | None = None
    should_close: bool = False
    content_length_override: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.headers, Headers):
            self.headers = Headers(self.headers)
        if isinstance(self.body, str):
            self.body = self.body.encode("utf-8")
        if self.stream is not None and self.file_path is not None:
            raise ValueError("Response cannot set both stream and file_path")
        if self.file_path is not None and self.body:
            raise ValueError("Response cannot set both body and file_path")
        if self.file_range is not None and self.file_path is None:
            raise ValueError("file_range requires file_path")

    def to_bytes(self) -> bytes:
        """Serialize the response into HTTP/1.1 wire format bytes."""
        prepared = prepare_response(self)
        payload = bytearray(prepared.head)
        if prepared.body is not None:
            payload.extend(prepared.body)
        elif prepared.stream is not None:
            for encoded_chunk in iter_chunked_encoded(prepared.stream):
                payload.extend(encoded_chunk)
        elif prepared.file_slice is not None:
            payload.extend(read_file_slice(prepared.file_slice))
        return bytes(payload)


def prepare_response(response: HTTPResponse) -> PreparedResponse:
    reason = response.reason_phrase or REASON_PHRASES.get(response.status_code, "Unknown")
    normalized_headers = Headers(response.headers)
    normalized_headers.setdefault(
        "Date",
        formatdate(timeval=None, localtime=False, usegmt=True),
    )
    normalized_headers.setdefault("Server", SERVER_NAME)
    normalized_headers.setdefault("Content-Type", "text/plain; charset=utf-8")

    body: bytes | None = None
    stream: Iterator[bytes] | None = None
    file_slice: FileSlice | None = None
    if response.stream is not None:
        normalized_headers.delete("Content-Length")
        normalized_headers.set("Transfer-Encoding", "chunked")
        stream = iter(response.stream)
    elif response.file_path is not None:
        if response.file_range is not None:
            start, end = response.file_range
            file_slice = FileSlice(response.file_path, start, end - start + 1)
        else:
            file_slice = FileSlice(response.file_path, 0, response.file_path.stat().st_size)
        content_length = response.content_length_override
        if content_length is None:
            content_length = file_slice.length
        normalized_headers.set("Content-Length", str(content_length))
    else:
        body = response.body
        content_length = response.content_length_override
        if content_length is None:
            content_length = len(body)
        normalized_headers.set("Content-Length", str(content_length))

    header_lines = [f"HTTP/1.1 {response.status_code} {reason}"]
    header_lines.extend(
        f"{key}: {value}" for key, value in normalized_headers.items() if key
    )
    head = "\r\n".join(header_lines).encode("iso-8859-1") + b"\r\n\r\n"
    return PreparedResponse(head=head, body=body, stream=stream, file_slice=file_slice)


def read_file_slice(file_slice: FileSlice) -> bytes:
    with file_slice.path.open("rb") as file_obj:
        file_obj.seek(file_slice.offset)
        return file_obj.read(file_slice.length)


def iter_chunked_encoded(chunks: Iterable[bytes]) -> Iterator[bytes]:
    for chunk in chunks:
        yield f"{len(chunk):X}\r\n".encode("ascii")
        yield chunk
        yield b"\r\n"
    yield b"0\r\n\r\n"


def as_head_response(get_response: HTTPResponse) -> HTTPResponse:
    """Strip the body from a GET response while keeping its length headers."""
    headers = Headers(get_response.headers)
    if get_response.stream is not None:
        headers.setdefault("Transfer-Encoding", "chunked")
        return HTTPResponse(
            status_code=get_response.status_code,
            reason_phrase=get_response.reason_phrase,
            headers=headers,
            body=b"",
        )

    if get_response.file_path is not None:
        if get_response.file_range is not None:
            start, end = get_response.file_range
            body_size = end - start + 1
        else:
            body_size = get_response.file_path.stat().st_size
        return HTTPResponse(
            status_code=get_response.status_code,
            reason_phrase=get_response.reason_phrase,
            headers=headers,
            body=b"",
            content_length_override=body_size,
        )

    body_bytes = get_response.body
    if isinstance(body_bytes, str):
        body_bytes = body_bytes.encode("utf-8")
    return HTTPResponse(
        status_code=get_response.status_code,
        reason_phrase=get_response.reason_phrase,
        headers=headers,
        body=b"",
        content_length_override=len(body_bytes),
    )
