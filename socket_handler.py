"""Low-level socket read/write utilities."""

from __future__ import annotations

import socket
from dataclasses import dataclass

from config import (
    BUFFER_SIZE,
    MAX_BODY_BYTES,
    MAX_HEADER_BYTES,
    MAX_REQUEST_BYTES,
    READ_CHUNK_SIZE,
)
from request import HTTPRequestParseError, scan_chunked_body
from response import HTTPResponse, iter_chunked_encoded, prepare_response


class HTTPReadError(Exception):
    """Raised when a client request cannot be safely read from the socket."""


class MalformedRequestError(HTTPReadError):
    """Raised when socket bytes do not form a complete HTTP request."""


class HeaderTooLargeError(HTTPReadError):
    """Raised when HTTP headers exceed configured maximum size."""


class PayloadTooLargeError(HTTPReadError):
    """Raised when request body exceeds configured maximum size."""


class SocketTimeoutError(HTTPReadError):
    """Raised when a client times out while sending request bytes."""


READ_ERROR_STATUS: dict[type[HTTPReadError], int] = {
    MalformedRequestError: 400,
    SocketTimeoutError: 408,
    PayloadTooLargeError: 413,
    HeaderTooLargeError: 431,
}


@dataclass(slots=True)
class RequestHeadInfo:
    header_end_index: int
    expected_body_length: int
    uses_chunked_transfer: bool


def _header_lines(header_bytes: bytes) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for line in header_bytes.decode("iso-8859-1").split("\r\n")[1:]:
        if not line:
            continue
        if ":" not in line:
            raise MalformedRequestError("Malformed header while reading request")
        name, value = line.split(":", 1)
        pairs.append((name.strip().lower(), value.strip()))
    return pairs


def _chunked_body_complete_length(encoded_body: bytes) -> int | None:
    try:
        scanned = scan_chunked_body(encoded_body)
    except HTTPRequestParseError as exc:
        error = PayloadTooLargeError if exc.status_code == 413 else MalformedRequestError
        raise error(str(exc)) from exc
    return None if scanned is None else scanned[1]


def inspect_http_request_head(buffer: bytes) -> RequestHeadInfo | None:
    """Inspect request headers from an in-memory buffer, if complete."""
    if len(buffer) > MAX_REQUEST_BYTES:
        raise PayloadTooLargeError("Request exceeded MAX_REQUEST_BYTES")

    header_end_index = buffer.find(b"\r\n\r\n")
    if header_end_index == -1:
        if len(buffer) > MAX_HEADER_BYTES:
            raise HeaderTooLargeError("Headers exceeded MAX_HEADER_BYTES")
        return None

    if header_end_index + 4 > MAX_HEADER_BYTES:
        raise HeaderTooLargeError("Headers exceeded MAX_HEADER_BYTES")

    headers = dict(_header_lines(bytes(buffer[:header_end_index])))
    uses_chunked_transfer = "chunked" in headers.get("transfer-encoding", "").lower()
    if uses_chunked_transfer and "content-length" in headers:
        raise MalformedRequestError("Content-Length cannot be combined with chunked transfer")

    expected_body_length = 0
    if not uses_chunked_transfer and "content-length" in headers:
        try:
            expected_body_length = int(headers["content-length"])
        except ValueError as exc:
            raise MalformedRequestError("Invalid Content-Length header") from exc
        if expected_body_length < 0:
            raise MalformedRequestError("Negative Content-Length header")
        if expected_body_length > MAX_BODY_BYTES:
            raise PayloadTooLargeError("Body exceeded MAX_BODY_BYTES")

    return RequestHeadInfo(
        header_end_index=header_end_index,
        expected_body_length=expected_body_length,
        uses_chunked_transfer=uses_chunked_transfer,
    )


def extract_http_request_message(buffer: bytes) -> tuple[bytes, bytes] | None:
    """Extract one complete HTTP request from a bytes buffer."""
    head_info = inspect_http_request_head(buffer)
    if head_info is None:
        return None

    body_start = head_info.header_end_index + 4
    if head_info.uses_chunked_transfer:
        complete_body_length = _chunked_body_complete_length(buffer[body_start:])
        if complete_body_length is None:
            return None
        request_length = body_start + complete_body_length
    else:
        request_length = body_start + head_info.expected_body_length
        if len(buffer) < request_length:
            return None

    return buffer[:request_length], buffer[request_length:]


def read_http_request_message(
    client_socket: socket.socket,
    initial_buffer: bytes = b"",
) -> tuple[bytes, bytes]:
    """Read one HTTP/1.1 request and return (request_bytes, leftover_bytes)."""
    buffer = bytearray(initial_buffer)

    while True:
        extracted = extract_http_request_message(bytes(buffer))
        if extracted is not None:
            return extracted

        try:
            chunk = client_socket.recv(max(BUFFER_SIZE, READ_CHUNK_SIZE))
        except socket.timeout as exc:
            if not buffer:
                return b"", b""
            raise SocketTimeoutError("Timed out waiting for request bytes") from exc

        if not chunk:
            if not buffer:
                return b"", b""
            raise MalformedRequestError("Connection closed before request completed")

        buffer.extend(chunk)


def write_http_response_message(
    client_socket: socket.socket,
    response: HTTPResponse,
) -> int:
    """Write an HTTPResponse with incremental body/file transfer."""
    prepared = prepare_response(response)
    client_socket.sendall(prepared.head)
    bytes_sent = len(prepared.head)

    if prepared.body is not None:
        if prepared.body:
            client_socket.sendall(prepared.body)
            bytes_sent += len(prepared.body)
        return bytes_sent

    if prepared.stream is not None:
        for encoded_chunk in iter_chunked_encoded(prepared.stream):
            client_socket.sendall(encoded_chunk)
            bytes_sent += len(encoded_chunk)
        return bytes_sent

    file_slice = prepared.file_slice
    if file_slice is None:
        return bytes_sent

    with file_slice.path.open("rb") as file_obj:
        if file_slice.length > 0:
            bytes_sent += client_socket.sendfile(
                file_obj,
                offset=file_slice.offset,
                count=file_slice.length,
            )
    return bytes_sent
