"""Request body framing, keep-alive decisions and response header assembly."""

from __future__ import annotations

from webserv.config import Config
from webserv.errors import (
    BadRequest,
    Forbidden,
    HTTPError,
    InternalServerError,
    LengthRequired,
    MethodNotAllowed,
    NotImplementedStatus,
    PayloadTooLarge,
    ReadMore,
    ServerError,
    URITooLong,
)
from webserv.headers import Header, ResponseHeader
from webserv.routing import is_forbidden_method

SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE")
_HEX = frozenset(b"0123456789abcdefABCDEF")


def _decode_chunked(buffer: bytes, limit: int) -> tuple[bytes, bytes]:
    body = bytearray()
    position = 0
    while True:
        line_end = buffer.find(b"\r\n", position)
        if line_end < 0:
            raise ReadMore()
        size_text = buffer[position:line_end].split(b";", 1)[0].strip()
        if not size_text or any(byte not in _HEX for byte in size_text):
            raise BadRequest()
        size = int(size_text, 16)
        position = line_end + 2
        if size == 0:
            if len(buffer) < position + 2:
                raise ReadMore()
            if buffer[position:position + 2] == b"\r\n":
                return bytes(body), buffer[position + 2:]
            trailer_end = buffer.find(b"\r\n\r\n", position)
            if trailer_end < 0:
                raise ReadMore()
            return bytes(body), buffer[trailer_end + 4:]
        if len(body) + size > limit:
            raise PayloadTooLarge()
        if len(buffer) < position + size + 2:
            raise ReadMore()
        if buffer[position + size:position + size + 2] != b"\r\n":
            raise BadRequest()
        body += buffer[position:position + size]
        position += size + 2


def extract_body(method: str, headers: Header, buffer: bytes, max_body_size: int) -> tuple[bytes, bytes]:
    """Split the request body off the received bytes.

    Returns the body and the bytes left over after it. Raises ReadMore when
    the body is not complete yet, and an HTTP error when it is malformed.
    """
    if "Transfer-Encoding" in headers:
        if "Content-Length" in headers:
            raise BadRequest()
        if headers["Transfer-Encoding"] != "chunked":
            raise NotImplementedStatus()
        return _decode_chunked(buffer, max_body_size)
    if "Content-Length" in headers:
        text = headers["Content-Length"]
        if not text or not text.isascii() or not text.isdigit():
            raise BadRequest()
        length = int(text)
        if length > len(buffer):
            raise ReadMore()
        if length > max_body_size:
            raise PayloadTooLarge()
        return buffer[:length], buffer[length:]
    if method not in ("GET", "HEAD") and buffer:
        raise LengthRequired()
    return b"", buffer


def wants_keep_alive(headers: Header, keepalive_requests: int) -> bool:
    """Whether the first request on a connection allows keeping it open."""
    if "Connection" in headers and headers["Connection"] == "close":
        return False
    return keepalive_requests != 0


def check_method(conf: Config, method: str) -> None:
    """Raise if the method is unsupported or not allowed by the block."""
    if method not in SUPPORTED_METHODS:
        raise MethodNotAllowed()
    if is_forbidden_method(conf, method):
        raise Forbidden()


def error_closes_connection(error: HTTPError) -> bool:
    """Whether answering with this error must close the connection."""
    return isinstance(error, (ServerError, BadRequest, LengthRequired, PayloadTooLarge, URITooLong))


def build_response_header(
    header: ResponseHeader,
    keep_alive: bool,
    request_count: int,
    keepalive_requests: int,
) -> bool:
    """Serialize the response header in place and return whether to keep alive."""
    header.content = ""
    keep = keep_alive and request_count < keepalive_requests
    header["Connection"] = "keep-alive" if keep else "close"
    header.http_version = "HTTP/1.1"
    header.content = header.status_line()
    header.integrate()
    return keep


def error_page_target(
    conf: Config,
    status: int,
    redirect_count: int,
    max_redirects: int,
) -> tuple[int, str] | None:
    """Return the status and URI of the configured error page for status, if any."""
    entry = conf.error_page.get(status)
    if entry is None:
        return None
    if redirect_count == max_redirects:
        raise InternalServerError()
    return entry