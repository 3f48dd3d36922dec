import pytest

from webserv.config import LocationConfig, ServerConfig
from webserv.errors import (
    BadRequest,
    Conflict,
    Forbidden,
    InternalServerError,
    LengthRequired,
    MethodNotAllowed,
    NotFound,
    NotImplementedStatus,
    PayloadTooLarge,
    ReadMore,
    URITooLong,
)
from webserv.exchange import (
    build_response_header,
    check_method,
    error_closes_connection,
    error_page_target,
    extract_body,
    wants_keep_alive,
)
from webserv.headers import Header, ResponseHeader


def _headers(**fields):
    header = Header()
    for name, value in fields.items():
        header[name.replace("_", "-")] = value
    return header


def test_content_length_body():
    body, rest = extract_body("POST", _headers(Content_Length="5"), b"helloGET", 100)
    assert body == b"hello"
    assert rest == b"GET"


def test_content_length_incomplete():
    with pytest.raises(ReadMore):
        extract_body("POST", _headers(Content_Length="10"), b"short", 100)


def test_content_length_too_large():
    with pytest.raises(PayloadTooLarge):
        extract_body("POST", _headers(Content_Length="5"), b"hello", 3)


def test_content_length_not_number():
    with pytest.raises(BadRequest):
        extract_body("POST", _headers(Content_Length="abc"), b"hello", 100)


def test_transfer_encoding_and_length_conflict():
    with pytest.raises(BadRequest):
        extract_body("POST", _headers(Transfer_Encoding="chunked", Content_Length="1"), b"x", 100)


def test_unknown_transfer_encoding():
    with pytest.raises(NotImplementedStatus):
        extract_body("POST", _headers(Transfer_Encoding="gzip"), b"x", 100)


def test_chunked_body():
    data = b"4\r\nWiki\r\n5\r\npedia\r\n0\r\n\r\nrest"
    body, rest = extract_body("POST", _headers(Transfer_Encoding="chunked"), data, 100)
    assert body == b"Wikipedia"
    assert rest == b"rest"


def test_chunked_incomplete():
    with pytest.raises(ReadMore):
        extract_body("POST", _headers(Transfer_Encoding="chunked"), b"4\r\nWi", 100)


def test_chunked_invalid():
    with pytest.raises(BadRequest):
        extract_body("POST", _headers(Transfer_Encoding="chunked"), b"zz\r\nWiki\r\n", 100)
    with pytest.raises(BadRequest):
        extract_body("POST", _headers(Transfer_Encoding="chunked"), b"4\r\nWikiXX0\r\n\r\n", 100)


def test_chunked_over_limit():
    data = b"4\r\nWiki\r\n5\r\npedia\r\n0\r\n\r\n"
    with pytest.raises(PayloadTooLarge):
        extract_body("POST", _headers(Transfer_Encoding="chunked"), data, 4)


def test_no_length():
    assert extract_body("GET", Header(), b"next", 100) == (b"", b"next")
    with pytest.raises(LengthRequired):
        extract_body("POST", Header(), b"data", 100)
    assert extract_body("POST", Header(), b"", 100) == (b"", b"")


def test_wants_keep_alive():
    assert wants_keep_alive(_headers(Connection="close"), 100) is False
    assert wants_keep_alive(_headers(Connection="keep-alive"), 100) is True
    assert wants_keep_alive(Header(), 0) is False


def test_check_method():
    location = LocationConfig("/")
    location.apply("limit_except_method", ["GET"])
    check_method(location, "GET")
    with pytest.raises(MethodNotAllowed):
        check_method(location, "PATCH")
    with pytest.raises(Forbidden):
        check_method(location, "DELETE")
    with pytest.raises(Forbidden):
        check_method(ServerConfig(), "GET")


@pytest.mark.parametrize(
    "error, closes",
    [
        (BadRequest(), True),
        (LengthRequired(), True),
        (PayloadTooLarge(), True),
        (URITooLong(), True),
        (InternalServerError(), True),
        (NotImplementedStatus(), True),
        (NotFound(), False),
        (Conflict(), False),
    ],
)
def test_error_closes_connection(error, closes):
    assert error_closes_connection(error) is closes


def test_build_response_header_keep_alive():
    header = ResponseHeader()
    header["Content-Length"] = "0"
    assert build_response_header(header, True, 1, 100) is True
    assert header.content.startswith("HTTP/1.1 200 OK\r\n")
    assert "Connection: keep-alive\r\n" in header.content
    assert "Content-Length: 0\r\n" in header.content
    assert header.content.endswith("\r\n\r\n")


def test_build_response_header_close():
    header = ResponseHeader()
    header.content = "stale"
    assert build_response_header(header, True, 100, 100) is False
    assert "Connection: close\r\n" in header.content
    assert "stale" not in header.content
    assert build_response_header(ResponseHeader(), False, 0, 100) is False


def test_error_page_target():
    server = ServerConfig()
    server.apply("error_page", ["404", "=200", "/404.html"])
    assert error_page_target(server, 404, 0, 10) == (200, "/404.html")
    assert error_page_target(server, 500, 0, 10) is None
    with pytest.raises(InternalServerError):
        error_page_target(server, 404, 10, 10)