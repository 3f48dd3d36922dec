"""Exceptions used by the server: HTTP statuses, stream signals and config errors."""

from __future__ import annotations


class HTTPError(Exception):
    """An HTTP status raised to abort normal processing of a request."""

    default_status = 0
    default_message = ""

    def __init__(self, status: int | None = None, message: str | None = None) -> None:
        self.status = self.default_status if status is None else status
        self.message = self.default_message if message is None else message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.status!r}, {self.message!r})"


class Redirection(HTTPError):
    """A 3xx status carrying the target location."""

    default_status = 300
    default_message = "Error"

    def __init__(
        self,
        status: int | None = None,
        message: str | None = None,
        location: str = "",
    ) -> None:
        super().__init__(status, message)
        self.location = location


class ClientError(HTTPError):
    """A 4xx status."""

    default_status = 400
    default_message = "Error"


class ServerError(HTTPError):
    """A 5xx status."""

    default_status = 500
    default_message = "Error"


class Created(HTTPError):
    """201 Created."""

    default_status = 201
    default_message = "Created"

    def __init__(self, status: int | None = None, message: str | None = None) -> None:
        super().__init__(status, message)
        self.location = ""


class NoContent(HTTPError):
    """204 No Content."""

    default_status = 204
    default_message = "No Content"

    def __init__(self, location: str = "") -> None:
        super().__init__()
        self.location = location


class _FixedRedirect(Redirection):
    def __init__(self, location: str = "") -> None:
        super().__init__(None, None, location)


class MovedPermanently(_FixedRedirect):
    """301 Moved Permanently."""

    default_status = 301
    default_message = "Moved Permanently"


class Found(_FixedRedirect):
    """302 Found."""

    default_status = 302
    default_message = "Found"


class SeeOther(_FixedRedirect):
    """303 See Other."""

    default_status = 303
    default_message = "See Other"


class TemporaryRedirect(_FixedRedirect):
    """307 Temporary Redirect."""

    default_status = 307
    default_message = "Temporary Redirect"


class PermanentRedirect(_FixedRedirect):
    """308 Permanent Redirect."""

    default_status = 308
    default_message = "Permanent Redirect"


class BadRequest(ClientError):
    """400 Bad Request."""

    default_status = 400
    default_message = "Bad Request"


class Forbidden(ClientError):
    """403 Forbidden."""

    default_status = 403
    default_message = "Forbidden"


class NotFound(ClientError):
    """404 Not Found."""

    default_status = 404
    default_message = "Not Found"


class MethodNotAllowed(ClientError):
    """405 Method Not Allowed."""

    default_status = 405
    default_message = "Method Not Allowed"


class Conflict(ClientError):
    """409 Conflict."""

    default_status = 409
    default_message = "Conflict"


class LengthRequired(ClientError):
    """411 Length Required."""

    default_status = 411
    default_message = "Length Required"


class PayloadTooLarge(ClientError):
    """413 Payload Too Large."""

    default_status = 413
    default_message = "Payload Too Large"


class URITooLong(ClientError):
    """414 URI Too Long."""

    default_status = 414
    default_message = "URI Too Long"


class InternalServerError(ServerError):
    """500 Internal Server Error."""

    default_status = 500
    default_message = "Internal Server Error"


class NotImplementedStatus(ServerError):
    """501 Not Implemented."""

    default_status = 501
    default_message = "Not Implemented"


class HTTPVersionNotSupported(ServerError):
    """505 HTTP Version Not Supported."""

    default_status = 505
    default_message = "HTTP Version Not Supported"


class _StreamSignal(Exception):
    """Control-flow signal passed between a stream and the event loop."""

    def __str__(self) -> str:
        return ""


class ReadMore(_StreamSignal):
    """More input is needed before the request can be processed."""


class SendMore(_StreamSignal):
    """Output was only partly written; the rest stays buffered."""


class GotoCore(_StreamSignal):
    """Buffered input holds another request to process right away."""


class InternalRedirect(_StreamSignal):
    """The request was rewritten and must be processed again."""


class AutoIndex(_StreamSignal):
    """A directory listing should be served for the given path."""

    def __init__(self, path: str = "") -> None:
        super().__init__(path)
        self.path = path


class ConfigError(Exception):
    """The configuration could not be read or parsed."""


class ValueConversionError(ConfigError, ValueError):
    """A directive argument could not be converted to its value type."""


class DirectiveError(ConfigError):
    """A directive was given bad arguments or used in the wrong block."""

    def __init__(self, directive: str, message: str = "") -> None:
        self.directive = directive
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.message:
            return f"{self.directive}: {self.message}"
        return self.directive


class WrongDirective(DirectiveError):
    """The directive name is not known."""

    def __init__(self, directive: str, message: str = "unknown directive") -> None:
        super().__init__(directive, message)


class ConfigFileError(ConfigError):
    """The configuration file could not be opened or has a bad structure."""