"""Static files: reading, PUT uploads, DELETE, content types and CGI detection."""

from __future__ import annotations

import os
import stat
from collections.abc import Mapping

from webserv.config import Config
from webserv.errors import Conflict, Forbidden, InternalServerError, NotFound
from webserv.routing import cgi_executable

CREATED = (201, "Created")
NO_CONTENT = (204, "No Content")


def file_extension(filename: str) -> str:
    """Return the extension of the last path component, without the dot, or ""."""
    base = filename.rsplit("/", 1)[-1]
    _, dot, extension = base.rpartition(".")
    return extension if dot else ""


def content_type(filename: str, mime: Mapping[str, str], default_type: str) -> str:
    """Return the MIME type for a file name, falling back to default_type."""
    return mime.get(file_extension(filename), default_type)


def read_file(filename: str) -> bytes:
    """Read a whole file; an unreadable file is an internal server error."""
    try:
        with open(filename, "rb") as handle:
            return handle.read()
    except OSError as exc:
        raise InternalServerError() from exc


def write_put_file(filename: str, body: bytes) -> tuple[int, str]:
    """Store a PUT body at filename.

    Returns 204 No Content when the file already existed, 201 Created otherwise.
    A file that cannot be opened for writing is a conflict.
    """
    already_exists = os.path.exists(filename)
    try:
        descriptor = os.open(filename, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o777)
    except OSError as exc:
        raise Conflict() from exc
    with os.fdopen(descriptor, "wb") as handle:
        handle.write(body)
    return NO_CONTENT if already_exists else CREATED


def _stat(filename: str) -> os.stat_result:
    try:
        return os.stat(filename)
    except FileNotFoundError as exc:
        raise NotFound() from exc
    except NotADirectoryError as exc:
        raise NotFound() from exc
    except PermissionError as exc:
        raise Forbidden() from exc
    except OSError as exc:
        raise InternalServerError() from exc


def delete_file(filename: str) -> tuple[int, str]:
    """Delete a file or an empty directory named with a trailing slash."""
    info = _stat(filename)
    is_directory = stat.S_ISDIR(info.st_mode)
    if is_directory and not filename.endswith("/"):
        raise Conflict()
    try:
        if is_directory:
            os.rmdir(filename)
        else:
            os.remove(filename)
    except OSError as exc:
        raise Conflict() from exc
    return NO_CONTENT


def control_file(method: str, filename: str, body: bytes = b"") -> tuple[int, str]:
    """Carry out a PUT or DELETE on filename and return the status and reason."""
    if method == "PUT":
        return write_put_file(filename, body)
    if method == "DELETE":
        return delete_file(filename)
    raise InternalServerError()


def is_cgi(conf: Config, filename: str) -> bool:
    """Whether the block runs a CGI interpreter for the file's extension."""
    return bool(cgi_executable(conf, "." + file_extension(filename)))


def is_dynamic_resource(conf: Config, filename: str) -> bool:
    """Whether the file is produced by a program rather than served as is."""
    return is_cgi(conf, filename)