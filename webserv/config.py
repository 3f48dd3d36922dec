"""Configuration blocks and the directives that fill them."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from pathlib import Path

from webserv.errors import ConfigFileError, DirectiveError, ValueConversionError, WrongDirective
from webserv.values import (
    check_path,
    parse_bytes,
    parse_ip,
    parse_port,
    parse_return_code,
    parse_size_t,
    parse_status_code,
    parse_switch,
    parse_time,
)

DEFAULT_CONFIG_PATH = "conf/default.conf"
DEFAULT_LISTEN_IP = "127.0.0.1"
ALLOWED_METHODS = ("GET", "POST", "PUT", "DELETE")

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_LEADING_INT = re.compile(r"[+-]?\d+")

_TIME_DIRECTIVES = (
    "timer",
    "lingering_time",
    "lingering_timeout",
    "keepalive_time",
    "keepalive_timeout",
    "send_timeout",
    "client_body_timeout",
)


class Config:
    """Settings shared by the http, server and location blocks."""

    def __init__(self) -> None:
        self.link: list[Config] = []
        self.error_page: dict[int, tuple[int, str]] = {}
        self.index: list[str] = ["index.html"]
        self.auto_index = False
        self.root = "html"
        self.keepalive_requests = 1000
        self.default_type = "application/octet-stream"
        self.client_max_body_size = 1024 * 1024
        self.reset_timedout_connection = False
        self.file_access = False
        self.lingering_time = 30_000
        self.lingering_timeout = 5_000
        self.keepalive_time = 3_600_000
        self.keepalive_timeout = 75_000
        self.send_timeout = 60_000
        self.client_body_timeout = 60_000
        self.timer = 0
        self.cgi: dict[str, str] = {}
        self.d_return: tuple[int, str] = (0, "")
        self.server_name_in_redirect = False
        self.port_in_redirect = True
        self.handdown_index = False
        self.handdown_error_page = False
        self._seen: set[str] = set()

    # ------------------------------------------------------------------ parsing

    def apply(self, directive: str, args: Sequence[str]) -> None:
        """Apply one directive with its arguments to this block."""
        handler = self._handlers().get(directive)
        if handler is None:
            raise WrongDirective(directive)
        handler(self, directive, list(args))

    def setup(self, text: str) -> None:
        """Apply every ';'-terminated directive found in the text."""
        for statement in text.split(";")[:-1]:
            tokens = statement.split()
            directive, args = (tokens[0], tokens[1:]) if tokens else ("", [])
            self.apply(directive, args)

    @classmethod
    def _handlers(cls) -> dict[str, Callable[[Config, str, list[str]], None]]:
        table: dict[str, Callable[[Config, str, list[str]], None]] = {
            "index": Config._index,
            "root": Config._root,
            "auto_index": Config._auto_index,
            "error_page": Config._error_page,
            "keepalive_requests": Config._keepalive_requests,
            "reset_timedout_connection": Config._reset_timedout_connection,
            "client_max_body_size": Config._client_max_body_size,
            "default_type": Config._default_type,
            "cgi": Config._cgi,
            "listen": Config._listen,
            "server_name": Config._server_names,
            "return": Config._return,
            "limit_except_method": Config._limit_except_method,
            "alias": Config._alias,
            "file_access": Config._file_access,
            "server_name_in_redirect": Config._redirect_flag,
            "port_in_redirect": Config._redirect_flag,
        }
        for name in _TIME_DIRECTIVES:
            table[name] = Config._time
        return table

    # ----------------------------------------------------------------- helpers

    def _single(self, directive: str, args: list[str], once_key: str | None = None) -> str:
        if len(args) != 1 or (once_key is not None and once_key in self._seen):
            raise DirectiveError(directive, "invalid arguments or duplicate directive")
        return args[0]

    @staticmethod
    def _switch(directive: str, value: str) -> bool:
        try:
            return parse_switch(value)
        except ValueConversionError as exc:
            raise DirectiveError(directive, "expected on or off") from exc

    # ---------------------------------------------------------------- handlers

    def _root(self, directive: str, args: list[str]) -> None:
        value = self._single(directive, args, "root")
        self.root = check_path(value)
        self._seen.add("root")

    def _alias(self, directive: str, args: list[str]) -> None:
        value = self._single(directive, args, "root")
        check_path(value)
        if not isinstance(self, LocationConfig):
            raise DirectiveError(directive, "alias directive must use location block")
        self.alias = value
        self._seen.add("root")

    def _file_access(self, directive: str, args: list[str]) -> None:
        self.file_access = self._switch(directive, self._single(directive, args))

    def _listen(self, directive: str, args: list[str]) -> None:
        value = self._single(directive, args)
        if not isinstance(self, ServerConfig):
            raise DirectiveError(directive, "listen directive must use server block")
        if ":" in value:
            address, _, port_text = value.partition(":")
            ip = parse_ip(address)
            port = parse_port(port_text)
        else:
            port = parse_port(value)
            ip = DEFAULT_LISTEN_IP
        if (ip, port) in self.ip_port:
            raise DirectiveError(directive, f"duplicate address {ip}:{port}")
        self.ip_port.append((ip, port))

    def _server_names(self, directive: str, args: list[str]) -> None:
        if not isinstance(self, ServerConfig):
            raise DirectiveError(directive, "server_names directive must use server block")
        self.server_names.extend(args)

    def _return(self, directive: str, args: list[str]) -> None:
        if len(args) != 2:
            raise DirectiveError(directive, "expected a status code and a location")
        if not isinstance(self, (ServerConfig, LocationConfig)):
            raise DirectiveError(directive, "return directive must use server block or location block")
        self.d_return = (parse_return_code(args[0]), args[1])

    def _index(self, directive: str, args: list[str]) -> None:
        if not self.handdown_index:
            self.index = []
            self.handdown_index = True
        for name in args:
            self.index.append(check_path(name))
        self._seen.add("index")

    def _auto_index(self, directive: str, args: list[str]) -> None:
        value = self._single(directive, args, "auto_index")
        self.auto_index = self._switch(directive, value)
        self._seen.add("auto_index")

    def _redirect_flag(self, directive: str, args: list[str]) -> None:
        value = self._single(directive, args, directive)
        setattr(self, directive, self._switch(directive, value))
        self._seen.add(directive)

    def _error_page(self, directive: str, args: list[str]) -> None:
        if len(args) < 2:
            raise DirectiveError(directive, "arg size fail")
        if not self.handdown_error_page:
            self.error_page = {}
            self.handdown_error_page = True
        path = check_path(args[-1])
        answer = _equal_status(args[-2])
        if answer is not None:
            for code in args[:-2]:
                self.error_page[parse_status_code(code)] = (answer, path)
        else:
            for code in args[:-1]:
                status = parse_status_code(code)
                self.error_page[status] = (status, path)

    def _cgi(self, directive: str, args: list[str]) -> None:
        if len(args) != 2:
            raise DirectiveError(directive, "size")
        extension, executable = args
        if not extension.startswith("."):
            raise DirectiveError(directive, "dot")
        self.cgi[extension] = executable

    def _keepalive_requests(self, directive: str, args: list[str]) -> None:
        self.keepalive_requests = parse_size_t(self._single(directive, args, directive))
        self._seen.add(directive)

    def _default_type(self, directive: str, args: list[str]) -> None:
        self.default_type = self._single(directive, args, directive)
        self._seen.add(directive)

    def _client_max_body_size(self, directive: str, args: list[str]) -> None:
        self.client_max_body_size = parse_bytes(self._single(directive, args, directive))
        self._seen.add(directive)

    def _reset_timedout_connection(self, directive: str, args: list[str]) -> None:
        value = self._single(directive, args, directive)
        self.reset_timedout_connection = value.lower() != "off"
        self._seen.add(directive)

    def _time(self, directive: str, args: list[str]) -> None:
        setattr(self, directive, parse_time(self._single(directive, args, directive)))
        self._seen.add(directive)

    def _limit_except_method(self, directive: str, args: list[str]) -> None:
        if not isinstance(self, LocationConfig):
            raise DirectiveError(directive, "limit_except_method directive must use location block")
        self.check_set_limit_except_method = True
        for name in args:
            method = name.upper()
            if method in self.limit_except_method or method not in ALLOWED_METHODS:
                raise DirectiveError(directive, f"invalid or duplicate method {method!r}")
            self.limit_except_method.append(method)


class ServerConfig(Config):
    """A server block: listening addresses and names, plus shared settings."""

    def __init__(self) -> None:
        super().__init__()
        self.ip_port: list[tuple[str, int]] = []
        self.server_names: list[str] = []


class LocationConfig(Config):
    """A location block matching request targets that start with its URI."""

    def __init__(self, uri: str = "", assign: bool = False) -> None:
        super().__init__()
        self.uri = uri
        self.assign = assign
        self.alias = ""
        self.limit_except_method: list[str] = []
        self.check_set_limit_except_method = False


def _equal_status(arg: str) -> int | None:
    """Return the status forced by an '=code' argument of error_page, if any."""
    if arg == "=":
        return 200
    if not arg.startswith("="):
        return None
    match = _LEADING_INT.match(arg[1:])
    if match is None:
        return None
    value = int(match.group())
    if not _INT_MIN <= value <= _INT_MAX:
        return None
    return value


def extract_block(text: str, start: int) -> tuple[str, str]:
    """Cut the brace-delimited block beginning at start out of text.

    Returns the inside of the block and the text with the block removed.
    """
    opening = text.find("{", start)
    if opening < 0:
        raise ConfigFileError(f"no block opens after position {start}")
    depth = 1
    end = opening + 1
    while end < len(text):
        char = text[end]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                break
        end += 1
    inner = text[opening + 1:end]
    return inner, text[:start] + text[end + 1:]


def erase_comments(text: str) -> str:
    """Remove every '#' comment up to the end of its line."""
    return re.sub(r"#[^\n]*", "", text)


def read_config(path: str | Path | None = None) -> str:
    """Read a configuration file, dropping empty lines and comments."""
    target = Path(DEFAULT_CONFIG_PATH if path is None else path)
    try:
        with target.open(encoding="utf-8", newline="\n") as handle:
            lines = [line.rstrip("\n") for line in handle]
    except OSError as exc:
        raise ConfigFileError(f"cannot open config file {str(target)!r}") from exc
    text = "".join(line + "\n" for line in lines if line)
    return erase_comments(text)