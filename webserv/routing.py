"""Choosing the server and location block for a request, and mapping it to a file."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from webserv.config import Config, LocationConfig, ServerConfig
from webserv.errors import (
    ConfigFileError,
    Found,
    MovedPermanently,
    PermanentRedirect,
    Redirection,
    SeeOther,
    TemporaryRedirect,
)

_REDIRECTS: dict[int, type[Redirection]] = {
    301: MovedPermanently,
    302: Found,
    303: SeeOther,
    307: TemporaryRedirect,
    308: PermanentRedirect,
}

_SCHEME = "http://"


def _is_not_host_char(char: str) -> bool:
    code = ord(char)
    return code <= 0x20 or code >= 0x7F or char in "\\/"


def validate_host(host: str) -> str:
    """Strip an optional leading scheme from a Host value; return "" if it is invalid."""
    position = host.find(_SCHEME)
    if position == 0:
        value = host[len(_SCHEME):]
    elif position < 0:
        value = host
    else:
        return ""
    if any(_is_not_host_char(char) for char in value):
        return ""
    return value


def load_mime(text: str) -> dict[str, str]:
    """Parse 'type | ext ext ...;' entries into a map from extension to type."""
    mime: dict[str, str] = {}
    for entry in text.split(";"):
        if not entry.strip():
            continue
        left, bar, right = entry.partition("|")
        words = left.split()
        if not bar or not words:
            raise ConfigFileError(f"malformed MIME entry: {entry.strip()!r}")
        mime_type = words[0]
        for extension in right.split():
            mime[extension] = mime_type
    return mime


class Router:
    """Server blocks grouped by the address they listen on."""

    def __init__(self, addrs: Mapping[tuple[str, int], Sequence[ServerConfig]]) -> None:
        self.addrs: dict[tuple[str, int], list[ServerConfig]] = {
            address: list(servers) for address, servers in addrs.items()
        }

    def _servers(self, ip: str, port: int) -> list[ServerConfig]:
        try:
            servers = self.addrs[(ip, port)]
        except KeyError:
            raise LookupError(f"no server listens on {ip}:{port}") from None
        if not servers:
            raise LookupError(f"no server listens on {ip}:{port}")
        return servers

    def _find(self, ip: str, port: int, host: str) -> tuple[ServerConfig, str] | None:
        wanted = validate_host(host)
        for server in self._servers(ip, port):
            for name in server.server_names:
                if name == wanted or f"{name}:{port}" == wanted:
                    return server, name
        return None

    def default_server(self, ip: str, port: int) -> ServerConfig:
        """Return the first server block listening on the address."""
        return self._servers(ip, port)[0]

    def matched_server(self, ip: str, port: int, host: str) -> ServerConfig:
        """Return the server whose name matches the Host value, or the default one."""
        found = self._find(ip, port, host)
        return found[0] if found else self.default_server(ip, port)

    def server_name(self, ip: str, port: int, host: str) -> str:
        """Return the matching server name, or the default server's first name."""
        found = self._find(ip, port, host)
        if found:
            return found[1]
        names = self.default_server(ip, port).server_names
        return names[0] if names else ""


def matched_location(uri: str, server: ServerConfig) -> Config:
    """Return the location whose URI prefixes uri best, or the server itself.

    An exact-match ('=') location that prefixes uri wins immediately.
    """
    best: Config = server
    longest = 0
    for location in server.link:
        if not isinstance(location, LocationConfig):
            continue
        if not uri.startswith(location.uri):
            continue
        if location.assign:
            return location
        if len(location.uri) > longest:
            longest = len(location.uri)
            best = location
    return best


def is_forbidden_method(conf: Config, method: str) -> bool:
    """Whether the method is not allowed by the block; only locations allow any."""
    if not isinstance(conf, LocationConfig):
        return True
    return method not in conf.limit_except_method


def get_alias(conf: Config) -> str:
    """Return the alias of a location block, or "" for any other block."""
    return conf.alias if isinstance(conf, LocationConfig) else ""


def replace_uri(target: str, location_uri: str, alias: str) -> str:
    """Replace the location prefix of target with alias."""
    return alias + target[len(location_uri):]


def trim_location_uri(target: str, location_uri: str) -> str:
    """Drop the location prefix from target."""
    if len(location_uri) > len(target):
        raise ValueError(f"location {location_uri!r} is longer than target {target!r}")
    return target[len(location_uri):]


def route_request_target(conf: Config, target: str) -> tuple[str, str]:
    """Return the directory prefix and the remaining path for a request target."""
    alias = get_alias(conf)
    if not alias:
        return conf.root, target
    assert isinstance(conf, LocationConfig)
    return alias, trim_location_uri(target, conf.uri)


def file_name(conf: Config, target: str) -> str:
    """Return the file system path a request target refers to."""
    prefix, uri = route_request_target(conf, target)
    return prefix + uri


def cgi_executable(conf: Config, ext: str) -> str:
    """Return the interpreter configured for an extension such as '.py', or ""."""
    return conf.cgi.get(ext, "")


def external_redirect(conf: Config, host: str, port: int, server_name: str) -> None:
    """Raise the redirection configured by a return directive, if there is one."""
    status, location = conf.d_return
    if location.startswith("/"):
        authority = host
        if conf.server_name_in_redirect:
            authority = server_name
            if conf.port_in_redirect:
                authority += f":{port}"
        location = _SCHEME + authority + location
    redirect = _REDIRECTS.get(status)
    if redirect is not None:
        raise redirect(location)