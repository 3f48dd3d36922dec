"""CGI/1.1 environment building and script execution."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass, field

from webserv.errors import InternalServerError

SERVER_SOFTWARE = "webserv/1.0"
_DEFAULT_STATUS = 502


@dataclass
class CGIRequest:
    """What a CGI script needs to know about the request it serves."""

    method: str
    path_info: str
    query: str = ""
    http_version: str = "HTTP/1.1"
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    server_name: str = ""
    server_port: int = 80
    remote_addr: str = ""
    server_software: str = SERVER_SOFTWARE


def check_status_field(status: str) -> tuple[int, str]:
    """Parse a CGI Status field into a status code (502 if invalid) and reason."""
    code = _DEFAULT_STATUS
    reason = ""
    space = status.find(" ")
    candidate = (status if space < 0 else status[:space]).lstrip(" \t")
    if len(candidate) == 3:
        if all(char in "0123456789" for char in candidate):
            code = int(candidate)
        if space >= 0:
            rest = status[space:].lstrip(" \r\v\f\t")
            if rest:
                reason = rest
    return code, reason


def to_meta_var(name: str, scheme: str) -> str:
    """Turn a header name into a CGI meta-variable name such as HTTP_USER_AGENT."""
    raw = f"{scheme}_{name}"
    return "".join(
        char.upper() if "a" <= char <= "z" else "_" if char == "-" else char for char in raw
    )


def make_cgi_env(request: CGIRequest) -> dict[str, str]:
    """Build the environment passed to a CGI script."""
    headers = {key.lower(): value for key, value in request.headers.items()}
    env: dict[str, str] = {"REQUEST_METHOD": request.method}
    if request.body:
        env["CONTENT_TYPE"] = headers.get("content-type", "")
        env["CONTENT_LENGTH"] = str(len(request.body))
    env["GATEWAY_INTERFACE"] = "CGI/1.1"
    env["PATH_INFO"] = request.path_info
    env["QUERY_STRING"] = request.query
    env["SERVER_PROTOCOL"] = request.http_version
    env["SERVER_SOFTWARE"] = request.server_software
    env["SERVER_NAME"] = request.server_name
    env["SERVER_PORT"] = str(request.server_port)
    env["REMOTE_ADDR"] = env["REMOTE_HOST"] = request.remote_addr
    for name, value in sorted(headers.items()):
        if name in ("content-type", "content-length"):
            continue
        env[to_meta_var(name, "HTTP")] = value
    return env


def run_cgi(executable: str, script_path: str, request: CGIRequest) -> bytes:
    """Run a CGI script with the request body on stdin and return its output."""
    env = make_cgi_env(request)
    workdir = os.path.dirname(script_path) or "."
    try:
        completed = subprocess.run(
            [executable, script_path],
            input=request.body,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            cwd=workdir,
            env=env,
            check=False,
        )
    except OSError as exc:
        raise InternalServerError() from exc
    return completed.stdout