"""nginx-style HTTP/1.1 server building blocks: configuration, routing, bodies, headers, files and CGI."""

__version__ = "0.1.0"

__all__ = ["cgi", "config", "errors", "exchange", "files", "headers", "routing", "values"]