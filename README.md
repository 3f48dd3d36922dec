# webserv

Building blocks for a small nginx-style HTTP/1.1 server: configuration
directives, virtual-host and location routing, request-body framing,
response headers, static files with PUT and DELETE, and CGI. It has no
dependencies outside the standard library.

## Modules

| Module | What it holds |
| --- | --- |
| `webserv.errors` | HTTP statuses as exceptions, stream signals, configuration errors |
| `webserv.values` | Parsers for directive arguments (sizes, times, ports, addresses) |
| `webserv.config` | `Config`, `ServerConfig`, `LocationConfig` and the directive handlers |
| `webserv.routing` | `Router` for virtual hosts, location matching, target-to-file mapping, redirects |
| `webserv.headers` | `Header` and `ResponseHeader` with case-insensitive fields |
| `webserv.exchange` | Body extraction (Content-Length and chunked), keep-alive, response header assembly |
| `webserv.files` | Reading, PUT and DELETE of files, content types, CGI detection |
| `webserv.cgi` | The CGI/1.1 environment and running a script |

## Configuration blocks

A block is a `Config` (the http level), a `ServerConfig` or a
`LocationConfig`. `setup(text)` applies every `;`-terminated directive in
`text`, and `apply(directive, args)` applies a single one:

```python
from webserv.config import ServerConfig, LocationConfig

server = ServerConfig()
server.setup("listen 8080; server_name example.com; error_page 404 /404.html;")

upload = LocationConfig("/upload")
upload.setup("limit_except_method GET PUT DELETE; file_access on; alias ./uploads;")
server.link.append(upload)

server.ip_port        # [("127.0.0.1", 8080)]
upload.file_access    # True
```

Supported directives: `index`, `root`, `auto_index`, `error_page`,
`keepalive_requests`, `keepalive_time`, `keepalive_timeout`,
`lingering_time`, `lingering_timeout`, `send_timeout`,
`client_body_timeout`, `timer`, `reset_timedout_connection`,
`client_max_body_size`, `default_type`, `cgi`, `file_access`,
`server_name_in_redirect` and `port_in_redirect` in any block. `listen` and
`server_name` are allowed only in a server block, `return` only in a server
or location block, and `alias` and `limit_except_method` only in a location
block. An unknown directive raises `webserv.errors.WrongDirective`. Bad
arguments, a repeated single-use directive, or a directive in the wrong block
raise `webserv.errors.DirectiveError`. A value that cannot be converted
raises `webserv.errors.ValueConversionError`. All of these are
`webserv.errors.ConfigError`.

`listen` without an address listens on `127.0.0.1`. Time values are stored
in milliseconds.

Helpers for configuration text:

- `read_config(path=None)` reads a file, drops empty lines and `#` comments,
  and returns the text. The default path is `conf/default.conf`. A file that
  cannot be opened raises `ConfigFileError`.
- `erase_comments(text)` removes each `#` comment up to the end of its line.
- `extract_block(text, start)` cuts the `{ ... }` block that opens at or after
  `start` out of `text`. It returns `(inner, remaining_text)`.

## Value syntax

```python
from webserv.values import parse_time, parse_bytes, parse_port, parse_ip, parse_switch

parse_time("2s")      # 2000, milliseconds; units h, m, s, ms
parse_time("150")     # 150, a bare number is milliseconds
parse_bytes("1k")     # 1024; k, m, g in either case
parse_port("8080")    # 8080
parse_ip("10.1")      # "0.0.10.1"
parse_ip("16909060")  # "1.2.3.4"
parse_switch("On")    # True
```

`parse_status_code` accepts 300–599 and `parse_return_code` accepts 301, 302,
303, 307 and 308.

## Routing

```python
from webserv.routing import Router, matched_location, file_name, external_redirect

router = Router({("127.0.0.1", 8080): [server]})
chosen = router.matched_server("127.0.0.1", 8080, "example.com")
name = router.server_name("127.0.0.1", 8080, "example.com")   # "example.com"
location = matched_location("/upload/a.txt", chosen)
file_name(location, "/upload/a.txt")                           # "./uploads/a.txt"
```

The first server listed for an address is its default server. It answers any
`Host` that no `server_name` matches, with or without `:port`. An address
with no servers raises `LookupError`. `validate_host` strips a leading
`http://` and returns `""` for a malformed host. `matched_location` picks the
longest location prefix. An exact-match location (`LocationConfig(uri,
assign=True)`) wins as soon as it matches. A block without an alias maps a
target to `root + target`. A block with an alias replaces the location prefix
with the alias.

`is_forbidden_method(conf, method)` is true unless `conf` is a location that
lists the method in `limit_except_method`. `external_redirect` raises the
`MovedPermanently`, `Found`, `SeeOther`, `TemporaryRedirect` or
`PermanentRedirect` that a `return` directive configures. It turns a
location that starts with `/` into an absolute `http://` URL.
`cgi_executable(conf, ".py")` returns the interpreter configured for an
extension. `load_mime(text)` reads entries of the form
`text/html | html htm;` into an extension-to-type map.

## Requests and responses

- `extract_body(method, headers, buffer, max_body_size)` returns
  `(body, leftover)` from received bytes. It handles `Content-Length` and
  `Transfer-Encoding: chunked`. It raises `ReadMore` when the body is not
  complete, and raises `BadRequest`, `PayloadTooLarge`, `LengthRequired` or
  `NotImplementedStatus` when the body framing is wrong.
- `check_method(conf, method)` raises `MethodNotAllowed` for a method other
  than GET, POST, PUT and DELETE. It raises `Forbidden` when the block does
  not allow the method.
- `wants_keep_alive(headers, keepalive_requests)` and
  `error_closes_connection(error)` decide whether a connection stays open.
- `build_response_header(header, keep_alive, request_count,
  keepalive_requests)` sets `Connection`, writes the status line and the
  fields (sorted and capitalized) into `header.content`, and returns whether
  to keep the connection alive.
- `error_page_target(conf, status, redirect_count, max_redirects)` returns the
  configured `(status, uri)` error page, or `None`. It raises
  `InternalServerError` once the redirect limit is reached.

`Header` keeps its fields case-insensitively. `header["Host"]` gives `""`
for a missing field, `"Host" in header` tests presence, and `append` joins
distinct values with `", "`. `ResponseHeader` adds `status_code`,
`reason_phrase` and `status_line()`.

## Files

`webserv.files` offers `read_file`, `write_put_file` (201 Created, or 204 No
Content when the file existed), `delete_file`, `control_file(method,
filename, body)`, `file_extension`, `content_type(filename, mime,
default_type)`, `is_cgi` and `is_dynamic_resource`. A missing file raises
`NotFound`. A permission error raises `Forbidden`. A failed write or delete
raises `Conflict`.

## CGI

`make_cgi_env(CGIRequest(...))` builds the CGI/1.1 environment. Request
headers other than Content-Type and Content-Length become `HTTP_*` variables.
`run_cgi(executable, script_path, request)` runs the script in its own
directory. It feeds the script the request body, discards stderr, and
returns stdout. A script that cannot be started raises
`InternalServerError`. `check_status_field("404 Not Found")` gives
`(404, "Not Found")`, and gives status 502 when the code is malformed.

## HTTP errors as exceptions

Every non-2xx outcome is an exception from `webserv.errors`, for example
`NotFound`, `MethodNotAllowed`, `PayloadTooLarge` and `InternalServerError`.
Each carries a `status` and a `message`, which is the reason phrase.
Redirections also carry a `location`. `ReadMore`, `SendMore`, `GotoCore`,
`InternalRedirect` and `AutoIndex` are control-flow signals, not errors.

## What this package does not do

- It does not open sockets, run an event loop or serve connections. There is
  no server and no command to start one.
- It does not parse request lines or header text. You fill a `Header`
  yourself.
- It does not turn a whole configuration file into a tree of http, server and
  location blocks, and it does not pass settings down from outer blocks. You
  build the blocks with `extract_block`, `setup` and `link`.
- It does not render directory listings or HTML error pages, and it does not
  ship a configuration or `mime.types` file.
- It does not run CGI scripts in the background or stream their output.
  `run_cgi` waits for the script to finish.