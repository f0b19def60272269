"""Request factories and a response type carrying its protocol version.

Requests are plain starlette ``Request`` objects. The declared protocol
version is the ASGI ``http_version``; CGI-style transport metadata (what a
front controller would find in its server globals) is kept under
``scope["server_params"]``.
"""

from __future__ import annotations

import copy
import os
from typing import Any, Mapping
from urllib.parse import urlsplit

from starlette.requests import Request
from starlette.responses import Response as StarletteResponse

DEFAULT_PROTOCOL_VERSION = "1.1"


def create_server_request(
    method: str,
    path: str,
    *,
    protocol_version: str = DEFAULT_PROTOCOL_VERSION,
    server_params: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
    query_string: str = "",
    session: dict | None = None,
) -> Request:
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": protocol_version,
        "method": method.upper(),
        "scheme": "http",
        "path": path or "/",
        "raw_path": (path or "/").encode("latin-1"),
        "root_path": "",
        "query_string": query_string.encode("latin-1"),
        "headers": [
            (key.lower().encode("latin-1"), str(value).encode("latin-1"))
            for key, value in (headers or {}).items()
        ],
        "server": ("localhost", 80),
        "client": None,
        "server_params": dict(server_params or {}),
    }
    if session is not None:
        scope["session"] = session
    return Request(scope)


def create_server_request_from_environ(environ: Mapping[str, str] | None = None) -> Request:
    """Build a request from CGI variables (defaults to ``os.environ``)."""
    if environ is None:
        environ = os.environ

    uri = urlsplit(environ.get("REQUEST_URI", "/"))
    query_string = environ.get("QUERY_STRING", uri.query)
    protocol = environ.get("SERVER_PROTOCOL", "HTTP/" + DEFAULT_PROTOCOL_VERSION)
    headers = {
        key[5:].replace("_", "-"): value
        for key, value in environ.items()
        if key.startswith("HTTP_")
    }

    return create_server_request(
        environ.get("REQUEST_METHOD", "GET"),
        uri.path or "/",
        protocol_version=protocol[5:] if protocol.startswith("HTTP/") else DEFAULT_PROTOCOL_VERSION,
        server_params=environ,
        headers=headers,
        query_string=query_string,
    )


def get_protocol_version(message) -> str:
    if isinstance(message, Request):
        return message.scope.get("http_version", DEFAULT_PROTOCOL_VERSION)
    return getattr(message, "protocol_version", DEFAULT_PROTOCOL_VERSION)


def get_server_params(request: Request) -> dict:
    return request.scope.get("server_params") or {}


def with_protocol_version(response: StarletteResponse, version: str) -> StarletteResponse:
    """Copy of ``response`` with ``version``; the original is left unchanged."""
    if get_protocol_version(response) == version:
        return response

    clone = copy.copy(response)
    clone.raw_headers = list(response.raw_headers)
    clone.protocol_version = version
    return clone


class Response(StarletteResponse):
    """starlette response with an HTTP protocol version."""

    def __init__(self, *args, protocol_version: str = DEFAULT_PROTOCOL_VERSION, **kwargs):
        super().__init__(*args, **kwargs)
        self.protocol_version = protocol_version

    def get_protocol_version(self) -> str:
        return self.protocol_version

    def with_protocol_version(self, version: str) -> "Response":
        return with_protocol_version(self, version)
