"""HTTP collaborators: starlette-backed messages and router."""

from appkernel.http.messages import (
    Response,
    create_server_request,
    create_server_request_from_environ,
    with_protocol_version,
)
from appkernel.http.router import Router

__all__ = [
    "Response",
    "Router",
    "create_server_request",
    "create_server_request_from_environ",
    "with_protocol_version",
]
