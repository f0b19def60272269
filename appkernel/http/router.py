"""Router collaborator.

Matching and URL generation are starlette's; this adapter only adds the
``find_route`` / ``dispatch`` surface the application drives, with handlers
called as ``handler(request, next_handler)``.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Optional

from loguru import logger
from starlette.requests import Request
from starlette.routing import Match, Route
from starlette.routing import Router as StarletteRouter

from appkernel.core.exceptions import RouterException

Handler = Callable[..., Any]

_UNSET = object()
_SCOPE_KEY = "appkernel.route"


class Router:
    """Route table plus a single-step dispatcher."""

    def __init__(self) -> None:
        self._router = StarletteRouter()
        self._default_404: Any = _UNSET
        self.current_route: Optional[Route] = None

    @property
    def routes(self) -> list[Route]:
        return list(self._router.routes)

    @property
    def default_404(self) -> Any:
        return None if self._default_404 is _UNSET else self._default_404

    def set_default_404(self, handler: Any) -> None:
        self._default_404 = handler

    def add_route(
        self,
        methods: Iterable[str],
        path: str,
        handler: Handler,
        name: Optional[str] = None,
    ) -> Route:
        route = Route(path, handler, methods=[m.upper() for m in methods], name=name)
        self._router.routes.append(route)
        return route

    def setup_routes(self, config: Mapping[str, Any]) -> None:
        """Register a declarative route table.

        ``{"router": {"default_404": ...}, "routes": [{"methods", "url",
        "callback", "name"}, ...]}``
        """
        router_options = config.get("router") or {}
        if "default_404" in router_options:
            self.set_default_404(router_options["default_404"])

        for definition in config.get("routes") or []:
            self.add_route(
                definition.get("methods", ["GET"]),
                definition["url"],
                definition["callback"],
                definition.get("name"),
            )

    def url_path_for(self, name: str, /, **path_params: Any) -> str:
        return str(self._router.url_path_for(name, **path_params))

    def find_route(self, request: Request) -> bool:
        """Match ``request`` and record the result on the router and request."""
        self.current_route = None

        for route in self._router.routes:
            match, child_scope = route.matches(request.scope)
            if match == Match.FULL:
                request.scope.update(child_scope)
                request.scope[_SCOPE_KEY] = route
                self.current_route = route
                return True

        request.scope[_SCOPE_KEY] = None
        logger.debug(f"No route for {request.method} {request.url.path}")
        return False

    def _fallback(self, request: Request):
        if self._default_404 is _UNSET or self._default_404 is None:
            raise RouterException(RouterException.NO_ROUTE_FOUND)
        if not callable(self._default_404):
            raise RouterException(RouterException.INVALID_DEFAULT_404)
        return self._default_404(request)

    def dispatch(self, request: Request):
        if _SCOPE_KEY not in request.scope:
            self.find_route(request)

        route = request.scope.get(_SCOPE_KEY)
        if route is None:
            return self._fallback(request)

        response = route.endpoint(request, self._fallback)
        if response is None:
            raise RouterException(f"Route {route.name} returned no response")
        return response
