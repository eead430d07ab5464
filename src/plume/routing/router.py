"""Exact-match router keyed by HTTP method, then path.

Routes are registered during setup and frozen by ``compile()`` before
the app serves its first request.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from plume.errors import ConfigurationError, NotFound
from plume.http.request import split_path
from plume.http.response import Response, not_found_response
from plume.routing.route import Action, Route, RouteMatch

if TYPE_CHECKING:
    from plume.controller import ControllerContext

logger = logging.getLogger("plume.routing")


class Router:
    """Static route table with exact path matching.

    Usage::

        router = Router()
        router.register("GET", "/", Action(HomeController, HomeController.index))
        router.register("GET", "/articles", Action(ArticleController, ArticleController.index))
        router.compile()
        response = router.dispatch("/articles?page=2", "GET", context)

    No path parameters, no wildcards: a request path either equals a
    registered path for its method or the request gets the fixed 404.
    """

    __slots__ = ("_compiled", "_table")

    def __init__(self) -> None:
        # method -> path -> Route, insertion ordered
        self._table: dict[str, dict[str, Route]] = {}
        self._compiled = False

    # -- Registration --

    def register(self, method: str, path: str, action: Action) -> Route:
        """Add an exact-match route for *method* and *path*.

        Registering the same (method, path) twice replaces the earlier
        action; the replacement is logged as a warning.
        """
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        normalized = method.upper().strip()
        if not normalized:
            msg = "Route method cannot be empty."
            raise ConfigurationError(msg)
        if not path.startswith("/"):
            msg = f"Route path must start with '/': {path!r}"
            raise ConfigurationError(msg)
        if "?" in path:
            msg = f"Route path must not contain a query string: {path!r}"
            raise ConfigurationError(msg)

        by_path = self._table.setdefault(normalized, {})
        previous = by_path.get(path)
        if previous is not None:
            logger.warning(
                "Route %s %s re-registered: %s replaces %s",
                normalized,
                path,
                action.name,
                previous.action.name,
            )

        route = Route(method=normalized, path=path, action=action)
        by_path[path] = route
        return route

    def get(self, path: str, action: Action) -> Route:
        """Shorthand for ``register("GET", path, action)``."""
        return self.register("GET", path, action)

    def post(self, path: str, action: Action) -> Route:
        """Shorthand for ``register("POST", path, action)``."""
        return self.register("POST", path, action)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    @property
    def compiled(self) -> bool:
        return self._compiled

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes, in registration order per method."""
        return [route for by_path in self._table.values() for route in by_path.values()]

    # -- Lookup --

    def match(self, method: str, path: str) -> RouteMatch:
        """Look up the route for *method* and the bare *path*.

        Raises ``NotFound`` when nothing is registered for the pair. A
        path registered under another method is still a miss.
        """
        by_path = self._table.get(method.upper(), {})
        route = by_path.get(path)
        if route is None:
            raise NotFound(f"No route matches {method} {path!r}")
        return RouteMatch(route=route)

    def dispatch(self, target: str, method: str, context: ControllerContext) -> Response:
        """Route a request target and run the matched action.

        *target* may carry a query string; only its path takes part in
        matching. On a miss the fixed 404 response is returned and no
        controller is constructed.
        """
        return self.dispatch_path(split_path(target), method, context)

    def dispatch_path(self, path: str, method: str, context: ControllerContext) -> Response:
        """Route an already bare *path* and run the matched action.

        *path* is compared as given. A decoded ``?`` or ``#`` inside it
        is part of the path, not a separator.
        """
        try:
            match = self.match(method, path)
        except NotFound as exc:
            logger.debug("%d %s %s: %s", exc.status, method, path, exc.detail)
            return not_found_response()

        action = match.route.action
        controller = action.controller(context)
        result = action.handler(controller)
        return _to_response(result, action)


def _to_response(result: Any, action: Action) -> Response:
    if isinstance(result, Response):
        return result
    if isinstance(result, str):
        return Response(body=result)
    msg = (
        f"{action.name} returned {type(result).__name__}; "
        "actions must return a Response or a str."
    )
    raise TypeError(msg)
