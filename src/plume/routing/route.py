"""Action, Route and RouteMatch frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Action:
    """What a matched route invokes: a controller factory and a handler.

    Both halves are concrete objects bound at registration time::

        Action(ArticleController, ArticleController.index)

    At dispatch the factory is called with the request's
    ``ControllerContext`` and the handler is called with the resulting
    instance and nothing else.
    """

    controller: Callable[..., Any]
    handler: Callable[[Any], Any]

    @property
    def name(self) -> str:
        """Dotted ``Controller.handler`` label for logs and route listings."""
        controller = getattr(self.controller, "__name__", repr(self.controller))
        handler = getattr(self.handler, "__name__", repr(self.handler))
        return f"{controller}.{handler}"


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created during app setup, stored in the router's table until the
    process exits.
    """

    method: str
    path: str
    action: Action


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route lookup."""

    route: Route
