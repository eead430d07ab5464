"""Base controller and the per-request context it is built from.

Controllers are plain classes constructed once per matched request::

    class ArticleController(Controller):
        def index(self) -> Response:
            articles = ArticleModel(self.db).all()
            return self.render(
                "article/index",
                ArticleIndexView(title="Liste des articles", articles=articles),
            )

The router builds the controller from a ``ControllerContext`` and calls
the registered handler with no arguments besides the instance.
"""

from dataclasses import dataclass
from typing import Any

from plume.data.database import Database
from plume.errors import ConfigurationError
from plume.http.request import Request
from plume.http.response import Response
from plume.templating.integration import ViewRenderer


@dataclass(frozen=True, slots=True)
class ControllerContext:
    """Everything a controller may touch while handling one request."""

    request: Request
    views: ViewRenderer
    db: Database | None = None


class Controller:
    """Base class for controllers.

    Provides ``render()`` (view wrapped in the layout) and explicit
    access to the request and the database the app was given.
    """

    __slots__ = ("context",)

    def __init__(self, context: ControllerContext) -> None:
        self.context = context

    @property
    def request(self) -> Request:
        return self.context.request

    @property
    def db(self) -> Database:
        """The app's database. Raises if the app was built without one."""
        if self.context.db is None:
            msg = f"{type(self).__name__} needs a database, but the app has none configured."
            raise ConfigurationError(msg)
        return self.context.db

    def render_text(self, view: str, data: Any = None) -> str:
        """Render *view* inside the layout and return the document."""
        return self.context.views.render(view, data)

    def render(self, view: str, data: Any = None, *, status: int = 200) -> Response:
        """Render *view* inside the layout as an HTML response.

        *data* is a per-view dataclass instance or a mapping; its fields
        become template variables in both the view and the layout.
        """
        return Response(body=self.render_text(view, data), status=status)
