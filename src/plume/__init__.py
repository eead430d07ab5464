"""Plume — a small Model-View-Controller web framework.

One request takes one path: router, controller, model, view, layout.

Basic usage::

    from plume import Action, App, AppConfig, Controller

    class HomeController(Controller):
        def index(self):
            return self.render("home/index", {"title": "Accueil"})

    app = App(AppConfig(template_dir="templates"))
    app.get("/", HomeController, HomeController.index)

Data access::

    from plume.data import Database, Model

    class ArticleModel(Model):
        table = "articles"

    articles = ArticleModel(Database("sqlite:///app.db")).all()
"""

__version__ = "0.1.0"
__all__ = [
    "Action",
    "App",
    "AppConfig",
    "ConfigurationError",
    "Controller",
    "ControllerContext",
    "HTTPError",
    "NotFound",
    "PlumeError",
    "Request",
    "Response",
    "Router",
    "ViewNotFoundError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import plume`` fast while providing a clean top-level API.
    """
    if name == "App":
        from plume.app import App

        return App

    if name == "AppConfig":
        from plume.config import AppConfig

        return AppConfig

    if name in ("Controller", "ControllerContext"):
        from plume import controller as _controller

        return getattr(_controller, name)

    if name == "Request":
        from plume.http.request import Request

        return Request

    if name == "Response":
        from plume.http.response import Response

        return Response

    if name in ("Action", "Router"):
        from plume import routing as _routing

        return getattr(_routing, name)

    if name in ("ConfigurationError", "HTTPError", "NotFound", "PlumeError", "ViewNotFoundError"):
        from plume import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
