"""Kida environment setup and the view-in-layout render pipeline.

Creates a kida Environment from plume's AppConfig. The environment is
created once when the app freezes and shared by every request; the
``ViewRenderer`` built around it is what controllers call.
"""

import dataclasses
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from kida import Environment, FileSystemLoader
from kida.environment.exceptions import TemplateNotFoundError
from kida.template import Markup

from plume.config import AppConfig
from plume.errors import ViewNotFoundError

logger = logging.getLogger("plume.templating")

# Name the layout sees the rendered view under.
CONTENT_BINDING = "content"


def create_environment(
    config: AppConfig,
    filters: dict[str, Callable[..., Any]] | None = None,
    globals_: dict[str, Any] | None = None,
) -> Environment:
    """Create a kida Environment from app configuration.

    Called once when the app freezes. The returned environment is
    shared, read-only, for the lifetime of the app.
    """
    env = Environment(
        loader=FileSystemLoader(str(config.template_dir)),
        autoescape=config.autoescape,
        auto_reload=config.debug,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )

    if filters:
        env.update_filters(filters)

    for name, value in (globals_ or {}).items():
        env.add_global(name, value)

    return env


def view_context(data: Any) -> dict[str, Any]:
    """Flatten view data into template bindings.

    Accepts a dataclass instance (one typed parameter object per view),
    any mapping, or ``None``. Dataclasses are flattened one level only,
    so nested dataclasses and row dicts reach the template unchanged.
    """
    if data is None:
        return {}
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return {f.name: getattr(data, f.name) for f in dataclasses.fields(data)}
    if isinstance(data, Mapping):
        return dict(data)
    msg = f"View data must be a dataclass instance or a mapping, not {type(data).__name__}"
    raise TypeError(msg)


def render_template(env: Environment, name: str, context: Mapping[str, Any]) -> str:
    """Render a template by file name to a string.

    Raises ``ViewNotFoundError`` when the template does not exist.
    """
    try:
        template = env.get_template(name)
    except TemplateNotFoundError as exc:
        raise ViewNotFoundError(name) from exc
    return template.render(dict(context))


@dataclass(frozen=True, slots=True)
class ViewRenderer:
    """Renders a named view, then wraps it in the shared layout.

    Usage::

        renderer = ViewRenderer(env, layout="layout.html")
        html = renderer.render("article/index", {"title": "T", "articles": []})
    """

    env: Environment
    layout: str = "layout.html"
    suffix: str = ".html"

    def template_name(self, view: str) -> str:
        """Map a view name (``"article/index"``) to its template file."""
        name = view.strip("/")
        if self.suffix and not name.endswith(self.suffix):
            name = f"{name}{self.suffix}"
        return name

    def render_view(self, view: str, data: Any = None) -> str:
        """Render only the view, without the layout."""
        return render_template(self.env, self.template_name(view), view_context(data))

    def render(self, view: str, data: Any = None) -> str:
        """Render *view* with *data*, then the layout around it.

        The layout receives the same bindings as the view plus
        ``content``, the view's output marked safe so it is inserted
        verbatim.
        """
        context = view_context(data)
        body = render_template(self.env, self.template_name(view), context)
        logger.debug("Rendered view %s (%d chars)", view, len(body))
        return render_template(
            self.env,
            self.layout,
            {**context, CONTENT_BINDING: Markup(body)},
        )
