"""Locate the App behind a ``plume run`` / ``plume routes`` argument."""

import importlib
import inspect
from collections.abc import Callable
from types import ModuleType
from typing import Any

from plume.app import App
from plume.errors import ConfigurationError

# Tried in order when the target names only a module.
DEFAULT_ATTRS = ("app", "create_app")


def load_app(target: str, *, db_url: str | None = None) -> App:
    """Import ``"module[:attribute]"`` and return the plume App it names.

    Without an attribute, ``module.app`` is tried first, then
    ``module.create_app``. Factories are called; *db_url*, when given,
    is passed as the factory's ``db_url`` keyword. An App that is
    already built cannot be pointed at another database.

    Every failure is reported as ``ConfigurationError`` with a message
    fit for the terminal.
    """
    module_path, _, attr = target.partition(":")
    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        msg = f"Cannot import {module_path!r}: {exc}"
        raise ConfigurationError(msg) from exc

    obj = _find_attr(module, attr)

    if isinstance(obj, App):
        if db_url is not None:
            msg = f"{target!r} is an App instance; --db needs an app factory such as create_app"
            raise ConfigurationError(msg)
        return obj

    if not callable(obj):
        msg = f"{target!r} resolved to {type(obj).__name__}, not a plume App or factory"
        raise ConfigurationError(msg)

    app = _call_factory(obj, target, db_url)
    if not isinstance(app, App):
        msg = f"Factory {target!r} returned {type(app).__name__}, not a plume App"
        raise ConfigurationError(msg)
    return app


def _find_attr(module: ModuleType, attr: str) -> Any:
    names = (attr,) if attr else DEFAULT_ATTRS
    for name in names:
        if hasattr(module, name):
            return getattr(module, name)
    wanted = " or ".join(repr(name) for name in names)
    msg = f"Module {module.__name__!r} has no attribute {wanted}"
    raise ConfigurationError(msg)


def _accepts_db_url(factory: Callable[..., Any]) -> bool:
    try:
        params = inspect.signature(factory).parameters.values()
    except (TypeError, ValueError):
        return False
    return any(
        p.name == "db_url" or p.kind is inspect.Parameter.VAR_KEYWORD for p in params
    )


def _call_factory(factory: Callable[..., Any], target: str, db_url: str | None) -> Any:
    kwargs: dict[str, Any] = {}
    if db_url is not None:
        if not _accepts_db_url(factory):
            msg = f"Factory {target!r} does not take a db_url argument"
            raise ConfigurationError(msg)
        kwargs["db_url"] = db_url
    try:
        return factory(**kwargs)
    except Exception as exc:
        msg = f"Factory {target!r} raised an error: {exc}"
        raise ConfigurationError(msg) from exc
