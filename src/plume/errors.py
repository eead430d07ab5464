"""Plume exception hierarchy.

Shared across Router, App, controllers, and the data layer so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class PlumeError(Exception):
    """Base for all plume-specific errors."""


class ConfigurationError(PlumeError):
    """Raised when app or route configuration is invalid.

    Typically raised while routes are being registered, before the
    app starts serving.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(PlumeError):
    """An error that maps directly to an HTTP status code."""

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — no route matched the request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class ViewNotFoundError(PlumeError):
    """Raised when a view or layout template cannot be located.

    Never handled by the router: a missing template is a programming
    error, so it propagates to the server's 500 handler.
    """

    def __init__(self, name: str) -> None:
        super().__init__(f"Template not found: {name!r}")
        self.name = name
