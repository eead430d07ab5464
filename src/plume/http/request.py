"""Immutable HTTP request.

Frozen metadata only. Plume's request pipeline never reads a body, so
the request is simply what arrived on the request line and in the headers.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import parse_qsl

from plume._internal.asgi import HTTPScope, Scope


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` never carries the query string; it is kept separately in
    ``query_string`` so routing only ever sees the bare path.
    """

    method: str
    path: str
    query_string: str = ""
    headers: tuple[tuple[str, str], ...] = ()
    http_version: str = "1.1"
    client: tuple[str, int] | None = None

    # -- Construction --

    @classmethod
    def from_target(
        cls,
        method: str,
        target: str,
        headers: tuple[tuple[str, str], ...] = (),
    ) -> Request:
        """Build a request from a method and a raw request target.

        ``"/articles?page=2"`` becomes ``path="/articles"``,
        ``query_string="page=2"``.
        """
        return cls(
            method=method.upper(),
            path=split_path(target),
            query_string=target.partition("#")[0].partition("?")[2],
            headers=headers,
        )

    @classmethod
    def from_asgi(cls, scope: Scope) -> Request:
        """Build a request from a raw ASGI HTTP scope."""
        http = HTTPScope.from_scope(scope)
        headers = tuple(
            (name.decode("latin-1").lower(), value.decode("latin-1"))
            for name, value in http.headers
        )
        return cls(
            method=http.method.upper(),
            path=http.path or "/",
            query_string=http.query_string.decode("latin-1"),
            headers=headers,
            http_version=http.http_version,
            client=http.client,
        )

    # -- Computed properties --

    @property
    def query(self) -> dict[str, str]:
        """Query parameters, last value wins for repeated keys."""
        return dict(parse_qsl(self.query_string, keep_blank_values=True))

    def header(self, name: str, default: str | None = None) -> str | None:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers:
            if key == wanted:
                return value
        return default

    @property
    def url(self) -> str:
        """Path plus query string, as the client sent it."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path


def split_path(target: str) -> str:
    """Return the path part of a request target, without query or fragment.

    The target is cut at the first ``?`` or ``#`` and nothing else is
    interpreted: ``"//articles"`` stays ``"//articles"``. An empty path
    becomes ``"/"``.
    """
    path = target.partition("#")[0].partition("?")[0]
    return path or "/"
