"""Routing — static method/path table with exact matching.

Routes are registered during setup and frozen into an immutable
lookup table when the app starts.
"""

from plume.routing.route import Action, Route, RouteMatch
from plume.routing.router import Router

__all__ = ["Action", "Route", "RouteMatch", "Router"]
