"""Article site built on plume.

``GET /`` shows the home page, ``GET /articles`` lists every article,
newest first. Everything else is a 404.
"""

from blog.app import create_app

__all__ = ["create_app"]
