"""Synchronous database access for plume.

SQL in, row dicts out. Not an ORM.

Basic usage::

    from plume.data import Database, Model

    db = Database("sqlite:///app.db")
    db.connect()

    class ArticleModel(Model):
        table = "articles"

    articles = ArticleModel(db).all()
    article = ArticleModel(db).find(42)

SQLite support comes from the standard library; nothing extra to install.
"""

from plume.data.database import Database, Row
from plume.data.errors import DataError, MigrationError, QueryError
from plume.data.migrate import MigrationResult, migrate
from plume.data.model import Model

__all__ = [
    "DataError",
    "Database",
    "MigrationError",
    "MigrationResult",
    "Model",
    "QueryError",
    "Row",
    "migrate",
]
