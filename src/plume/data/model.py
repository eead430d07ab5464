"""Per-entity data access objects.

A ``Model`` subclass names one table and gets three fixed queries::

    class ArticleModel(Model):
        table = "articles"

    model = ArticleModel(db)
    model.all()      # every row, newest first
    model.find(42)   # one row, or None
    model.count()    # number of rows

Table, key and ordering are class constants, checked once when the
subclass is defined. Only lookup values come from callers, and those are
always bound as parameters.
"""

import re
from typing import Any, ClassVar

from plume.data.database import Database, Row
from plume.errors import ConfigurationError

# Identifiers and "column [ASC|DESC], ..." orderings only.
_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_ORDER_TERM = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\s+(ASC|DESC))?$", re.IGNORECASE)


class Model:
    """Thin data-access object over one table of a shared ``Database``."""

    table: ClassVar[str] = ""
    primary_key: ClassVar[str] = "id"
    order_by: ClassVar[str] = "id DESC"

    __slots__ = ("db",)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if not cls.table:
            return
        for label, value in (("table", cls.table), ("primary_key", cls.primary_key)):
            if not _IDENTIFIER.match(value):
                msg = f"{cls.__name__}.{label} is not a valid SQL identifier: {value!r}"
                raise ConfigurationError(msg)
        for term in cls.order_by.split(","):
            if not _ORDER_TERM.match(term.strip()):
                msg = f"{cls.__name__}.order_by has an invalid term: {term.strip()!r}"
                raise ConfigurationError(msg)

    def __init__(self, db: Database) -> None:
        if not self.table:
            msg = f"{type(self).__name__} must define a 'table' class attribute"
            raise ConfigurationError(msg)
        self.db = db

    def all(self) -> list[Row]:
        """Every row of the table, in ``order_by`` order."""
        return self.db.fetch(f"SELECT * FROM {self.table} ORDER BY {self.order_by}")

    def find(self, key: Any) -> Row | None:
        """The row whose primary key equals *key*, or ``None``."""
        return self.db.fetch_one(
            f"SELECT * FROM {self.table} WHERE {self.primary_key} = ?",
            key,
        )

    def count(self) -> int:
        """Number of rows in the table."""
        return self.db.fetch_val(f"SELECT COUNT(*) FROM {self.table}") or 0
