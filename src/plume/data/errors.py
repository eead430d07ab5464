"""Data layer error hierarchy."""

from plume.errors import PlumeError


class DataError(PlumeError):
    """Base for all plume.data errors."""


class QueryError(DataError):
    """Raised when a SQL statement fails."""


class MigrationError(DataError):
    """Raised when a migration file is invalid or fails to apply."""
