"""Numbered ``.sql`` migrations, applied once each.

A migrations directory holds files named ``<version>_<label>.sql``::

    migrations/
        001_create_articles.sql
        002_seed_articles.sql

``migrate(db, directory)`` runs every file whose version is not yet in
the ``_plume_migrations`` table, lowest version first, and records it.
The first failing file stops the run.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from plume.data.database import Database
from plume.data.errors import MigrationError

logger = logging.getLogger("plume.data")

_TRACKING_TABLE = "_plume_migrations"
_FILENAME = re.compile(r"^(\d+)_\w+$")


@dataclass(frozen=True, slots=True)
class Migration:
    version: int
    name: str
    sql: str


@dataclass(frozen=True, slots=True)
class MigrationResult:
    """Names applied by this run, and how many were already in place."""

    applied: tuple[str, ...]
    skipped: int

    @property
    def summary(self) -> str:
        if not self.applied:
            return f"Already up to date ({self.skipped} migration(s) applied)"
        return f"Applied {len(self.applied)} migration(s): {', '.join(self.applied)}"


def discover_migrations(directory: str | Path) -> list[Migration]:
    """Read every migration file in *directory*, ordered by version."""
    path = Path(directory)
    if not path.is_dir():
        msg = f"Migration directory does not exist: {path}"
        raise MigrationError(msg)

    by_version: dict[int, Migration] = {}
    for sql_file in path.glob("*.sql"):
        match = _FILENAME.match(sql_file.stem)
        if match is None:
            msg = f"Invalid migration filename: {sql_file.name} (expected NNN_label.sql)"
            raise MigrationError(msg)
        version = int(match.group(1))
        if version in by_version:
            msg = f"Duplicate migration version {version}: {sql_file.name}"
            raise MigrationError(msg)
        sql = sql_file.read_text(encoding="utf-8").strip()
        if not sql:
            msg = f"Empty migration file: {sql_file.name}"
            raise MigrationError(msg)
        by_version[version] = Migration(version, sql_file.stem, sql)

    return [by_version[v] for v in sorted(by_version)]


def migrate(db: Database, directory: str | Path) -> MigrationResult:
    """Apply pending migrations from *directory* to a connected *db*.

    Raises ``MigrationError`` for a bad directory or file, and when a
    migration's SQL fails (chained to the underlying ``QueryError``).
    """
    migrations = discover_migrations(directory)
    db.execute(
        f"CREATE TABLE IF NOT EXISTS {_TRACKING_TABLE} "
        "(version INTEGER PRIMARY KEY, name TEXT NOT NULL, "
        "applied_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP)"
    )
    done = {row["version"] for row in db.fetch(f"SELECT version FROM {_TRACKING_TABLE}")}

    applied: list[str] = []
    for migration in migrations:
        if migration.version in done:
            continue
        try:
            db.execute_script(migration.sql)
            db.execute(
                f"INSERT INTO {_TRACKING_TABLE} (version, name) VALUES (?, ?)",
                migration.version,
                migration.name,
            )
        except Exception as exc:
            msg = f"Migration {migration.name} failed: {exc}"
            raise MigrationError(msg) from exc
        applied.append(migration.name)

    result = MigrationResult(applied=tuple(applied), skipped=len(done))
    logger.info(result.summary)
    return result
