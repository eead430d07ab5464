"""Tests for plume.data — Database, Model and migrations."""

import logging
from pathlib import Path

import pytest

from plume.data import Database, DataError, MigrationError, Model, QueryError, migrate
from plume.errors import ConfigurationError


class ArticleModel(Model):
    table = "articles"


class OldestFirst(Model):
    table = "articles"
    order_by = "id ASC"


class TestDatabase:
    def test_fetch_returns_dicts(self, seeded_db: Database) -> None:
        rows = seeded_db.fetch("SELECT id, title FROM articles ORDER BY id")
        assert rows == [
            {"id": 1, "title": "First"},
            {"id": 2, "title": "Second"},
            {"id": 3, "title": "Third"},
        ]

    def test_fetch_one(self, seeded_db: Database) -> None:
        row = seeded_db.fetch_one("SELECT title FROM articles WHERE id = ?", 2)
        assert row == {"title": "Second"}

    def test_fetch_one_none(self, db: Database) -> None:
        assert db.fetch_one("SELECT * FROM articles WHERE id = ?", 99) is None

    def test_fetch_val(self, seeded_db: Database) -> None:
        assert seeded_db.fetch_val("SELECT COUNT(*) FROM articles") == 3

    def test_fetch_val_none(self, db: Database) -> None:
        assert db.fetch_val("SELECT id FROM articles WHERE id = ?", 1) is None

    def test_execute_returns_rowcount(self, seeded_db: Database) -> None:
        assert seeded_db.execute("UPDATE articles SET content = ?", "x") == 3

    def test_execute_script(self, db: Database) -> None:
        db.execute_script(
            "CREATE TABLE tags (name TEXT);"
            "INSERT INTO tags VALUES ('a');"
            "INSERT INTO tags VALUES ('b');"
        )
        assert db.fetch_val("SELECT COUNT(*) FROM tags") == 2

    def test_bad_sql_raises_query_error(self, db: Database) -> None:
        with pytest.raises(QueryError) as exc_info:
            db.fetch("SELECT * FROM no_such_table")
        assert exc_info.value.__cause__ is not None

    def test_query_error_is_data_error(self) -> None:
        assert issubclass(QueryError, DataError)

    def test_not_connected(self, tmp_path: Path) -> None:
        database = Database(f"sqlite:///{tmp_path / 'x.db'}")
        with pytest.raises(DataError, match="not connected"):
            database.fetch("SELECT 1")

    def test_connect_disconnect(self, tmp_path: Path) -> None:
        database = Database(f"sqlite:///{tmp_path / 'lifecycle.db'}")
        assert database.connected is False
        database.connect()
        database.connect()  # idempotent
        assert database.connected is True
        database.disconnect()
        database.disconnect()  # idempotent
        assert database.connected is False

    def test_context_manager(self, tmp_path: Path) -> None:
        with Database(f"sqlite:///{tmp_path / 'ctx.db'}") as database:
            assert database.fetch_val("SELECT 1") == 1
        assert database.connected is False

    def test_memory_url(self) -> None:
        with Database("sqlite:///:memory:") as database:
            assert database.fetch_val("SELECT 2 + 2") == 4

    def test_unsupported_url(self) -> None:
        with pytest.raises(DataError, match="Unsupported database URL"):
            Database("postgresql://localhost/db")

    def test_url_property(self) -> None:
        assert Database("sqlite:///:memory:").url == "sqlite:///:memory:"

    def test_echo_logs_statements(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        with Database(f"sqlite:///{tmp_path / 'echo.db'}", echo=True) as database:
            with caplog.at_level(logging.INFO, logger="plume.data"):
                database.fetch("SELECT ?", 7)
        assert "SELECT ?" in caplog.text
        assert "params=(7,)" in caplog.text


class TestModel:
    def test_all_newest_first(self, seeded_db: Database) -> None:
        titles = [row["title"] for row in ArticleModel(seeded_db).all()]
        assert titles == ["Third", "Second", "First"]

    def test_all_custom_order(self, seeded_db: Database) -> None:
        titles = [row["title"] for row in OldestFirst(seeded_db).all()]
        assert titles == ["First", "Second", "Third"]

    def test_all_empty(self, db: Database) -> None:
        assert ArticleModel(db).all() == []

    def test_rows_are_plain_dicts(self, seeded_db: Database) -> None:
        row = ArticleModel(seeded_db).all()[0]
        assert type(row) is dict
        assert set(row) == {"id", "title", "content"}

    def test_find(self, seeded_db: Database) -> None:
        row = ArticleModel(seeded_db).find(2)
        assert row == {"id": 2, "title": "Second", "content": "Second body"}

    def test_find_missing_returns_none(self, seeded_db: Database) -> None:
        assert ArticleModel(seeded_db).find(999) is None

    def test_find_on_empty_table(self, db: Database) -> None:
        assert ArticleModel(db).find(1) is None

    def test_find_binds_value(self, seeded_db: Database) -> None:
        model = ArticleModel(seeded_db)
        assert model.find("1 OR 1=1") is None
        assert model.find("1; DROP TABLE articles") is None
        assert seeded_db.fetch_val("SELECT COUNT(*) FROM articles") == 3

    def test_find_with_quote_in_value(self, seeded_db: Database) -> None:
        assert ArticleModel(seeded_db).find("' OR '1'='1") is None

    def test_count(self, seeded_db: Database) -> None:
        assert ArticleModel(seeded_db).count() == 3

    def test_count_empty(self, db: Database) -> None:
        assert ArticleModel(db).count() == 0

    def test_storage_failure_propagates(self, tmp_path: Path) -> None:
        with Database(f"sqlite:///{tmp_path / 'empty.db'}") as database:
            with pytest.raises(QueryError):
                ArticleModel(database).all()

    def test_base_model_requires_table(self, db: Database) -> None:
        with pytest.raises(ConfigurationError, match="must define a 'table'"):
            Model(db)

    def test_invalid_table_name_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="not a valid SQL identifier"):

            class Bad(Model):
                table = "articles; DROP TABLE x"

    def test_invalid_order_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="order_by"):

            class Bad(Model):
                table = "articles"
                order_by = "id DESC; --"


class TestMigrate:
    def _write(self, directory: Path, name: str, sql: str) -> None:
        (directory / name).write_text(sql, encoding="utf-8")

    def test_applies_in_order(self, tmp_path: Path) -> None:
        migrations = tmp_path / "migrations"
        migrations.mkdir()
        self._write(migrations, "002_seed.sql", "INSERT INTO notes (body) VALUES ('hi');")
        self._write(migrations, "001_create.sql", "CREATE TABLE notes (body TEXT);")

        with Database("sqlite:///:memory:") as database:
            result = migrate(database, migrations)
            assert result.applied == ("001_create", "002_seed")
            assert result.skipped == 0
            assert database.fetch_val("SELECT body FROM notes") == "hi"
            assert "Applied 2 migration(s)" in result.summary

    def test_second_run_is_noop(self, tmp_path: Path) -> None:
        self._write(tmp_path, "001_create.sql", "CREATE TABLE notes (body TEXT);")
        with Database("sqlite:///:memory:") as database:
            migrate(database, tmp_path)
            result = migrate(database, tmp_path)
            assert result.applied == ()
            assert result.skipped == 1
            assert result.summary.startswith("Already up to date")

    def test_missing_directory(self, tmp_path: Path) -> None:
        with Database("sqlite:///:memory:") as database:
            with pytest.raises(MigrationError, match="does not exist"):
                migrate(database, tmp_path / "nope")

    def test_bad_filename(self, tmp_path: Path) -> None:
        self._write(tmp_path, "create.sql", "SELECT 1;")
        with Database("sqlite:///:memory:") as database:
            with pytest.raises(MigrationError, match="Invalid migration"):
                migrate(database, tmp_path)

    def test_empty_file(self, tmp_path: Path) -> None:
        self._write(tmp_path, "001_empty.sql", "   ")
        with Database("sqlite:///:memory:") as database:
            with pytest.raises(MigrationError, match="Empty migration"):
                migrate(database, tmp_path)

    def test_duplicate_version(self, tmp_path: Path) -> None:
        self._write(tmp_path, "001_a.sql", "SELECT 1;")
        self._write(tmp_path, "1_b.sql", "SELECT 1;")
        with Database("sqlite:///:memory:") as database:
            with pytest.raises(MigrationError, match="Duplicate migration version 1"):
                migrate(database, tmp_path)

    def test_tracking_table_records_names(self, tmp_path: Path) -> None:
        self._write(tmp_path, "001_create.sql", "CREATE TABLE notes (body TEXT);")
        with Database("sqlite:///:memory:") as database:
            migrate(database, tmp_path)
            rows = database.fetch("SELECT version, name FROM _plume_migrations")
        assert rows == [{"version": 1, "name": "001_create"}]

    def test_failing_migration_wrapped(self, tmp_path: Path) -> None:
        self._write(tmp_path, "001_bad.sql", "CREATE TABLE (;")
        with Database("sqlite:///:memory:") as database:
            with pytest.raises(MigrationError, match="001_bad failed"):
                migrate(database, tmp_path)
