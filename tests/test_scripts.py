"""
Migration runner and schema check scripts.
"""

import importlib.util
from pathlib import Path

import pytest

import test_fixtures  # noqa: F401  (disables DB init before model imports)
from domain.models import Base
from domain.models import database as db_module

ROOT = Path(__file__).parent.parent


def _load_script(name):
    spec = importlib.util.spec_from_file_location(name, ROOT / "scripts" / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


run_migrations = _load_script("run_migrations")
verify_tables = _load_script("verify_tables")


def test_migrations_sorted_by_filename(tmp_path):
    for name in ("010_late.sql", "002_b.sql", "001_a.sql", "notes.txt"):
        (tmp_path / name).write_text("SELECT 1;")
    assert [p.name for p in run_migrations.list_migrations(tmp_path)] == [
        "001_a.sql",
        "002_b.sql",
        "010_late.sql",
    ]


def test_pending_migrations_skips_applied():
    files = [Path("001_a.sql"), Path("002_b.sql"), Path("003_c.sql")]
    assert [p.name for p in run_migrations.pending_migrations(files, ["002_b.sql"])] == [
        "001_a.sql",
        "003_c.sql",
    ]


def test_repository_migrations_are_ordered():
    names = [p.name for p in run_migrations.list_migrations()]
    assert names[0] == "001_initial_schema.sql"
    assert len(names) == len(set(n.split("_")[0] for n in names))


class _FakeCursor:
    def __init__(self, applied):
        self.applied = applied
        self.executed = []

    def execute(self, sql, params=None):
        self.executed.append(sql)

    def fetchall(self):
        return [(name,) for name in self.applied]


class _FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.commits = 0
        self.closed = False

    def cursor(self):
        return self._cursor

    def commit(self):
        self.commits += 1

    def rollback(self):
        pass

    def close(self):
        self.closed = True


def test_dry_run_applies_nothing(monkeypatch):
    cursor = _FakeCursor(applied=["001_initial_schema.sql"])
    conn = _FakeConnection(cursor)
    monkeypatch.setattr(db_module, "engine", type("E", (), {"raw_connection": lambda self: conn})())

    assert run_migrations.main(["--dry-run"]) == 0
    # tracking table + applied lookup only
    assert len(cursor.executed) == 2
    assert conn.closed


def test_missing_tables():
    assert verify_tables.missing_tables(["profiles", "recipes"], ["profiles", "recipes", "receipts"]) == [
        "receipts"
    ]


def test_expected_tables_match_models():
    assert sorted(verify_tables.EXPECTED_TABLES) == sorted(Base.metadata.tables)


@pytest.mark.parametrize("table", verify_tables.EXPECTED_TABLES)
def test_initial_migration_creates_table(table):
    sql = (ROOT / "migrations" / "001_initial_schema.sql").read_text(encoding="utf-8")
    assert f"CREATE TABLE IF NOT EXISTS {table} (" in sql
