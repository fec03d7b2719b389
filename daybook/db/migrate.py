"""Idempotent, additive schema upgrades for SQLite databases."""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import text
from sqlalchemy.engine import Engine

# Columns that arrived after the first release of each table. Fresh databases
# get them from ``Base.metadata.create_all``; older files are patched here.
LATE_COLUMNS: dict[str, dict[str, str]] = {
    "entries": {
        "energy": "INTEGER",
        "intent": "TEXT",
        "updated_at": "TEXT",
    },
    "reflections": {
        "updated_at": "TEXT",
    },
    "users": {
        "name": "TEXT",
    },
}


def _table_columns(engine: Engine, table: str) -> list[dict[str, object]]:
    with engine.connect() as conn:
        return conn.execute(text(f"PRAGMA table_info({table})")).mappings().all()


def _column_names(engine: Engine, table: str) -> set[str]:
    return {record["name"] for record in _table_columns(engine, table)}


def _add_column_sqlite(engine: Engine, table: str, col_def: str) -> None:
    with engine.begin() as conn:
        conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {col_def}"))


def _create_index_if_not_exists(engine: Engine, table: str, name: str, cols: Iterable[str], unique: bool = False) -> None:
    cols_sql = ", ".join(cols)
    unique_sql = "UNIQUE " if unique else ""
    with engine.begin() as conn:
        conn.execute(text(f"CREATE {unique_sql}INDEX IF NOT EXISTS {name} ON {table} ({cols_sql})"))


def run_migrations(engine: Engine) -> None:
    """Bring an existing SQLite schema up to what the models expect."""

    if engine.dialect.name != "sqlite":
        return

    for table, needed in LATE_COLUMNS.items():
        existing = _column_names(engine, table)
        if not existing:
            # Table absent; create_all builds it from scratch.
            continue
        for name, dtype in needed.items():
            if name not in existing:
                _add_column_sqlite(engine, table, f"{name} {dtype}")

    if _column_names(engine, "categories"):
        _create_index_if_not_exists(
            engine, "categories", "ix_categories_user_name_unique", ["user_id", "name"], unique=True
        )
    if _column_names(engine, "sessions"):
        _create_index_if_not_exists(engine, "sessions", "ix_sessions_expires_at", ["expires_at"])
