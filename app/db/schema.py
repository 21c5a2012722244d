"""
Drop-and-recreate schema initializer.

Steps, all inside one transaction:

1. drop known foreign keys on tables that currently exist
2. drop every table (CASCADE on PostgreSQL)
3. create tables in dependency order, without foreign keys
4. add the foreign keys once all tables exist (departments <-> employees is a cycle)
5. create secondary indexes

SQLite cannot ALTER constraints, so there the foreign keys are emitted inline at
CREATE time instead; SQLite accepts references to tables that do not exist yet.
"""
import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.schema import AddConstraint, CreateIndex, CreateTable, DropTable

from app.core.errors import SchemaInitError
from app.core.logging import timed
from app.db.base import Base

logger = logging.getLogger(__name__)


def _column_key(item) -> list[str]:
    return [c.name for c in item.columns]


def _supports_alter(conn: Connection) -> bool:
    return conn.dialect.supports_alter


def drop_foreign_keys(conn: Connection) -> int:
    if not _supports_alter(conn):
        return 0

    inspector = inspect(conn)
    existing = set(inspector.get_table_names())
    dropped = 0
    for table in Base.metadata.sorted_tables:
        if table.name not in existing:
            continue
        for fk in inspector.get_foreign_keys(table.name):
            if not fk.get("name"):
                continue
            conn.execute(text(f'ALTER TABLE "{table.name}" DROP CONSTRAINT IF EXISTS "{fk["name"]}"'))
            dropped += 1
    return dropped


def drop_tables(conn: Connection) -> int:
    tables = list(reversed(Base.metadata.sorted_tables))
    for table in tables:
        if conn.dialect.name == "postgresql":
            conn.execute(text(f'DROP TABLE IF EXISTS "{table.name}" CASCADE'))
        else:
            conn.execute(DropTable(table, if_exists=True))
    return len(tables)


def create_tables(conn: Connection) -> int:
    # [] leaves every FK out of the CREATE; None keeps them inline
    inline_fks = None if not _supports_alter(conn) else []
    tables = Base.metadata.sorted_tables
    for table in tables:
        conn.execute(CreateTable(table, include_foreign_key_constraints=inline_fks))
    return len(tables)


def add_foreign_keys(conn: Connection) -> int:
    if not _supports_alter(conn):
        return 0

    added = 0
    for table in Base.metadata.sorted_tables:
        for fk in sorted(table.foreign_key_constraints, key=_column_key):
            conn.execute(AddConstraint(fk))
            added += 1
    return added


def create_indexes(conn: Connection) -> int:
    created = 0
    for table in Base.metadata.sorted_tables:
        for index in sorted(table.indexes, key=_column_key):
            conn.execute(CreateIndex(index))
            created += 1
    return created


STEPS = (
    ("drop foreign keys", drop_foreign_keys),
    ("drop tables", drop_tables),
    ("create tables", create_tables),
    ("add foreign keys", add_foreign_keys),
    ("create indexes", create_indexes),
)


def initialize_schema(engine: Engine) -> dict[str, int]:
    """
    Rebuild the whole schema. Returns how many objects each step touched.

    Any failure rolls the transaction back and raises SchemaInitError.
    """
    summary: dict[str, int] = {}
    with engine.connect() as conn:
        step = "begin"
        try:
            with conn.begin():
                for step, fn in STEPS:
                    with timed(f"schema: {step}"):
                        summary[step] = fn(conn)
                    logger.info("Schema step '%s' done", step, extra={"meta": {"step": step, "count": summary[step]}})
        except Exception as exc:
            logger.error(
                "Schema initialization failed, transaction rolled back",
                exc_info=exc,
                extra={"meta": {"step": step, "completed": summary}},
            )
            raise SchemaInitError(step, exc) from exc

    logger.info("Schema initialized", extra={"meta": summary})
    return summary


def describe_schema(conn: Connection) -> dict:
    """Structural snapshot of the managed tables: columns, FKs, unique constraints, indexes."""
    inspector = inspect(conn)
    managed = {t.name for t in Base.metadata.sorted_tables}
    snapshot = {}
    for name in sorted(set(inspector.get_table_names()) & managed):
        snapshot[name] = {
            "columns": [(c["name"], str(c["type"]), c["nullable"]) for c in inspector.get_columns(name)],
            "foreign_keys": sorted(
                (tuple(fk["constrained_columns"]), fk["referred_table"], tuple(fk["referred_columns"]))
                for fk in inspector.get_foreign_keys(name)
            ),
            "unique": sorted(tuple(u["column_names"]) for u in inspector.get_unique_constraints(name)),
            "indexes": sorted((ix["name"], tuple(ix["column_names"])) for ix in inspector.get_indexes(name)),
        }
    return snapshot
