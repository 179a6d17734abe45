"""
SQLAlchemy engine and transaction scoping.

Repository adapters obtain their connection through `connection_scope`.
Inside a `SqlUnitOfWork.transaction()` block every adapter call reuses
the same connection, so the block commits or rolls back as one unit.
Outside a block each call runs in its own short transaction.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine

from app.domain.brokerage.ports import UnitOfWork

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "db" / "schema.sql"

_active_connection: ContextVar[Optional[Connection]] = ContextVar(
    "brokerage_active_connection", default=None
)


def create_db_engine(dsn: str, pool_size: int = 5) -> Engine:
    """Build a SQLAlchemy engine for the brokerage database."""
    return create_engine(dsn, pool_pre_ping=True, pool_size=pool_size)


@contextmanager
def connection_scope(engine: Engine) -> Iterator[Connection]:
    """Yield the active unit-of-work connection, or a fresh transaction."""
    active = _active_connection.get()
    if active is not None:
        yield active
        return
    with engine.begin() as conn:
        yield conn


class SqlUnitOfWork(UnitOfWork):
    """Binds one database transaction to the current execution context."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Open a transaction, or join the one already open."""
        if _active_connection.get() is not None:
            yield
            return

        with self._engine.begin() as conn:
            token = _active_connection.set(conn)
            try:
                yield
            finally:
                _active_connection.reset(token)


def apply_schema(engine: Engine, schema_path: Path = SCHEMA_PATH) -> None:
    """Execute the DDL script. Statements are idempotent.

    Args:
        engine: Target database engine.
        schema_path: SQL file with `;`-separated statements.
    """
    statements = [
        s.strip() for s in schema_path.read_text(encoding="utf-8").split(";")
    ]
    with engine.begin() as conn:
        for statement in statements:
            if statement:
                conn.execute(text(statement))
    logger.info("Applied schema from %s", schema_path.name)
