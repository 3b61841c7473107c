"""Persistence gateway shared by both storage strategies."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from customvalues.core.connection import DatabaseConnection
from customvalues.exceptions import CustomValuesError, PersistenceError
from customvalues.schema.migrations import get_schema_version, run_migrations

logger = logging.getLogger(__name__)


class Gateway:
    """Explicit handle on one relational store.

    Stores receive a gateway instead of reaching for a module-level session,
    so several independent stores (for example a writer and a fresh reader)
    can coexist in one process.
    """

    def __init__(self, connection: DatabaseConnection) -> None:
        self._connection = connection

    @property
    def connection(self) -> DatabaseConnection:
        return self._connection

    def initialize(self) -> list[str]:
        """Create or upgrade the schema.

        Returns:
            Descriptions of the migrations that were applied
        """
        try:
            return run_migrations(self._connection.engine)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Schema migration failed: {e}") from e

    def schema_version(self) -> int:
        return get_schema_version(self._connection.engine)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Yield a session wrapped in a single transaction.

        Commits when the block exits cleanly and rolls back otherwise. Our own
        errors propagate unchanged, even when SQLAlchemy wrapped them while
        processing a statement; any other database failure surfaces as
        ``PersistenceError``.
        """
        session = self._connection.get_session()
        try:
            yield session
            session.commit()
        except CustomValuesError:
            session.rollback()
            raise
        except SQLAlchemyError as e:
            session.rollback()
            orig = getattr(e, "orig", None)
            if isinstance(orig, CustomValuesError):
                raise orig from e
            logger.debug(f"Transaction rolled back: {e}")
            raise PersistenceError(
                f"Database operation failed: {orig or e}",
                {"statement": getattr(e, "statement", None)},
            ) from e
        finally:
            session.close()
