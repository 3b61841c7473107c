"""Schema migrations for customvalues tables.

Each migration is a function that takes an engine and applies changes.
The applied version is recorded in ``cv_schema_version``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from customvalues.core.compat import utc_now
from customvalues.exceptions import PersistenceError
from customvalues.schema.models import (
    Base,
    BlobEntity,
    InvertedEntity,
    SchemaVersion,
    ValueRow,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

# Current schema version - increment when adding new migrations
CURRENT_VERSION = 1

# Migration registry: version -> (description, migration_function)
MIGRATIONS: dict[int, tuple[str, Callable[[Engine], None]]] = {}


def migration(
    version: int, description: str
) -> Callable[[Callable[[Engine], None]], Callable[[Engine], None]]:
    """Decorator to register a migration function."""

    def decorator(func: Callable[[Engine], None]) -> Callable[[Engine], None]:
        MIGRATIONS[version] = (description, func)
        return func

    return decorator


def get_schema_version(engine: Engine) -> int:
    """Get the current schema version from the database.

    Returns 0 if the version table doesn't exist or is empty.
    """
    inspector = inspect(engine)
    if SchemaVersion.__tablename__ not in inspector.get_table_names():
        return 0

    with Session(engine) as session:
        version_record = session.get(SchemaVersion, 1)
        if version_record is None:
            return 0
        return version_record.version


def set_schema_version(engine: Engine, version: int, description: str | None = None) -> None:
    """Set the schema version in the database."""
    with Session(engine) as session:
        version_record = session.get(SchemaVersion, 1)
        if version_record is None:
            version_record = SchemaVersion(id=1, version=version, description=description)
            session.add(version_record)
        else:
            version_record.version = version
            version_record.description = description
            version_record.applied_at = utc_now()
        session.commit()


def index_exists(engine: Engine, table_name: str, index_name: str) -> bool:
    """Check if an index exists on a table."""
    inspector = inspect(engine)
    if table_name not in inspector.get_table_names():
        return False
    return index_name in [idx["name"] for idx in inspector.get_indexes(table_name)]


def run_migrations(engine: Engine) -> list[str]:
    """Run all pending migrations.

    Returns a list of applied migration descriptions.
    """
    SchemaVersion.__table__.create(engine, checkfirst=True)
    current_version = get_schema_version(engine)
    applied = []

    logger.info(f"Current schema version: {current_version}, target: {CURRENT_VERSION}")

    for version in sorted(MIGRATIONS.keys()):
        if version > current_version:
            description, migrate_func = MIGRATIONS[version]
            logger.info(f"Applying migration {version}: {description}")
            try:
                migrate_func(engine)
                set_schema_version(engine, version, description)
                applied.append(f"v{version}: {description}")
                logger.info(f"Migration {version} applied successfully")
            except Exception as e:
                logger.error(f"Migration {version} failed: {e}")
                raise

    return applied


# === Migration Definitions ===


@migration(1, "Create blob entity, inverted entity and value row tables")
def migrate_v1_initial(engine: Engine) -> None:
    """Create the three storage tables.

    ``cv_value_rows.parent_id`` references ``cv_inverted_entities.id`` with
    ON DELETE CASCADE and carries a non-unique index for child lookups.
    """
    tables = [BlobEntity.__table__, InvertedEntity.__table__, ValueRow.__table__]
    Base.metadata.create_all(engine, tables=tables, checkfirst=True)  # type: ignore[arg-type]

    if not index_exists(engine, ValueRow.__tablename__, "ix_cv_value_rows_parent_id"):
        raise PersistenceError(
            "Foreign key index ix_cv_value_rows_parent_id was not created",
            {"table": ValueRow.__tablename__},
        )

    logger.info("Migration v1 complete: storage tables created")
