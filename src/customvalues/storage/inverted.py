"""Inverted-table storage: one child row per custom value.

Two ways to set a value are offered:

- ``add_value`` upserts against the rows already loaded into the entity. It
  costs no round-trip but only keeps names unique when the whole collection
  was loaded first. With a partially loaded (or never loaded) collection it
  appends a duplicate row, and that is the expected outcome.
- ``upsert_value`` looks the name up in storage before writing, trading one
  query for a guarantee that no duplicate is created.
"""

from __future__ import annotations

import logging
from typing import Union

from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.attributes import set_committed_value
from sqlalchemy.orm.interfaces import LoaderOption

from customvalues.core.gateway import Gateway
from customvalues.exceptions import NotFoundError
from customvalues.schema.models import InvertedEntity, ValueRow

logger = logging.getLogger(__name__)

# A name to match exactly, or any boolean expression over ValueRow columns
NameFilter = Union[str, ColumnElement[bool]]

_LATEST_FIRST = (InvertedEntity.created_at.desc(), InvertedEntity.id.desc())


def _load_values(name_filter: NameFilter | None = None) -> LoaderOption:
    """Eager-load option for ``InvertedEntity.values``, optionally restricted."""
    if name_filter is None:
        return selectinload(InvertedEntity.values)
    if isinstance(name_filter, str):
        name_filter = ValueRow.name == name_filter
    return selectinload(InvertedEntity.values.and_(name_filter))


def _entity_id(entity: InvertedEntity | int) -> int | None:
    return entity if isinstance(entity, int) else entity.id


class InvertedTableStore:
    """Create, update, save and read ``InvertedEntity`` rows with their values.

    Example:
        store = InvertedTableStore(gateway)
        entity = store.create()
        store.add_value(entity, "Name", "Khalid").add_value("Status", "Awesome... Again!")
        store.save(entity)
        latest = store.load_latest_with_values()
    """

    def __init__(self, gateway: Gateway) -> None:
        self._gateway = gateway

    def create(self) -> InvertedEntity:
        """Build an unsaved entity with no values."""
        return InvertedEntity()

    def add_value(self, entity: InvertedEntity, name: str, value: str) -> InvertedEntity:
        """In-memory, case-insensitive upsert; see ``InvertedEntity.add_value``.

        The caller must have loaded every existing row into ``entity.values``.
        """
        return entity.add_value(name, value)

    def save(self, entity: InvertedEntity) -> InvertedEntity:
        """Persist the parent and insert or update its loaded rows.

        Raises:
            PersistenceError: If the write fails
        """
        with self._gateway.transaction() as session:
            session.add(entity)
            session.flush()
            logger.debug(f"Saved inverted entity {entity.id} with {len(entity.values)} rows")
        return entity

    def load_latest_with_values(self, name_filter: NameFilter | None = None) -> InvertedEntity:
        """Return the newest entity with its rows eagerly loaded.

        Args:
            name_filter: Restrict which rows are loaded, either a name
                (exact match) or an expression such as
                ``ValueRow.name.in_(["Name", "Status"])``. Rows that do not
                match stay in storage but are absent from ``values``.

        Raises:
            NotFoundError: If no entity has been saved
        """
        stmt = select(InvertedEntity).options(_load_values(name_filter))
        return self._first(stmt.order_by(*_LATEST_FIRST).limit(1), None)

    def load_latest(self) -> InvertedEntity:
        """Return the newest entity WITHOUT loading its rows.

        ``values`` comes back empty even when rows exist. Calling
        ``add_value`` on the result and saving it creates duplicates of
        every name already stored. Use ``load_latest_with_values`` unless
        only the parent columns are needed.

        Raises:
            NotFoundError: If no entity has been saved
        """
        stmt = select(InvertedEntity).order_by(*_LATEST_FIRST).limit(1)
        with self._gateway.transaction() as session:
            entity = session.scalars(stmt).first()
            if entity is None:
                raise NotFoundError("InvertedEntity", None)
            # mark the collection as loaded-and-empty without querying it
            set_committed_value(entity, "values", [])
            return entity

    def get(self, entity_id: int, name_filter: NameFilter | None = None) -> InvertedEntity:
        """Return the entity with ``entity_id`` and its (filtered) rows.

        Raises:
            NotFoundError: If no such entity exists
        """
        stmt = (
            select(InvertedEntity)
            .where(InvertedEntity.id == entity_id)
            .options(_load_values(name_filter))
        )
        return self._first(stmt, entity_id)

    def list_recent(self, limit: int | None = None) -> list[InvertedEntity]:
        """Return saved entities with their rows, newest first."""
        stmt = select(InvertedEntity).options(_load_values()).order_by(*_LATEST_FIRST)
        if limit is not None:
            stmt = stmt.limit(limit)
        with self._gateway.transaction() as session:
            return list(session.scalars(stmt))

    def upsert_value(self, entity: InvertedEntity | int, name: str, value: str) -> ValueRow:
        """Set ``name`` on a saved entity after checking storage for it.

        Matching is case-insensitive (SQL ``lower()``). If duplicates already
        exist the oldest row is updated. The in-memory ``entity`` is not
        refreshed; reload it to see the change.

        Raises:
            NotFoundError: If the entity has not been saved
        """
        entity_id = _entity_id(entity)
        with self._gateway.transaction() as session:
            if entity_id is None or session.get(InvertedEntity, entity_id) is None:
                raise NotFoundError("InvertedEntity", entity_id)

            stmt = (
                select(ValueRow)
                .where(
                    ValueRow.parent_id == entity_id,
                    func.lower(ValueRow.name) == name.lower(),
                )
                .order_by(ValueRow.id)
                .limit(1)
            )
            row = session.scalars(stmt).first()
            if row is None:
                row = ValueRow(parent_id=entity_id, name=name, value=value)
                session.add(row)
                logger.debug(f"Inserted value row '{name}' for inverted entity {entity_id}")
            else:
                row.value = value
                logger.debug(f"Updated value row '{row.name}' for inverted entity {entity_id}")
            session.flush()
            return row

    def count_rows(self, entity: InvertedEntity | int | None = None) -> int:
        """Count value rows in storage, for one entity or overall."""
        stmt = select(func.count()).select_from(ValueRow)
        if entity is not None:
            stmt = stmt.where(ValueRow.parent_id == _entity_id(entity))
        with self._gateway.transaction() as session:
            return session.scalar(stmt) or 0

    def count(self) -> int:
        with self._gateway.transaction() as session:
            return session.scalar(select(func.count()).select_from(InvertedEntity)) or 0

    def delete(self, entity: InvertedEntity | int) -> None:
        """Delete an entity; its value rows go with it.

        Raises:
            NotFoundError: If the entity is not in storage
        """
        entity_id = _entity_id(entity)
        with self._gateway.transaction() as session:
            existing = session.get(InvertedEntity, entity_id) if entity_id is not None else None
            if existing is None:
                raise NotFoundError("InvertedEntity", entity_id)
            session.delete(existing)
        logger.debug(f"Deleted inverted entity {entity_id}")

    def _first(self, stmt: Select[tuple[InvertedEntity]], entity_id: int | None) -> InvertedEntity:
        with self._gateway.transaction() as session:
            entity = session.scalars(stmt).first()
            if entity is None:
                raise NotFoundError("InvertedEntity", entity_id)
            return entity
