"""Blob-value storage: one serialized mapping column per entity.

The whole mapping is always read and decoded; there is no way to fetch a
subset of keys at the storage layer.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from sqlalchemy import func, select

from customvalues.core.gateway import Gateway
from customvalues.exceptions import NotFoundError
from customvalues.schema.models import BlobEntity

logger = logging.getLogger(__name__)

_LATEST_FIRST = (BlobEntity.created_at.desc(), BlobEntity.id.desc())


class BlobValueStore:
    """Create, save and read ``BlobEntity`` rows.

    Example:
        store = BlobValueStore(gateway)
        entity = store.create({"Name": "Khalid", "Status": "Awesome"})
        store.save(entity)
        assert store.load_latest().values == {"Name": "Khalid", "Status": "Awesome"}
    """

    def __init__(self, gateway: Gateway) -> None:
        self._gateway = gateway

    def create(self, initial_values: Mapping[str, str] | None = None) -> BlobEntity:
        """Build an unsaved entity holding a copy of ``initial_values``.

        Nothing is validated here; the codec rejects bad values on save.
        """
        return BlobEntity(values=dict(initial_values or {}))

    def save(self, entity: BlobEntity) -> BlobEntity:
        """Insert or update ``entity`` in one transaction.

        Raises:
            SerializationError: If the codec cannot encode ``entity.values``
            PersistenceError: If the write fails
        """
        with self._gateway.transaction() as session:
            session.add(entity)
            session.flush()
            logger.debug(f"Saved blob entity {entity.id} with {len(entity.values)} values")
        return entity

    def load_latest(self) -> BlobEntity:
        """Return the entity with the newest ``created_at``.

        Raises:
            NotFoundError: If no entity has been saved
            DeserializationError: If the stored column cannot be decoded
        """
        with self._gateway.transaction() as session:
            entity = session.scalars(select(BlobEntity).order_by(*_LATEST_FIRST).limit(1)).first()
            if entity is None:
                raise NotFoundError("BlobEntity")
            return entity

    def get(self, entity_id: int) -> BlobEntity:
        """Return the entity with ``entity_id``.

        Raises:
            NotFoundError: If no such entity exists
        """
        with self._gateway.transaction() as session:
            entity = session.get(BlobEntity, entity_id)
            if entity is None:
                raise NotFoundError("BlobEntity", entity_id)
            return entity

    def list_recent(self, limit: int | None = None) -> list[BlobEntity]:
        """Return saved entities, newest first."""
        stmt = select(BlobEntity).order_by(*_LATEST_FIRST)
        if limit is not None:
            stmt = stmt.limit(limit)
        with self._gateway.transaction() as session:
            return list(session.scalars(stmt))

    def count(self) -> int:
        with self._gateway.transaction() as session:
            return session.scalar(select(func.count()).select_from(BlobEntity)) or 0

    def delete(self, entity: BlobEntity | int) -> None:
        """Delete an entity by instance or id.

        Raises:
            NotFoundError: If the entity is not in storage
        """
        entity_id = entity if isinstance(entity, int) else entity.id
        with self._gateway.transaction() as session:
            existing = session.get(BlobEntity, entity_id) if entity_id is not None else None
            if existing is None:
                raise NotFoundError("BlobEntity", entity_id)
            session.delete(existing)
        logger.debug(f"Deleted blob entity {entity_id}")
