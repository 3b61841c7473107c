"""SQLAlchemy ORM models for the two custom-value storage strategies.

``BlobEntity`` keeps every custom value in a single codec-encoded column.
``InvertedEntity`` keeps them as ``ValueRow`` children, one row per name,
joined back to the parent by foreign key.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.ext.mutable import MutableDict
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from customvalues.codec import EncodedMapping
from customvalues.core.compat import utc_now


class Base(DeclarativeBase):
    """Base class for all customvalues models."""

    pass


class SchemaVersion(Base):
    """Single-row table tracking the applied migration version."""

    __tablename__ = "cv_schema_version"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    applied_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)


# === Blob strategy ===


class BlobEntity(Base):
    """Entity whose custom values live in one serialized column.

    The mapping is encoded on write and decoded on read by the column's codec.
    Key comparison inside the mapping is case-sensitive.
    """

    __tablename__ = "cv_blob_entities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False, index=True
    )
    # MutableDict flags in-place edits so they are flushed like reassignments
    values: Mapped[dict[str, str]] = mapped_column(
        MutableDict.as_mutable(EncodedMapping()), nullable=False, default=dict
    )

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("created_at", utc_now())
        kwargs.setdefault("values", {})
        super().__init__(**kwargs)

    def __repr__(self) -> str:
        return f"BlobEntity(id={self.id!r}, values={dict(self.values or {})!r})"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "values": dict(self.values or {}),
        }


# === Inverted-table strategy ===


class InvertedEntity(Base):
    """Entity whose custom values live in the ``cv_value_rows`` child table."""

    __tablename__ = "cv_inverted_entities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False, index=True
    )

    # Owned rows: removed with the parent, by the ORM when loaded and by the
    # schema's ON DELETE CASCADE when not
    values: Mapped[list[ValueRow]] = relationship(
        "ValueRow",
        back_populates="parent",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ValueRow.id",
    )

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("created_at", utc_now())
        super().__init__(**kwargs)

    def add_value(self, name: str, value: str) -> InvertedEntity:
        """Set ``name`` to ``value``, matching existing names case-insensitively.

        Only the rows currently in ``self.values`` are searched; storage is not
        queried. If the collection was loaded partially (or not at all) a
        second row with the same name will be appended. Callers that cannot
        guarantee a complete collection should use
        ``InvertedTableStore.upsert_value`` instead.

        Names are compared with ``str.lower()``, the same folding as the SQL
        ``lower()`` used by ``upsert_value``; "STRASSE" and "straße" differ.

        Returns:
            ``self``, so calls can be chained.
        """
        key = name.lower()
        existing = next((row for row in self.values if row.name.lower() == key), None)
        if existing is not None:
            existing.value = value
        else:
            self.values.append(ValueRow(name=name, value=value))
        return self

    def get_value(self, name: str) -> str | None:
        """Return the loaded value for ``name`` (case-insensitive), if any."""
        key = name.lower()
        for row in self.values:
            if row.name.lower() == key:
                return row.value
        return None

    def __repr__(self) -> str:
        return f"InvertedEntity(id={self.id!r}, values={len(self.values)} rows)"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "values": [row.to_dict() for row in self.values],
        }


class ValueRow(Base):
    """A single ``name``/``value`` pair owned by an ``InvertedEntity``.

    Names are meant to be unique per parent (case-insensitively), but no unique
    index enforces it.
    """

    __tablename__ = "cv_value_rows"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    parent_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("cv_inverted_entities.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False)

    parent: Mapped[InvertedEntity] = relationship("InvertedEntity", back_populates="values")

    __table_args__ = (Index("ix_cv_value_rows_parent_id", "parent_id"),)

    def __repr__(self) -> str:
        return f"ValueRow(id={self.id!r}, name={self.name!r}, value={self.value!r})"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "parent_id": self.parent_id,
            "name": self.name,
            "value": self.value,
        }
