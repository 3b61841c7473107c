"""Core types for customvalues.

All types are JSON-serializable for CLI output.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from customvalues.core.compat import StrEnum


class StorageStrategy(StrEnum):
    """The two ways custom values can be stored."""

    BLOB = "blob"  # One serialized mapping column per entity
    INVERTED = "inverted"  # One child row per value


class StrategyStats(BaseModel):
    """Row counts for one storage strategy."""

    strategy: StorageStrategy
    entities: int = Field(0, description="Number of parent entities")
    value_rows: int | None = Field(
        None, description="Number of child value rows (inverted strategy only)"
    )


class DatabaseInfo(BaseModel):
    """Summary of a customvalues database."""

    url: str
    dialect: str
    schema_version: int
    strategies: list[StrategyStats] = Field(default_factory=list)
