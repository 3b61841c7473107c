"""ORM models and migrations for customvalues."""

from customvalues.schema.migrations import CURRENT_VERSION, run_migrations
from customvalues.schema.models import Base, BlobEntity, InvertedEntity, ValueRow

__all__ = [
    "Base",
    "BlobEntity",
    "InvertedEntity",
    "ValueRow",
    "CURRENT_VERSION",
    "run_migrations",
]
