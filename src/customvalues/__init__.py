"""customvalues - two ways to store custom user values in a relational database.

``BlobValueStore`` keeps a whole ``str -> str`` mapping in one serialized
column. ``InvertedTableStore`` keeps one child row per value and upserts by
name.

Example:
    from customvalues import CustomValuesDB

    db = CustomValuesDB("sqlite:///database.db")

    blob = db.blobs.create({"Name": "Khalid", "Status": "Awesome"})
    db.blobs.save(blob)

    entity = db.inverted.create().add_value("Name", "Khalid")
    db.inverted.save(entity)

    print(db.blobs.load_latest().values)
    print(db.inverted.load_latest_with_values().values)
"""

from customvalues.codec import EncodedMapping, JsonCodec, MappingCodec
from customvalues.core.engine import CustomValuesDB
from customvalues.core.gateway import Gateway
from customvalues.core.types import DatabaseInfo, StorageStrategy, StrategyStats
from customvalues.exceptions import (
    ConnectionError,
    CustomValuesError,
    DeserializationError,
    NotFoundError,
    PersistenceError,
    SerializationError,
)
from customvalues.schema.models import BlobEntity, InvertedEntity, ValueRow
from customvalues.storage import BlobValueStore, InvertedTableStore

__version__ = "0.1.0"

__all__ = [
    # Main classes
    "CustomValuesDB",
    "Gateway",
    "BlobValueStore",
    "InvertedTableStore",
    # Models
    "BlobEntity",
    "InvertedEntity",
    "ValueRow",
    # Codec
    "MappingCodec",
    "JsonCodec",
    "EncodedMapping",
    # Types
    "StorageStrategy",
    "StrategyStats",
    "DatabaseInfo",
    # Exceptions
    "CustomValuesError",
    "ConnectionError",
    "SerializationError",
    "DeserializationError",
    "PersistenceError",
    "NotFoundError",
]
