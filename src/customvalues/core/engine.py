"""Top-level entry point tying the connection, gateway and stores together."""

from __future__ import annotations

from customvalues.core.connection import DatabaseConnection
from customvalues.core.gateway import Gateway
from customvalues.core.types import DatabaseInfo, StorageStrategy, StrategyStats
from customvalues.storage.blob import BlobValueStore
from customvalues.storage.inverted import InvertedTableStore


class CustomValuesDB:
    """Both storage strategies over one database.

    Example:
        with CustomValuesDB("sqlite:///database.db") as db:
            db.blobs.save(db.blobs.create({"Name": "Khalid"}))
            entity = db.inverted.create().add_value("Name", "Khalid")
            db.inverted.save(entity)
    """

    def __init__(self, url: str, echo: bool = False, migrate: bool = True) -> None:
        """Initialize the database.

        Args:
            url: Database connection URL
            echo: Whether to echo SQL statements (for debugging)
            migrate: Apply pending schema migrations immediately
        """
        self._connection = DatabaseConnection(url, echo=echo)
        self._gateway = Gateway(self._connection)
        self.blobs = BlobValueStore(self._gateway)
        self.inverted = InvertedTableStore(self._gateway)
        self.applied_migrations: list[str] = []

        if migrate:
            self.applied_migrations = self._gateway.initialize()

    @property
    def gateway(self) -> Gateway:
        return self._gateway

    def describe(self) -> DatabaseInfo:
        """Summarize dialect, schema version and row counts."""
        return DatabaseInfo(
            url=self._connection.url,
            dialect=self._connection.dialect,
            schema_version=self._gateway.schema_version(),
            strategies=[
                StrategyStats(strategy=StorageStrategy.BLOB, entities=self.blobs.count()),
                StrategyStats(
                    strategy=StorageStrategy.INVERTED,
                    entities=self.inverted.count(),
                    value_rows=self.inverted.count_rows(),
                ),
            ],
        )

    def close(self) -> None:
        """Close the database connection."""
        self._connection.close()

    def __enter__(self) -> CustomValuesDB:
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()
