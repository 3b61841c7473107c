"""CLI context management for database connections and shared state."""

import os
from dataclasses import dataclass, field

from customvalues import CustomValuesDB

DEFAULT_DATABASE_URL = "sqlite:///./database.db"


def get_database_url(url: str | None) -> str:
    """Resolve database URL from CLI arg, environment variable, or default.

    Priority:
    1. Explicit URL argument
    2. CUSTOMVALUES_URL environment variable
    3. Default: sqlite:///./database.db
    """
    if url:
        return url
    if env_url := os.getenv("CUSTOMVALUES_URL"):
        return env_url
    return DEFAULT_DATABASE_URL


@dataclass
class CLIContext:
    """Shared context for CLI commands.

    Manages database connection lifecycle and output preferences.
    """

    database_url: str
    echo: bool
    json_output: bool
    _db: CustomValuesDB | None = field(default=None, init=False, repr=False)

    def get_db(self) -> CustomValuesDB:
        """Get or create database connection (lazy initialization).

        Pending migrations are applied on first use.
        """
        if self._db is None:
            self._db = CustomValuesDB(self.database_url, echo=self.echo)
        return self._db

    def open_reader(self) -> CustomValuesDB:
        """Open a second, independent connection to the same database."""
        return CustomValuesDB(self.database_url, echo=self.echo, migrate=False)

    def close(self) -> None:
        """Close database connection if open."""
        if self._db is not None:
            self._db.close()
            self._db = None
