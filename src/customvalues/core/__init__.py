"""Core components for customvalues."""

from customvalues.core.connection import DatabaseConnection
from customvalues.core.types import DatabaseInfo, StorageStrategy, StrategyStats

__all__ = [
    "DatabaseConnection",
    "StorageStrategy",
    "StrategyStats",
    "DatabaseInfo",
]
