"""Storage strategies for custom values."""

from customvalues.storage.blob import BlobValueStore
from customvalues.storage.inverted import InvertedTableStore, NameFilter

__all__ = ["BlobValueStore", "InvertedTableStore", "NameFilter"]
