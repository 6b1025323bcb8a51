"""Stores for cached gallery pages"""

from .base import CollectionStore
from .memory import MemoryCollectionStore

__all__ = ["CollectionStore", "MemoryCollectionStore", "get_storage_adapter"]


def get_storage_adapter(config) -> CollectionStore:
    """Get the collection store for the given config"""
    return MemoryCollectionStore(max_collections=config.max_collections)
