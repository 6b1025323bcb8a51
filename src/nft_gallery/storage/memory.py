"""In-memory collection store"""

from typing import List, MutableMapping

from cachetools import LRUCache
from loguru import logger

from .base import CollectionStore
from ..models import CollectionState, GalleryToken


class MemoryCollectionStore(CollectionStore):
    """Keeps the most recently used collections in memory"""

    def __init__(self, max_collections: int = 64):
        self._collections: LRUCache = LRUCache(maxsize=max_collections)

    @property
    def item_collections(self) -> MutableMapping[str, CollectionState]:
        return self._collections

    def add_collection(self, collection_name: str) -> CollectionState:
        collection = self._collections.get(collection_name)
        if collection is None:
            collection = CollectionState()
            self._collections[collection_name] = collection
            logger.debug(f"Added collection {collection_name}")
        return collection

    def remove_collection(self, collection_name: str) -> None:
        self._collections.pop(collection_name, None)

    def set_collection_items(self, page: int, items: List[GalleryToken], collection_name: str) -> None:
        if page < 1:
            raise ValueError(f"page must be at least 1, got {page}")
        collection = self.add_collection(collection_name)
        while len(collection.items) < page:
            collection.items.append(None)
        collection.items[page - 1] = list(items)
