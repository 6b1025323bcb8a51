"""Base collection store"""

from abc import ABC, abstractmethod
from typing import List, MutableMapping, Optional

from ..models import CollectionState, GalleryToken


class CollectionStore(ABC):
    """Named collections of cached gallery pages"""

    @property
    @abstractmethod
    def item_collections(self) -> MutableMapping[str, CollectionState]:
        """Collections by name"""
        pass

    @abstractmethod
    def add_collection(self, collection_name: str) -> CollectionState:
        """Register a collection if it does not exist yet and return it"""
        pass

    @abstractmethod
    def remove_collection(self, collection_name: str) -> None:
        """Drop a collection and all of its pages"""
        pass

    @abstractmethod
    def set_collection_items(self, page: int, items: List[GalleryToken], collection_name: str) -> None:
        """Cache the tokens of a 1-based page"""
        pass

    def get_collection(self, collection_name: str) -> Optional[CollectionState]:
        return self.item_collections.get(collection_name)

    def get_page_items(self, page: int, collection_name: str) -> Optional[List[GalleryToken]]:
        """Cached tokens of a 1-based page, or None when not fetched yet"""
        collection = self.get_collection(collection_name)
        if collection is None or page < 1 or page > len(collection.items):
            return None
        return collection.items[page - 1]

    def clear_collection(self, collection_name: str) -> None:
        """Forget every cached page and reset the page counter"""
        collection = self.add_collection(collection_name)
        collection.items = []
        collection.page = 1
