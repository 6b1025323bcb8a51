"""
Paged, sortable gallery state over one NFT contract
"""

from typing import List, Optional

from loguru import logger

from .exceptions import ConfigurationError
from .models import GalleryState, GalleryToken
from .reader import EvmNftReader
from .storage import CollectionStore


class NftGallery:
    """
    Owns paging and sort state for one named collection.

    Pages are cached in the injected store and served from it until the
    sort order is toggled. Every load takes a generation number; a load
    that finishes after a newer one started is discarded, so the latest
    page or sort request always wins.
    """

    def __init__(
        self,
        reader: EvmNftReader,
        store: CollectionStore,
        collection_name: str,
        is_ascending: bool = True,
    ):
        if not collection_name:
            raise ConfigurationError("collection_name is required")
        self.reader = reader
        self.store = store
        self.collection_name = collection_name

        self.page = 1
        self.number_of_pages = 0
        self.nfts: List[GalleryToken] = []
        self.is_ascending = is_ascending
        self.is_loading = False
        self.state = GalleryState.UNINITIALIZED
        self.last_error: Optional[Exception] = None
        self._generation = 0

    @property
    def loading_message(self) -> str:
        return self.reader.loading_message

    @property
    def item_count(self) -> int:
        collection = self.store.get_collection(self.collection_name)
        return collection.item_count if collection else 0

    async def activate(self) -> List[GalleryToken]:
        """Register the collection, probe the contract and load the current page"""
        self.store.add_collection(self.collection_name)
        self.state = GalleryState.LOADING
        await self.reader.detect_start_token_id()
        return await self.load_page(self.page)

    async def set_page(self, page: int) -> List[GalleryToken]:
        """Move to another page; unchanged pages are not reloaded"""
        if not isinstance(page, int) or page < 1:
            raise ConfigurationError(f"page must be a positive integer, got {page!r}")
        if page == self.page and self.state == GalleryState.READY:
            return self.nfts
        previous_page = self.page
        self.page = page
        try:
            return await self.load_page(page)
        except Exception:
            # Stay on the last page that loaded
            if self.page == page:
                self.page = previous_page
            raise

    async def next_page(self) -> List[GalleryToken]:
        if self.page >= self.number_of_pages:
            return self.nfts
        return await self.set_page(self.page + 1)

    async def previous_page(self) -> List[GalleryToken]:
        if self.page <= 1:
            return self.nfts
        return await self.set_page(self.page - 1)

    async def toggle_sort_order(self) -> List[GalleryToken]:
        """
        Flip the sort order, drop cached pages and reload page 1.

        If the reload fails the previous order, page and cached pages are
        put back before the error is re-raised.
        """
        previous = (self.is_ascending, self.page)
        collection = self.store.add_collection(self.collection_name)
        cached_items, cached_page_count = list(collection.items), collection.page

        self.is_ascending = not self.is_ascending
        self.store.clear_collection(self.collection_name)
        self.page = 1
        try:
            return await self.load_page(self.page)
        except Exception:
            self.is_ascending, self.page = previous
            collection = self.store.add_collection(self.collection_name)
            collection.items = cached_items
            collection.page = cached_page_count
            raise

    async def load_page(self, page: int) -> List[GalleryToken]:
        """
        Show a page, from the store when cached, otherwise from the chain.

        On failure the cached pages are left untouched and the error is
        re-raised after the loading flag is cleared.
        """
        self._generation += 1
        generation = self._generation
        self.is_loading = True
        self.state = GalleryState.LOADING

        try:
            collection = self.store.add_collection(self.collection_name)
            cached = self.store.get_page_items(page, self.collection_name)
            if cached is not None:
                logger.debug(f"Cache hit for {self.collection_name} page {page}")
                self.nfts = cached
                self.number_of_pages = collection.page
                self.state = GalleryState.READY
                return cached

            result = await self.reader.get_nfts(page, self.is_ascending)

            if generation != self._generation:
                logger.debug(f"Discarding stale result for {self.collection_name} page {page}")
                return result.tokens

            self.store.set_collection_items(page, result.tokens, self.collection_name)
            collection = self.store.add_collection(self.collection_name)
            collection.page = result.number_of_pages
            collection.item_count = result.count

            self.nfts = result.tokens
            self.number_of_pages = collection.page
            self.last_error = None
            self.state = GalleryState.READY
            logger.info(
                f"Loaded {len(result.tokens)} NFTs for {self.collection_name} "
                f"page {page}/{self.number_of_pages}"
            )
            return result.tokens
        except Exception as e:
            if generation == self._generation:
                self.state = GalleryState.ERROR
                self.last_error = e
            logger.error(f"Error loading {self.collection_name} page {page}: {e}")
            raise
        finally:
            if generation == self._generation:
                self.is_loading = False
