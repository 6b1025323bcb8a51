"""
NFT Gallery - Paged ERC-721 ownership and metadata reader
"""

__version__ = "1.0.0"

from .gallery import NftGallery
from .reader import EvmNftReader
from .models import (
    Chain,
    GalleryState,
    GalleryToken,
    MetadataRecord,
    OnChainMetadataUrl,
    OwnershipRecord,
    PageIndexes,
    PageResult,
    TemplatedMetadataUrl,
)
from .pagination import calculate_page_indexes
from .storage import CollectionStore, MemoryCollectionStore

__all__ = [
    "NftGallery",
    "EvmNftReader",
    "Chain",
    "GalleryState",
    "GalleryToken",
    "MetadataRecord",
    "OnChainMetadataUrl",
    "OwnershipRecord",
    "PageIndexes",
    "PageResult",
    "TemplatedMetadataUrl",
    "calculate_page_indexes",
    "CollectionStore",
    "MemoryCollectionStore",
]
