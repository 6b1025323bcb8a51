"""
Pydantic models for NFT gallery pages
"""

from enum import Enum
from typing import Optional, List, Dict, Any, Union, Literal
from pydantic import BaseModel, Field, field_validator


class Chain(str, Enum):
    """Supported EVM networks"""
    AVALANCHE = "avalanche"
    ETHEREUM = "ethereum"
    FANTOM = "fantom"
    POLYGON = "polygon"

    @classmethod
    def from_string(cls, chain_str: str) -> "Chain":
        """Convert string to Chain enum"""
        chain_str = chain_str.lower().strip()
        mapping = {
            "avax": cls.AVALANCHE,
            "avalanche": cls.AVALANCHE,
            "eth": cls.ETHEREUM,
            "ethereum": cls.ETHEREUM,
            "ftm": cls.FANTOM,
            "fantom": cls.FANTOM,
            "polygon": cls.POLYGON,
            "matic": cls.POLYGON,
            "pol": cls.POLYGON,
        }
        if chain_str not in mapping:
            raise ValueError(f"Unsupported chain: {chain_str}")
        return mapping[chain_str]


class GalleryState(str, Enum):
    """Lifecycle of a gallery collection"""
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class OwnershipRecord(BaseModel):
    """Token ID and its current owner; owner is None for burned tokens"""
    token_id: int = Field(ge=0)
    owner: Optional[str] = None


class MetadataRecord(BaseModel):
    """Token ID with its metadata document URL and fetched document"""
    token_id: int = Field(ge=0)
    metadata_url: str
    metadata: Optional[Dict[str, Any]] = None  # None when the fetch failed
    private_data: Optional[Any] = None  # reserved


class GalleryToken(MetadataRecord):
    """Ownership merged with metadata, as shown in a gallery page"""
    owner: Optional[str] = None

    @property
    def name(self) -> Optional[str]:
        if self.metadata:
            return self.metadata.get("name")
        return None


class PageIndexes(BaseModel):
    """Index range for one page of a collection"""
    start_index: int
    end_index: int
    last_page: int = Field(ge=0)


class PageResult(BaseModel):
    """One page of tokens plus the totals it was computed from"""
    tokens: List[GalleryToken] = Field(default_factory=list)
    page_size: int = Field(gt=0)
    count: int = Field(ge=0)  # balance of the holder, or total supply

    @field_validator("tokens")
    @classmethod
    def unique_token_ids(cls, tokens: List[GalleryToken]) -> List[GalleryToken]:
        seen = set()
        for token in tokens:
            if token.token_id in seen:
                raise ValueError(f"Duplicate token ID {token.token_id} in page")
            seen.add(token.token_id)
        return tokens

    @property
    def number_of_pages(self) -> int:
        return -(-self.count // self.page_size)


class TemplatedMetadataUrl(BaseModel):
    """Derive metadata URLs from a predictable storage layout (fast path)"""
    kind: Literal["templated"] = "templated"
    base_url: str
    owner_address: str
    chain_id: int


class OnChainMetadataUrl(BaseModel):
    """Read metadata URLs from the contract's tokenURI (slow path)"""
    kind: Literal["on_chain"] = "on_chain"


MetadataUrlStrategy = Union[TemplatedMetadataUrl, OnChainMetadataUrl]


class CollectionState(BaseModel):
    """Cached pages for one named collection"""
    items: List[Optional[List[GalleryToken]]] = Field(default_factory=list)
    item_count: int = 0  # total number of items
    page: int = 1  # last known page count
