"""Locate and fetch metadata documents for a batch of tokens"""

import asyncio
import time
from typing import Callable, List, Optional, Sequence, Tuple

from loguru import logger

from .clients.contract import ContractReader
from .clients.metadata import MetadataClient
from .config import DEFAULT_IPFS_GATEWAY
from .exceptions import MetadataFetchError
from .fetcher import raise_hard_failures, settle
from .models import (
    MetadataRecord,
    MetadataUrlStrategy,
    OnChainMetadataUrl,
    TemplatedMetadataUrl,
)
from .utils import convert_ipfs_to_http

FETCHING_METADATA_MESSAGE = "Fetching Meta Data..."


def build_metadata_base_url(base_url: str, owner_address: str, chain_id: int, contract_address: str) -> str:
    """Folder holding every metadata document of one contract, with trailing slash"""
    return (
        f"{base_url.rstrip('/')}/profiles/{owner_address.lower()}"
        f"/meta-data/{chain_id}/{contract_address.lower()}/"
    )


def build_metadata_url(
    base_url: str,
    owner_address: str,
    chain_id: int,
    contract_address: str,
    token_id: int,
) -> str:
    """Metadata document URL under the predictable profiles layout"""
    return f"{build_metadata_base_url(base_url, owner_address, chain_id, contract_address)}{token_id}.json"


class MetadataResolver:
    """Resolves metadata URLs and documents for token IDs"""

    def __init__(
        self,
        contract: ContractReader,
        http_client: MetadataClient,
        contract_address: str,
        strategy: MetadataUrlStrategy,
        ipfs_gateway: str = DEFAULT_IPFS_GATEWAY,
        on_loading_message: Optional[Callable[[str], None]] = None,
    ):
        self.contract = contract
        self.http_client = http_client
        self.contract_address = contract_address.lower()
        self.strategy = strategy
        self.ipfs_gateway = ipfs_gateway
        self.on_loading_message = on_loading_message

    async def resolve_urls(self, token_ids: Sequence[int]) -> List[Tuple[int, str]]:
        """Pair every token ID with its metadata document URL"""
        if isinstance(self.strategy, TemplatedMetadataUrl):
            return [
                (
                    token_id,
                    build_metadata_url(
                        self.strategy.base_url,
                        self.strategy.owner_address,
                        self.strategy.chain_id,
                        self.contract_address,
                        token_id,
                    ),
                )
                for token_id in token_ids
            ]

        if isinstance(self.strategy, OnChainMetadataUrl):
            started = time.monotonic()
            settled = await settle(list(token_ids), self.contract.token_uri)
            raise_hard_failures("tokenURI", settled)
            elapsed_ms = (time.monotonic() - started) * 1000
            logger.info(f"Added Meta Data fetch time reading tokenURI for {len(token_ids)} tokens: {elapsed_ms:.0f} ms")
            return [(token_id, convert_ipfs_to_http(uri, self.ipfs_gateway)) for token_id, uri in settled]

        raise TypeError(f"Unknown metadata URL strategy: {self.strategy!r}")

    async def _fetch_record(self, token_id: int, url: str) -> MetadataRecord:
        try:
            metadata = await self.http_client.get_json(url)
        except MetadataFetchError as e:
            logger.warning(f"Metadata unavailable for token {token_id}: {e}")
            metadata = None
        return MetadataRecord(token_id=token_id, metadata_url=url, metadata=metadata, private_data=None)

    async def get_token_metadata(self, token_ids: Sequence[int]) -> List[MetadataRecord]:
        """
        Fetch the metadata document of every token.

        A document that cannot be fetched leaves that record's metadata as
        None; the batch still succeeds. Records come back in the order of
        ``token_ids``.
        """
        if self.on_loading_message:
            self.on_loading_message(FETCHING_METADATA_MESSAGE)
        if not token_ids:
            return []

        urls = await self.resolve_urls(token_ids)
        # Each record carries its own token ID
        records = await asyncio.gather(*(self._fetch_record(token_id, url) for token_id, url in urls))
        return list(records)
