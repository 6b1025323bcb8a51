"""
Page-level NFT reads for one ERC-721 contract
"""

from typing import Callable, List, Optional, Sequence

from loguru import logger

from .assembler import PageAssembler
from .clients.contract import ContractReader, JsonRpcContractClient
from .clients.metadata import MetadataClient
from .config import Config, DEFAULT_IPFS_GATEWAY
from .exceptions import ConfigurationError
from .fetcher import TokenRangeFetcher
from .metadata import MetadataResolver
from .models import (
    GalleryToken,
    MetadataRecord,
    MetadataUrlStrategy,
    OnChainMetadataUrl,
    OwnershipRecord,
    PageResult,
    TemplatedMetadataUrl,
)
from .pagination import calculate_page_indexes
from .utils import require_address

CONNECTING_MESSAGE = "Connecting to Blockchain..."


class EvmNftReader:
    """
    Reads pages of NFTs, with owners and metadata, from one contract.

    With a holder address only that wallet's tokens are listed; without
    one every token on the contract is listed.
    """

    def __init__(
        self,
        page_size: int,
        contract: ContractReader,
        metadata_client: MetadataClient,
        contract_address: str,
        holder_address: Optional[str] = None,
        metadata_strategy: Optional[MetadataUrlStrategy] = None,
        ipfs_gateway: str = DEFAULT_IPFS_GATEWAY,
        on_loading_message: Optional[Callable[[str], None]] = None,
    ):
        if not isinstance(page_size, int) or page_size <= 0:
            raise ConfigurationError(f"page_size must be a positive integer, got {page_size!r}")

        self.page_size = page_size
        self.contract = contract
        self.metadata_client = metadata_client
        self.contract_address = require_address(contract_address, "Contract address")
        self.holder_address = require_address(holder_address, "Holder address") if holder_address else None
        self.metadata_strategy = metadata_strategy or OnChainMetadataUrl()
        if isinstance(self.metadata_strategy, TemplatedMetadataUrl):
            owner = require_address(self.metadata_strategy.owner_address, "Contract owner address")
            self.metadata_strategy = self.metadata_strategy.model_copy(update={"owner_address": owner})

        self.on_loading_message = on_loading_message
        self.loading_message = ""
        self._start_token_id: Optional[int] = None

        self.fetcher = TokenRangeFetcher(contract)
        self.resolver = MetadataResolver(
            contract,
            metadata_client,
            self.contract_address,
            self.metadata_strategy,
            ipfs_gateway=ipfs_gateway,
            on_loading_message=self._set_loading_message,
        )
        self.assembler = PageAssembler(self.resolver)

    @classmethod
    def from_config(
        cls,
        config: Config,
        contract: Optional[ContractReader] = None,
        metadata_client: Optional[MetadataClient] = None,
        on_loading_message: Optional[Callable[[str], None]] = None,
    ) -> "EvmNftReader":
        """Build a reader, and its clients when not supplied, from settings"""
        config.validate()
        if contract is None:
            contract = JsonRpcContractClient(
                config.get_rpc_urls(),
                config.contract_address,
                rate_limit=config.rate_limit,
                timeout=config.timeout,
                max_retries=config.max_retries,
            )
        if metadata_client is None:
            metadata_client = MetadataClient(
                rate_limit=config.rate_limit,
                timeout=config.timeout,
                max_retries=config.max_retries,
            )

        strategy: MetadataUrlStrategy
        if config.use_templated_metadata:
            strategy = TemplatedMetadataUrl(
                base_url=config.metadata_base_url,
                owner_address=config.contract_owner_address,
                chain_id=config.get_chain_config().chain_id,
            )
        else:
            strategy = OnChainMetadataUrl()

        return cls(
            config.items_per_page,
            contract,
            metadata_client,
            config.contract_address,
            holder_address=config.holder_address,
            metadata_strategy=strategy,
            ipfs_gateway=config.ipfs_gateway,
            on_loading_message=on_loading_message,
        )

    def _set_loading_message(self, message: str) -> None:
        self.loading_message = message
        if self.on_loading_message:
            self.on_loading_message(message)

    async def detect_start_token_id(self) -> int:
        """
        Guess whether token IDs start at 0 or 1 by probing ownerOf(0).

        The answer is kept for the lifetime of the reader. Any probe error,
        including a transient network failure, reads as a one-based contract.
        """
        if self._start_token_id is None:
            try:
                await self.contract.owner_of(0)
                self._start_token_id = 0
            except Exception as e:
                logger.debug(f"ownerOf(0) failed ({e}), assuming token IDs start at 1")
                self._start_token_id = 1
            logger.info(f"Contract {self.contract_address} token IDs start at {self._start_token_id}")
        return self._start_token_id

    async def get_balance(self) -> int:
        """Holder balance, or total supply when listing the whole contract"""
        if self.holder_address:
            return int(await self.contract.balance_of(self.holder_address))
        return int(await self.contract.total_supply())

    async def get_nfts(self, page: Optional[int], is_ascending: bool) -> PageResult:
        """
        Get a page of NFTs with metadata in the given order.

        Raises:
            TokenFetchError: an ownership or index lookup failed
            ContractCallError: the balance or supply could not be read
        """
        self._set_loading_message(CONNECTING_MESSAGE)
        start_token_id = await self.detect_start_token_id()
        balance = await self.get_balance()

        indexes = calculate_page_indexes(page, balance, self.page_size, is_ascending, start_token_id)
        logger.debug(
            f"Page {page or 1}/{indexes.last_page} of {self.contract_address}: "
            f"indexes {indexes.start_index}-{indexes.end_index}, ascending={is_ascending}"
        )

        if self.holder_address:
            records = await self.fetcher.fetch_user_tokens(self.holder_address, indexes, start_token_id)
        else:
            records = await self.fetcher.fetch_all_tokens(indexes, start_token_id)

        tokens = await self.get_metadata_batch(records, is_ascending)
        return PageResult(tokens=tokens, page_size=self.page_size, count=balance)

    async def get_metadata_batch(
        self,
        ownership_records: Sequence[OwnershipRecord],
        is_ascending: bool,
    ) -> List[GalleryToken]:
        return await self.assembler.get_metadata_batch(ownership_records, is_ascending)

    async def get_token_metadata(self, token_ids: Sequence[int]) -> List[MetadataRecord]:
        return await self.resolver.get_token_metadata(token_ids)

    async def get_token_owner(self, token_id: int) -> str:
        """Get the wallet address holding a token"""
        try:
            return await self.contract.owner_of(token_id)
        except Exception as e:
            logger.error(f"Error fetching token with ID {token_id}: {e}")
            raise

    async def close(self) -> None:
        await self.contract.close()

    async def __aenter__(self) -> "EvmNftReader":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
