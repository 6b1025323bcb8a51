"""Resolve a page's index range into token IDs and their owners"""

import asyncio
from typing import Any, Awaitable, Callable, List, Sequence, Tuple

from loguru import logger

from .clients.contract import ContractReader
from .exceptions import InvalidTokenError, TokenFetchError
from .models import OwnershipRecord, PageIndexes
from .pagination import holder_index_window, token_id_window


async def settle(
    keys: Sequence[int],
    lookup: Callable[[int], Awaitable[Any]],
) -> List[Tuple[int, object]]:
    """Run one lookup per key concurrently and pair every outcome with its key"""
    outcomes = await asyncio.gather(*(lookup(key) for key in keys), return_exceptions=True)
    return list(zip(keys, outcomes))


def raise_hard_failures(kind: str, settled: List[Tuple[int, object]]) -> None:
    failures = [(key, outcome) for key, outcome in settled if isinstance(outcome, BaseException)]
    if not failures:
        return
    for key, error in failures:
        logger.error(f"Error fetching {kind} {key}: {error}")
    first_error = failures[0][1]
    raise TokenFetchError(
        f"{len(failures)} of {len(settled)} {kind} lookups failed: {first_error}",
        failed_keys=[key for key, _ in failures],
    ) from first_error


class TokenRangeFetcher:
    """Enumerates tokens for a page, either contract-wide or for one holder"""

    def __init__(self, contract: ContractReader):
        self.contract = contract

    async def fetch_all_tokens(self, indexes: PageIndexes, start_token_id: int) -> List[OwnershipRecord]:
        """
        Probe ownerOf for every candidate token ID in the page, highest first.

        Tokens that no longer exist are skipped. Any other lookup failure
        fails the page once every lookup has settled.
        """
        token_ids = list(token_id_window(indexes, start_token_id))

        async def probe(token_id: int) -> OwnershipRecord:
            try:
                owner = await self.contract.owner_of(token_id)
            except InvalidTokenError:
                logger.debug(f"Token {token_id} does not exist, skipping")
                return OwnershipRecord(token_id=token_id, owner=None)
            return OwnershipRecord(token_id=token_id, owner=owner)

        settled = await settle(token_ids, probe)
        raise_hard_failures("token", settled)

        records = [record for _, record in settled if record.owner is not None]
        skipped = len(token_ids) - len(records)
        if skipped:
            logger.info(f"Skipped {skipped} burned or unminted tokens in range {token_ids[-1]}-{token_ids[0]}")
        return records

    async def fetch_user_tokens(
        self,
        holder_address: str,
        indexes: PageIndexes,
        start_token_id: int,
    ) -> List[OwnershipRecord]:
        """Probe tokenOfOwnerByIndex for the holder's page, highest index first"""
        holder_address = holder_address.lower()
        local_indexes = list(holder_index_window(indexes, start_token_id))

        async def probe(index: int) -> OwnershipRecord:
            token_id = await self.contract.token_of_owner_by_index(holder_address, index)
            return OwnershipRecord(token_id=int(token_id), owner=holder_address)

        settled = await settle(local_indexes, probe)
        raise_hard_failures("holder index", settled)
        return [record for _, record in settled]
