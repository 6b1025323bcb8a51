"""Merge ownership records with metadata into the tokens of one page"""

from typing import Dict, List, Sequence

from .metadata import MetadataResolver
from .models import GalleryToken, MetadataRecord, OwnershipRecord


def merge_tokens(
    ownership_records: Sequence[OwnershipRecord],
    metadata_records: Sequence[MetadataRecord],
) -> List[GalleryToken]:
    """
    Join metadata to ownership by token ID, in metadata order.

    A metadata record without a matching ownership record is kept with no
    owner.
    """
    owners: Dict[int, OwnershipRecord] = {record.token_id: record for record in ownership_records}
    tokens = []
    for metadata in metadata_records:
        ownership = owners.get(metadata.token_id)
        tokens.append(
            GalleryToken(
                **metadata.model_dump(),
                owner=ownership.owner if ownership else None,
            )
        )
    return tokens


class PageAssembler:
    """Builds the ordered token list of a page"""

    def __init__(self, resolver: MetadataResolver):
        self.resolver = resolver

    async def get_metadata_batch(
        self,
        ownership_records: Sequence[OwnershipRecord],
        is_ascending: bool,
    ) -> List[GalleryToken]:
        """
        Fetch metadata for live tokens and merge it with their owners.

        Burned tokens (no owner) are dropped before any metadata request.
        Ascending pages are sorted by token ID; descending pages keep the
        fetch order, which is already highest first.
        """
        live_records = [record for record in ownership_records if record.owner is not None]
        token_ids = [record.token_id for record in live_records]

        metadata_records = await self.resolver.get_token_metadata(token_ids)
        tokens = merge_tokens(live_records, metadata_records)

        if is_ascending:
            tokens.sort(key=lambda token: token.token_id)
        return tokens
