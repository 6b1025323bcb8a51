"""Shared test fixtures."""
from __future__ import annotations

from typing import Optional

import pytest

from fakes import (
    CONTRACT,
    CONTRACT_OWNER,
    HOLDER,
    HOLDER_TOKEN_IDS,
    METADATA_BASE,
    FakeContract,
    FakeMetadataClient,
    alternating_owners,
)
from nft_gallery.models import OnChainMetadataUrl, TemplatedMetadataUrl
from nft_gallery.reader import EvmNftReader
from nft_gallery.storage import MemoryCollectionStore


# ---------------------------------------------------------------------------
# Contract fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def zero_based_contract() -> FakeContract:
    """Ten tokens, IDs 0..9."""
    return FakeContract(alternating_owners(range(10)))


@pytest.fixture()
def one_based_contract() -> FakeContract:
    """Six tokens, IDs 1..6."""
    return FakeContract(alternating_owners(range(1, 7)))


@pytest.fixture()
def holder_contract() -> FakeContract:
    """Zero-based contract where HOLDER owns ten scattered tokens."""
    owners = alternating_owners(range(60))
    for token_id in HOLDER_TOKEN_IDS:
        owners[token_id] = HOLDER
    return FakeContract(owners, holder_tokens={HOLDER: HOLDER_TOKEN_IDS})


# ---------------------------------------------------------------------------
# Reader fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def metadata_client() -> FakeMetadataClient:
    return FakeMetadataClient()


@pytest.fixture()
def templated_strategy() -> TemplatedMetadataUrl:
    return TemplatedMetadataUrl(base_url=METADATA_BASE, owner_address=CONTRACT_OWNER, chain_id=43114)


@pytest.fixture()
def make_reader(metadata_client: FakeMetadataClient, templated_strategy: TemplatedMetadataUrl):
    """Build a reader over a fake contract."""

    def _make(
        contract: FakeContract,
        page_size: int = 5,
        holder: Optional[str] = None,
        on_chain: bool = False,
        client: Optional[FakeMetadataClient] = None,
    ) -> EvmNftReader:
        return EvmNftReader(
            page_size,
            contract,
            client or metadata_client,
            CONTRACT,
            holder_address=holder,
            metadata_strategy=OnChainMetadataUrl() if on_chain else templated_strategy,
        )

    return _make


@pytest.fixture()
def store() -> MemoryCollectionStore:
    return MemoryCollectionStore(max_collections=8)
