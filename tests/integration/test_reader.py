"""Integration tests for the NFT reader: full page pipeline over a fake contract."""
from __future__ import annotations

import pytest

from fakes import (
    CONTRACT,
    CONTRACT_OWNER,
    HOLDER,
    HOLDER_TOKEN_IDS,
    FakeContract,
    FakeMetadataClient,
    alternating_owners,
    network_error,
)
from nft_gallery.clients.contract import JsonRpcContractClient
from nft_gallery.config import Config
from nft_gallery.exceptions import ConfigurationError, TokenFetchError
from nft_gallery.metadata import FETCHING_METADATA_MESSAGE
from nft_gallery.models import OnChainMetadataUrl, TemplatedMetadataUrl
from nft_gallery.reader import CONNECTING_MESSAGE, EvmNftReader


class TestGetNfts:
    @pytest.mark.asyncio
    async def test_zero_based_ascending_first_page(self, make_reader, zero_based_contract: FakeContract) -> None:
        reader = make_reader(zero_based_contract)

        result = await reader.get_nfts(1, is_ascending=True)

        assert [t.token_id for t in result.tokens] == [0, 1, 2, 3, 4]
        assert all(t.owner and t.metadata for t in result.tokens)
        assert result.page_size == 5
        assert result.count == 10
        assert result.number_of_pages == 2

    @pytest.mark.asyncio
    async def test_zero_based_descending_first_page(self, make_reader, zero_based_contract: FakeContract) -> None:
        result = await make_reader(zero_based_contract).get_nfts(1, is_ascending=False)
        assert [t.token_id for t in result.tokens] == [9, 8, 7, 6, 5]

    @pytest.mark.asyncio
    async def test_one_based_descending_single_page(self, make_reader, one_based_contract: FakeContract) -> None:
        result = await make_reader(one_based_contract, page_size=6).get_nfts(1, is_ascending=False)
        assert [t.token_id for t in result.tokens] == [6, 5, 4, 3, 2, 1]

    @pytest.mark.asyncio
    async def test_holder_second_page(self, make_reader, holder_contract: FakeContract) -> None:
        reader = make_reader(holder_contract, holder=HOLDER)

        result = await reader.get_nfts(2, is_ascending=True)

        assert [t.token_id for t in result.tokens] == sorted(HOLDER_TOKEN_IDS[5:10])
        assert {t.owner for t in result.tokens} == {HOLDER}
        assert result.count == 10
        assert holder_contract.count("totalSupply") == 0
        assert holder_contract.count("balanceOf") == 1

    @pytest.mark.asyncio
    async def test_burned_token_shrinks_page(self, make_reader) -> None:
        owners = alternating_owners(range(10))
        del owners[2]
        contract = FakeContract(owners, supply=10)

        result = await make_reader(contract).get_nfts(1, is_ascending=True)

        assert [t.token_id for t in result.tokens] == [0, 1, 3, 4]

    @pytest.mark.asyncio
    async def test_metadata_failure_keeps_page(self, make_reader, zero_based_contract: FakeContract) -> None:
        client = FakeMetadataClient(failing={"/3.json"})

        result = await make_reader(zero_based_contract, client=client).get_nfts(1, is_ascending=True)

        assert len(result.tokens) == 5
        assert [t.token_id for t in result.tokens if t.metadata is None] == [3]

    @pytest.mark.asyncio
    async def test_hard_failure_propagates(self, make_reader) -> None:
        contract = FakeContract(alternating_owners(range(10)), owner_errors={4: network_error()})

        with pytest.raises(TokenFetchError):
            await make_reader(contract).get_nfts(1, is_ascending=True)

    @pytest.mark.asyncio
    async def test_empty_contract(self, make_reader) -> None:
        result = await make_reader(FakeContract({})).get_nfts(1, is_ascending=True)
        assert result.tokens == []
        assert result.number_of_pages == 0

    @pytest.mark.asyncio
    async def test_on_chain_metadata(self, make_reader, one_based_contract: FakeContract) -> None:
        result = await make_reader(one_based_contract, on_chain=True).get_nfts(1, is_ascending=True)

        assert [t.metadata_url for t in result.tokens] == [
            f"https://meta.example.com/{i}.json" for i in range(1, 6)
        ]
        assert one_based_contract.count("tokenURI") == 5


class TestStartTokenProbe:
    @pytest.mark.asyncio
    async def test_probed_once(self, make_reader, zero_based_contract: FakeContract) -> None:
        reader = make_reader(zero_based_contract)

        assert await reader.detect_start_token_id() == 0
        await reader.get_nfts(1, True)
        await reader.get_nfts(2, True)

        probes = [call for call in zero_based_contract.calls if call == ("ownerOf", 0)]
        # one probe plus the single fetch of token 0 on page 1
        assert len(probes) == 2

    @pytest.mark.asyncio
    async def test_probe_error_means_one_based(self, make_reader) -> None:
        contract = FakeContract(alternating_owners(range(10)), owner_errors={0: network_error()})
        assert await make_reader(contract).detect_start_token_id() == 1


class TestLoadingMessages:
    @pytest.mark.asyncio
    async def test_stages_reported(self, metadata_client, templated_strategy, zero_based_contract) -> None:
        messages = []
        reader = EvmNftReader(
            5,
            zero_based_contract,
            metadata_client,
            CONTRACT,
            metadata_strategy=templated_strategy,
            on_loading_message=messages.append,
        )

        await reader.get_nfts(1, True)

        assert messages == [CONNECTING_MESSAGE, FETCHING_METADATA_MESSAGE]
        assert reader.loading_message == FETCHING_METADATA_MESSAGE


class TestConstruction:
    @pytest.mark.parametrize("page_size", [0, -1, "5"])
    def test_rejects_bad_page_size(self, page_size, metadata_client, zero_based_contract) -> None:
        with pytest.raises(ConfigurationError):
            EvmNftReader(page_size, zero_based_contract, metadata_client, CONTRACT)

    def test_rejects_bad_addresses(self, metadata_client, zero_based_contract) -> None:
        with pytest.raises(ConfigurationError):
            EvmNftReader(5, zero_based_contract, metadata_client, "0xnope")
        with pytest.raises(ConfigurationError):
            EvmNftReader(5, zero_based_contract, metadata_client, CONTRACT, holder_address="0x12")
        with pytest.raises(ConfigurationError):
            EvmNftReader(
                5,
                zero_based_contract,
                metadata_client,
                CONTRACT,
                metadata_strategy=TemplatedMetadataUrl(base_url="https://x", owner_address="bad", chain_id=1),
            )

    def test_defaults_to_on_chain_metadata(self, metadata_client, zero_based_contract) -> None:
        reader = EvmNftReader(5, zero_based_contract, metadata_client, CONTRACT.upper().replace("0X", "0x"))
        assert isinstance(reader.metadata_strategy, OnChainMetadataUrl)
        assert reader.contract_address == CONTRACT

    def test_from_config(self, metadata_client, zero_based_contract) -> None:
        config = Config(
            contract_address=CONTRACT,
            contract_owner_address=CONTRACT_OWNER,
            chain="fantom",
            items_per_page=8,
        )

        reader = EvmNftReader.from_config(config, contract=zero_based_contract, metadata_client=metadata_client)

        assert reader.page_size == 8
        assert isinstance(reader.metadata_strategy, TemplatedMetadataUrl)
        assert reader.metadata_strategy.chain_id == 250

    def test_from_config_uses_chain_fallback_endpoints(self, metadata_client) -> None:
        config = Config(
            contract_address=CONTRACT,
            chain="polygon",
            use_templated_metadata=False,
            extra_rpc_urls=["https://rpc.example.com"],
        )

        reader = EvmNftReader.from_config(config, metadata_client=metadata_client)

        assert isinstance(reader.contract, JsonRpcContractClient)
        assert reader.contract.endpoints == [
            "https://polygon.llamarpc.com",
            "https://polygon-rpc.com",
            "https://rpc.ankr.com/polygon",
            "https://1rpc.io/matic",
            "https://rpc.example.com",
        ]

    def test_from_config_explicit_rpc_skips_chain_fallbacks(self, metadata_client) -> None:
        config = Config(
            contract_address=CONTRACT,
            chain="polygon",
            rpc_url="https://node.example.com",
            use_templated_metadata=False,
        )

        reader = EvmNftReader.from_config(config, metadata_client=metadata_client)

        assert reader.contract.endpoints == ["https://node.example.com"]

    def test_from_config_validates(self) -> None:
        with pytest.raises(ConfigurationError):
            EvmNftReader.from_config(Config(contract_address=None))

    @pytest.mark.asyncio
    async def test_context_manager_closes_contract(self, make_reader, zero_based_contract) -> None:
        async with make_reader(zero_based_contract) as reader:
            assert await reader.get_token_owner(1)
        assert zero_based_contract.closed
