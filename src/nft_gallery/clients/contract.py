"""ERC-721 contract reads over JSON-RPC eth_call"""

import asyncio
import itertools
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

import aiohttp
from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import decode_hex, encode_hex, function_signature_to_4byte_selector
from loguru import logger

from .base import BaseAPIClient
from ..exceptions import ContractCallError, ContractRevertError, InvalidTokenError

ZERO_ADDRESS = "0x" + "0" * 40

# JSON-RPC error code used by geth-compatible nodes for reverted calls
REVERT_ERROR_CODE = 3
REVERT_MARKERS = ("revert", "invalid token", "nonexistent token", "owner query for")


class ContractReader(ABC):
    """Read-only ERC-721 surface needed by the gallery"""

    @abstractmethod
    async def owner_of(self, token_id: int) -> str:
        """Owner of a token; raises InvalidTokenError for missing tokens"""
        pass

    @abstractmethod
    async def balance_of(self, address: str) -> int:
        """Number of tokens held by ``address``"""
        pass

    @abstractmethod
    async def total_supply(self) -> int:
        """Number of tokens in circulation"""
        pass

    @abstractmethod
    async def token_of_owner_by_index(self, owner: str, index: int) -> int:
        """Token ID at ``index`` in the owner's token list"""
        pass

    @abstractmethod
    async def token_uri(self, token_id: int) -> str:
        """Metadata URI for a token"""
        pass

    async def close(self) -> None:
        """Release any held resources"""
        pass


def _selector(signature: str) -> bytes:
    return function_signature_to_4byte_selector(signature)


OWNER_OF = ("ownerOf(uint256)", ["uint256"], ["address"])
BALANCE_OF = ("balanceOf(address)", ["address"], ["uint256"])
TOTAL_SUPPLY = ("totalSupply()", [], ["uint256"])
TOKEN_OF_OWNER_BY_INDEX = ("tokenOfOwnerByIndex(address,uint256)", ["address", "uint256"], ["uint256"])
TOKEN_URI = ("tokenURI(uint256)", ["uint256"], ["string"])


def encode_call(signature: str, arg_types: Sequence[str], args: Sequence[Any]) -> str:
    """ABI-encode a function call as 0x-prefixed calldata"""
    return encode_hex(_selector(signature) + encode(list(arg_types), list(args)))


def is_revert(error: dict) -> bool:
    """Whether a JSON-RPC error object describes a reverted call"""
    if error.get("code") == REVERT_ERROR_CODE:
        return True
    message = str(error.get("message", "")).lower()
    return any(marker in message for marker in REVERT_MARKERS)


class JsonRpcContractClient(BaseAPIClient, ContractReader):
    """ERC-721 reader that talks to an EVM node with eth_call"""

    def __init__(
        self,
        rpc_urls: List[str],
        contract_address: str,
        rate_limit: int = 50,
        timeout: int = 30,
        max_retries: int = 3,
        block: str = "latest",
        **kwargs: Any,
    ):
        if not rpc_urls:
            raise ValueError("At least one RPC URL is required")
        super().__init__(rpc_urls[0], rate_limit=rate_limit, timeout=timeout, max_retries=max_retries, **kwargs)
        self.endpoints = list(rpc_urls)
        self.current_rpc_index = 0
        self.contract_address = contract_address
        self.block = block
        self._ids = itertools.count(1)

    async def rpc_call(self, method: str, params: List[Any]) -> Any:
        """Make RPC call with fallback to alternative endpoints"""
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}

        last_error: Optional[Exception] = None
        for attempt in range(len(self.endpoints)):
            rpc_index = (self.current_rpc_index + attempt) % len(self.endpoints)
            rpc_url = self.endpoints[rpc_index]
            try:
                response = await self._request("POST", rpc_url, json_data=payload)
            except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                last_error = e
                logger.warning(f"RPC endpoint {rpc_url} failed: {e}")
                continue

            if rpc_index != self.current_rpc_index:
                logger.info(f"Switched to RPC endpoint: {rpc_url}")
                self.current_rpc_index = rpc_index

            if not isinstance(response, dict):
                raise ContractCallError(f"Malformed RPC response: {response!r}", method=method)
            error = response.get("error")
            if error:
                if is_revert(error):
                    raise ContractRevertError(
                        f"Execution reverted: {error.get('message')}",
                        method=method,
                        code=error.get("code"),
                    )
                raise ContractCallError(
                    f"RPC Error: {error.get('message')}",
                    method=method,
                    code=error.get("code"),
                )
            return response.get("result")

        raise ContractCallError(f"All RPC endpoints failed. Last error: {last_error}", method=method) from last_error

    async def call(self, function: tuple, *args: Any) -> Any:
        """Run a read-only contract function and decode its single return value"""
        signature, arg_types, return_types = function
        data = encode_call(signature, arg_types, args)
        result = await self.rpc_call("eth_call", [{"to": self.contract_address, "data": data}, self.block])

        if not result or result == "0x":
            # Empty return data means the call reverted without a reason
            raise ContractRevertError(f"{signature} returned no data", method=signature)
        try:
            return decode(list(return_types), decode_hex(result))[0]
        except (DecodingError, ValueError) as e:
            raise ContractCallError(f"Could not decode {signature} result: {e}", method=signature) from e

    async def owner_of(self, token_id: int) -> str:
        try:
            owner = await self.call(OWNER_OF, token_id)
        except ContractRevertError as e:
            raise InvalidTokenError(token_id, str(e)) from e
        if owner.lower() == ZERO_ADDRESS:
            raise InvalidTokenError(token_id, f"Token {token_id} is owned by the zero address")
        return owner

    async def balance_of(self, address: str) -> int:
        return int(await self.call(BALANCE_OF, address))

    async def total_supply(self) -> int:
        return int(await self.call(TOTAL_SUPPLY))

    async def token_of_owner_by_index(self, owner: str, index: int) -> int:
        return int(await self.call(TOKEN_OF_OWNER_BY_INDEX, owner, index))

    async def token_uri(self, token_id: int) -> str:
        return await self.call(TOKEN_URI, token_id)
