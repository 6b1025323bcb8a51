"""HTTP client for off-chain metadata documents"""

import asyncio
from typing import Any, Dict

import aiohttp

from .base import BaseAPIClient
from ..exceptions import MetadataFetchError
from ..utils import cache_busted


class MetadataClient(BaseAPIClient):
    """Fetches NFT metadata JSON documents"""

    def __init__(self, rate_limit: int = 50, timeout: int = 30, max_retries: int = 3, **kwargs: Any):
        super().__init__("", rate_limit=rate_limit, timeout=timeout, max_retries=max_retries, **kwargs)

    async def get_json(self, url: str, bust_cache: bool = True) -> Dict[str, Any]:
        """
        GET a metadata document.

        Raises:
            MetadataFetchError: network error, non-2xx status, invalid JSON,
                or a body that is not a JSON object
        """
        request_url = cache_busted(url) if bust_cache else url
        try:
            document = await self._request("GET", request_url)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise MetadataFetchError(url, f"Failed to fetch metadata from {url}: {e}") from e

        if not isinstance(document, dict):
            raise MetadataFetchError(url, f"Metadata at {url} is not a JSON object")
        return document
