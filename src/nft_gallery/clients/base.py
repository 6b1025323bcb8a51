"""Base client with common functionality"""

import asyncio
import time
from typing import Dict, Any, Optional
import aiohttp
from tenacity import (
    AsyncRetrying,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception,
)
from loguru import logger

RETRYABLE_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


def is_retryable(exc: BaseException) -> bool:
    """Transport errors, 429 and 5xx are retried; other HTTP statuses are final"""
    if isinstance(exc, aiohttp.ClientResponseError):
        return exc.status == 429 or exc.status >= 500
    return isinstance(exc, RETRYABLE_ERRORS)


class BaseAPIClient:
    """Base class for HTTP clients with retry logic and rate limiting"""

    def __init__(
        self,
        base_url: str = "",
        rate_limit: int = 50,
        timeout: int = 30,
        max_retries: int = 3,
        retry_wait_min: float = 1.0,
        retry_wait_max: float = 10.0,
    ):
        self.base_url = base_url
        self.rate_limit = rate_limit
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_wait_min = retry_wait_min
        self.retry_wait_max = retry_wait_max
        self._rate_limiter_semaphore = asyncio.Semaphore(rate_limit)
        self._last_request_time = 0.0
        self._min_request_interval = 1.0 / rate_limit

    async def _apply_rate_limit(self):
        """Rate limiting"""
        async with self._rate_limiter_semaphore:
            current_time = time.time()
            time_since_last = current_time - self._last_request_time
            if time_since_last < self._min_request_interval:
                await asyncio.sleep(self._min_request_interval - time_since_last)
            self._last_request_time = time.time()

    def _build_url(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")) or not self.base_url:
            return endpoint
        return f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make HTTP request with retry logic, returning the decoded JSON body"""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=self.retry_wait_min, max=self.retry_wait_max),
            retry=retry_if_exception(is_retryable),
            reraise=True,
        ):
            with attempt:
                return await self._send(method, endpoint, params, json_data, headers)

    async def _send(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]],
        json_data: Optional[Any],
        headers: Optional[Dict[str, str]],
    ) -> Any:
        await self._apply_rate_limit()

        url = self._build_url(endpoint)

        default_headers = {"Accept": "application/json"}
        if json_data is not None:
            default_headers["Content-Type"] = "application/json"
        if headers:
            default_headers.update(headers)

        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout)) as session:
            try:
                async with session.request(
                    method=method,
                    url=url,
                    params=params,
                    json=json_data,
                    headers=default_headers,
                ) as response:
                    if response.status == 429:  # Rate limited
                        logger.warning(f"Rate limited by {url}")
                        raise aiohttp.ClientResponseError(
                            request_info=response.request_info,
                            history=response.history,
                            status=429,
                        )

                    response.raise_for_status()
                    # Metadata hosts often serve JSON as text/plain
                    return await response.json(content_type=None)
            except aiohttp.ClientError as e:
                logger.debug(f"Request to {url} failed: {e}")
                raise
