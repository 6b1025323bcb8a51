"""Utility functions for address validation and URL handling"""

import re
import time
from typing import Optional, Tuple
from eth_utils import is_address, to_checksum_address
from loguru import logger

from .exceptions import ConfigurationError

ADDRESS_PATTERN = re.compile(r'^0x[a-fA-F0-9]{40}$')


def validate_ethereum_address(address: str) -> Tuple[bool, Optional[str]]:
    """
    Validate Ethereum address format

    Returns:
        (is_valid, checksum_address or None)
    """
    if not address or not isinstance(address, str):
        return False, None

    address = address.strip()

    if not ADDRESS_PATTERN.match(address):
        return False, None

    try:
        if is_address(address):
            return True, to_checksum_address(address)
    except ValueError as e:
        logger.debug(f"Address validation error: {e}")
    return False, None


def require_address(address: Optional[str], label: str) -> str:
    """
    Validate an address and return it lower-cased

    Raises:
        ConfigurationError: missing or malformed address
    """
    if not address:
        raise ConfigurationError(f"{label} is required")
    is_valid, _ = validate_ethereum_address(address)
    if not is_valid:
        raise ConfigurationError(f"{label} is not a valid address: {address}")
    return address.strip().lower()


def convert_ipfs_to_http(uri: str, gateway: str) -> str:
    """Convert an ipfs:// URI (or bare CID path) to an HTTP gateway URL"""
    if uri.startswith(("http://", "https://")):
        return uri

    gateway = gateway if gateway.endswith("/") else gateway + "/"

    if uri.startswith("ipfs://"):
        ipfs_path = uri[len("ipfs://"):].lstrip("/")
        if ipfs_path.startswith("ipfs/"):
            ipfs_path = ipfs_path[len("ipfs/"):]
        return f"{gateway}{ipfs_path}"

    if uri.startswith("Qm") and len(uri.split("/")[0]) > 40:
        return f"{gateway}{uri}"

    return uri


def current_millis() -> int:
    """Current Unix time in milliseconds"""
    return int(time.time() * 1000)


def cache_busted(url: str, stamp: Optional[int] = None) -> str:
    """Append a ``v=<millis>`` query parameter to defeat intermediate caches"""
    stamp = current_millis() if stamp is None else stamp
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}v={stamp}"
