"""Gallery-specific exceptions."""


class GalleryError(Exception):
    """Base exception for NFT gallery operations."""
    pass


class ConfigurationError(GalleryError, ValueError):
    """Invalid settings detected before any network call."""
    pass


class ContractCallError(GalleryError):
    """A read-only contract call failed (transport or RPC error)."""

    def __init__(self, message: str, method: str = "", code=None):
        super().__init__(message)
        self.method = method
        self.code = code


class ContractRevertError(ContractCallError):
    """The contract call reverted."""
    pass


class InvalidTokenError(ContractRevertError):
    """The token ID does not exist (never minted or burned)."""

    def __init__(self, token_id: int, message: str = ""):
        super().__init__(message or f"Invalid token ID {token_id}", method="ownerOf")
        self.token_id = token_id


class TokenFetchError(GalleryError):
    """Ownership or index lookup failed, failing the whole page."""

    def __init__(self, message: str, failed_keys=None):
        super().__init__(message)
        self.failed_keys = list(failed_keys or [])


class MetadataFetchError(GalleryError):
    """A metadata document could not be fetched or parsed."""

    def __init__(self, url: str, message: str = ""):
        super().__init__(message or f"Failed to fetch metadata from {url}")
        self.url = url
