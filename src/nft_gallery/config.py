"""
Configuration management for NFT Gallery
"""

import os
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field
from pathlib import Path
from dotenv import load_dotenv

from .exceptions import ConfigurationError
from .models import Chain

# Load environment variables
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)

# Content host for metadata stored under the predictable profiles layout
DEFAULT_METADATA_BASE_URL = "https://nft.dah-services.com"
DEFAULT_IPFS_GATEWAY = "https://cloudflare-ipfs.com/ipfs/"


@dataclass(frozen=True)
class NativeCurrency:
    name: str
    symbol: str


@dataclass(frozen=True)
class ChainConfig:
    """Static facts about an EVM network"""
    chain_id: int
    name: str
    explorer_url: str
    native_currency: NativeCurrency
    public_rpc: str
    alt_public_rpc: Tuple[str, ...] = ()

    def token_url(self, contract_address: str, token_id: int) -> str:
        """Explorer page for a single token"""
        return f"{self.explorer_url}token/{contract_address}?a={token_id}"


BLOCKCHAINS: Dict[Chain, ChainConfig] = {
    Chain.AVALANCHE: ChainConfig(
        chain_id=43114,
        name="Avalanche",
        explorer_url="https://snowtrace.io/",
        native_currency=NativeCurrency("AVAX", "AVAX"),
        public_rpc="https://api.avax.network/ext/bc/C/rpc",
    ),
    Chain.ETHEREUM: ChainConfig(
        chain_id=1,
        name="Ethereum",
        explorer_url="https://etherscan.io/",
        native_currency=NativeCurrency("Ether", "ETH"),
        public_rpc="https://cloudflare-eth.com",
    ),
    Chain.FANTOM: ChainConfig(
        chain_id=250,
        name="Fantom",
        explorer_url="https://ftmscan.com/",
        native_currency=NativeCurrency("FTM", "FTM"),
        public_rpc="https://rpcapi.fantom.network",
    ),
    Chain.POLYGON: ChainConfig(
        chain_id=137,
        name="Polygon",
        explorer_url="https://polygonscan.com/",
        native_currency=NativeCurrency("POL", "POL"),
        public_rpc="https://polygon.llamarpc.com",
        # Batch size limit 8 on each of these
        alt_public_rpc=(
            "https://polygon-rpc.com",
            "https://rpc.ankr.com/polygon",
            "https://1rpc.io/matic",
        ),
    ),
}


def get_chain_config(chain) -> ChainConfig:
    """Look up a chain by enum, name alias, or numeric chain ID"""
    if isinstance(chain, int):
        for chain_config in BLOCKCHAINS.values():
            if chain_config.chain_id == chain:
                return chain_config
        raise ConfigurationError(f"Unknown chain ID: {chain}")
    try:
        chain_enum = chain if isinstance(chain, Chain) else Chain.from_string(chain)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
    return BLOCKCHAINS[chain_enum]


@dataclass
class Config:
    """Main configuration class"""

    # Contract settings
    contract_address: Optional[str] = None
    contract_owner_address: Optional[str] = None
    holder_address: Optional[str] = None  # None lists every token on the contract
    chain: str = "avalanche"
    rpc_url: Optional[str] = None

    # Metadata settings
    use_templated_metadata: bool = True
    metadata_base_url: str = DEFAULT_METADATA_BASE_URL
    ipfs_gateway: str = DEFAULT_IPFS_GATEWAY

    # Gallery settings
    items_per_page: int = 24
    is_ascending: bool = True
    collection_name: str = "nftSmartContract1"
    max_collections: int = 64

    # Request settings
    rate_limit: int = 50  # requests per second
    max_retries: int = 3
    timeout: int = 30

    log_level: str = "INFO"
    log_file: Optional[str] = None

    extra_rpc_urls: List[str] = field(default_factory=list)

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables"""

        def get_bool(key_name: str, default: bool) -> bool:
            value = os.getenv(key_name)
            if value is None or value == "":
                return default
            return value.strip().lower() in ("1", "true", "yes", "on")

        def get_list(key_name: str) -> List[str]:
            """Get multiple values (comma-separated)"""
            values = os.getenv(key_name, "")
            return [v.strip() for v in values.split(",") if v.strip()]

        return cls(
            contract_address=os.getenv("NFT_CONTRACT_ADDRESS"),
            contract_owner_address=os.getenv("NFT_CONTRACT_OWNER"),
            holder_address=os.getenv("NFT_HOLDER_ADDRESS") or None,
            chain=os.getenv("NFT_CHAIN", "avalanche"),
            rpc_url=os.getenv("NFT_RPC_URL") or None,
            use_templated_metadata=get_bool("NFT_FAST_METADATA", True),
            metadata_base_url=os.getenv("NFT_METADATA_BASE_URL", DEFAULT_METADATA_BASE_URL),
            ipfs_gateway=os.getenv("NFT_IPFS_GATEWAY", DEFAULT_IPFS_GATEWAY),
            items_per_page=int(os.getenv("NFT_ITEMS_PER_PAGE", "24")),
            is_ascending=get_bool("NFT_ASCENDING", True),
            collection_name=os.getenv("NFT_COLLECTION_NAME", "nftSmartContract1"),
            max_collections=int(os.getenv("NFT_MAX_COLLECTIONS", "64")),
            rate_limit=int(os.getenv("RATE_LIMIT", "50")),
            max_retries=int(os.getenv("MAX_RETRIES", "3")),
            timeout=int(os.getenv("TIMEOUT", "30")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE") or None,
            extra_rpc_urls=get_list("NFT_EXTRA_RPC_URLS"),
        )

    def get_chain_config(self) -> ChainConfig:
        """Get the registry entry for the configured chain"""
        return get_chain_config(self.chain)

    def get_rpc_urls(self) -> List[str]:
        """Endpoints to try in order: explicit or public RPC, chain fallbacks, then extras"""
        if self.rpc_url:
            return [self.rpc_url, *self.extra_rpc_urls]
        chain_config = self.get_chain_config()
        return [chain_config.public_rpc, *chain_config.alt_public_rpc, *self.extra_rpc_urls]

    def validate(self) -> None:
        """Fail fast on settings that would break every request"""
        if self.items_per_page <= 0:
            raise ConfigurationError(f"items_per_page must be positive, got {self.items_per_page}")
        if not self.contract_address:
            raise ConfigurationError("Contract address not configured")
        if self.use_templated_metadata and not self.contract_owner_address:
            raise ConfigurationError("Contract owner address is required for templated metadata URLs")
        if self.max_retries < 1:
            raise ConfigurationError("max_retries must be at least 1")
        self.get_chain_config()


# Global config instance
config = Config.from_env()
