"""Chain and HTTP clients"""

from .base import BaseAPIClient
from .contract import ContractReader, JsonRpcContractClient
from .metadata import MetadataClient

__all__ = ["BaseAPIClient", "ContractReader", "JsonRpcContractClient", "MetadataClient"]
