"""Read display values out of NFT metadata documents"""

from typing import Any, Dict, Optional

from .metadata import build_metadata_base_url, build_metadata_url


def get_public_attribute_value(metadata: Optional[Dict[str, Any]], attribute_name: str) -> Any:
    """
    Value of the attribute whose trait_type matches ``attribute_name``.

    The match ignores case. Missing documents, missing attributes and
    empty values all return None.
    """
    if not metadata:
        return None
    wanted = attribute_name.lower()
    for item in metadata.get("attributes") or []:
        if not isinstance(item, dict):
            continue
        trait_type = item.get("trait_type")
        if isinstance(trait_type, str) and trait_type.lower() == wanted:
            return item.get("value") or None
    return None


def attribute_value_or_image(metadata: Optional[Dict[str, Any]], attribute_name: str) -> Any:
    """Attribute value, falling back to the document's image"""
    value = get_public_attribute_value(metadata, attribute_name)
    if value:
        return value
    if not metadata:
        return None
    return metadata.get("image")


def get_image_large(metadata: Optional[Dict[str, Any]]) -> Optional[str]:
    return attribute_value_or_image(metadata, "url-large")


def get_image_medium(metadata: Optional[Dict[str, Any]]) -> Optional[str]:
    return attribute_value_or_image(metadata, "url-medium")


def get_nft_url(token_id: int, path: str) -> str:
    """Site-relative URL of a single NFT page"""
    return f"/{path.strip('/')}/{token_id}"


def metadata_base_url(base_url: str, wallet_address: str, chain_id: int, contract_address: str) -> str:
    return build_metadata_base_url(base_url, wallet_address, chain_id, contract_address)


def metadata_url(base_url: str, token_id: int, wallet_address: str, chain_id: int, contract_address: str) -> str:
    return build_metadata_url(base_url, wallet_address, chain_id, contract_address, token_id)
