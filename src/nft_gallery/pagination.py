"""Map a logical page and sort order onto a range of on-chain token indexes"""

import math
from typing import Optional

from .exceptions import ConfigurationError
from .models import PageIndexes


def calculate_page_indexes(
    page: Optional[int],
    balance: int,
    page_size: int,
    is_ascending: bool,
    start_token_id: int,
) -> PageIndexes:
    """
    Calculate the index range covered by ``page``.

    ``end_index`` is the highest token ID to probe (inclusive) when listing
    every token on a contract; for zero-based contracts it is pulled back by
    one so the last page does not overshoot the supply. Pages past
    ``last_page`` are not clamped: the caller decides what to do with them.

    Args:
        page: 1-based page number; falsy means the first page
        balance: holder balance or total supply
        page_size: items per page
        is_ascending: True for lowest token IDs first
        start_token_id: first token ID minted by the contract (0 or 1)

    Returns:
        PageIndexes with start_index, end_index and last_page
    """
    if page_size <= 0:
        raise ConfigurationError(f"page_size must be positive, got {page_size}")
    if balance < 0:
        raise ConfigurationError(f"balance cannot be negative, got {balance}")

    if not page:
        page = 1

    last_page = math.ceil(balance / page_size)

    if is_ascending:
        start_index = page_size * (page - 1)
        end_index = min(balance, page_size * page)
    else:
        start_index = max(0, balance - page_size * page)
        end_index = balance - page_size * (page - 1)

    if start_token_id == 0:
        end_index -= 1

    return PageIndexes(start_index=start_index, end_index=end_index, last_page=last_page)


def holder_index_window(indexes: PageIndexes, start_token_id: int) -> range:
    """Holder-local indexes for a page, walked from high to low"""
    last_index = indexes.end_index - start_token_id
    return range(last_index, indexes.start_index - 1, -1)


def token_id_window(indexes: PageIndexes, start_token_id: int) -> range:
    """Candidate token IDs for a page, walked from high to low"""
    return range(indexes.end_index, indexes.start_index + start_token_id - 1, -1)
