"""Unit tests for page index calculation."""
from __future__ import annotations

import math

import pytest

from nft_gallery.exceptions import ConfigurationError
from nft_gallery.pagination import (
    calculate_page_indexes,
    holder_index_window,
    token_id_window,
)


class TestLastPage:
    @pytest.mark.parametrize("balance", [0, 1, 4, 5, 6, 10, 11, 99])
    @pytest.mark.parametrize("page_size", [1, 5, 24])
    def test_last_page_is_ceiling(self, balance: int, page_size: int) -> None:
        indexes = calculate_page_indexes(1, balance, page_size, True, 0)
        assert indexes.last_page == math.ceil(balance / page_size)
        assert (indexes.last_page == 0) == (balance == 0)


class TestAscending:
    def test_zero_based_first_page(self) -> None:
        indexes = calculate_page_indexes(1, 10, 5, True, 0)
        assert (indexes.start_index, indexes.end_index) == (0, 4)
        assert list(token_id_window(indexes, 0)) == [4, 3, 2, 1, 0]

    def test_zero_based_second_page(self) -> None:
        indexes = calculate_page_indexes(2, 10, 5, True, 0)
        assert sorted(token_id_window(indexes, 0)) == [5, 6, 7, 8, 9]

    def test_one_based_pages(self) -> None:
        first = calculate_page_indexes(1, 10, 5, True, 1)
        second = calculate_page_indexes(2, 10, 5, True, 1)
        assert sorted(token_id_window(first, 1)) == [1, 2, 3, 4, 5]
        assert sorted(token_id_window(second, 1)) == [6, 7, 8, 9, 10]

    def test_partial_last_page(self) -> None:
        indexes = calculate_page_indexes(3, 12, 5, True, 0)
        assert sorted(token_id_window(indexes, 0)) == [10, 11]

    @pytest.mark.parametrize("page", [None, 0])
    def test_falsy_page_defaults_to_first(self, page) -> None:
        assert calculate_page_indexes(page, 10, 5, True, 0) == calculate_page_indexes(1, 10, 5, True, 0)


class TestDescending:
    def test_one_based_single_page(self) -> None:
        indexes = calculate_page_indexes(1, 6, 6, False, 1)
        assert list(token_id_window(indexes, 1)) == [6, 5, 4, 3, 2, 1]

    def test_zero_based_first_page(self) -> None:
        indexes = calculate_page_indexes(1, 10, 5, False, 0)
        assert (indexes.start_index, indexes.end_index) == (5, 9)
        assert list(token_id_window(indexes, 0)) == [9, 8, 7, 6, 5]

    def test_partial_last_page_starts_at_zero(self) -> None:
        indexes = calculate_page_indexes(2, 7, 5, False, 0)
        assert indexes.start_index == 0
        assert list(token_id_window(indexes, 0)) == [1, 0]


class TestEdgeCases:
    @pytest.mark.parametrize("is_ascending", [True, False])
    @pytest.mark.parametrize("start_token_id", [0, 1])
    def test_empty_balance_gives_empty_range(self, is_ascending: bool, start_token_id: int) -> None:
        indexes = calculate_page_indexes(1, 0, 5, is_ascending, start_token_id)
        assert indexes.last_page == 0
        assert list(token_id_window(indexes, start_token_id)) == []
        assert list(holder_index_window(indexes, start_token_id)) == []

    @pytest.mark.parametrize("is_ascending", [True, False])
    def test_page_past_the_end_is_not_clamped(self, is_ascending: bool) -> None:
        indexes = calculate_page_indexes(5, 10, 5, is_ascending, 0)
        assert indexes.last_page == 2
        assert list(token_id_window(indexes, 0)) == []

    @pytest.mark.parametrize("page_size", [0, -3])
    def test_rejects_non_positive_page_size(self, page_size: int) -> None:
        with pytest.raises(ConfigurationError):
            calculate_page_indexes(1, 10, page_size, True, 0)

    def test_rejects_negative_balance(self) -> None:
        with pytest.raises(ConfigurationError):
            calculate_page_indexes(1, -1, 5, True, 0)


class TestHolderWindow:
    @pytest.mark.parametrize("start_token_id", [0, 1])
    def test_second_ascending_page(self, start_token_id: int) -> None:
        indexes = calculate_page_indexes(2, 10, 5, True, start_token_id)
        assert list(holder_index_window(indexes, start_token_id)) == [9, 8, 7, 6, 5]

    @pytest.mark.parametrize("start_token_id", [0, 1])
    def test_first_descending_page(self, start_token_id: int) -> None:
        indexes = calculate_page_indexes(1, 12, 5, False, start_token_id)
        assert list(holder_index_window(indexes, start_token_id)) == [11, 10, 9, 8, 7]
