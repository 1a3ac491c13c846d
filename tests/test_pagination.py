"""
Pagination contract: 1-based pages, max(1, floor(x)) coercion and
has_next_page = current_page * page_size < total_count.
"""
import math

import pytest

from src.pagination import PageRequest, coerce_positive, has_next_page


class TestCoercion:

    @pytest.mark.parametrize("raw, expected", [(0, 1), (-5, 1), (2.9, 2), (1, 1), (7, 7), (0.4, 1)])
    def test_floor_and_minimum(self, raw, expected):
        assert coerce_positive(raw, 10) == expected

    @pytest.mark.parametrize("raw", [None, True, "abc", math.nan, math.inf])
    def test_unusable_values_fall_back_to_default(self, raw):
        assert coerce_positive(raw, 6) == 6

    def test_numeric_strings_are_accepted(self):
        assert coerce_positive("3", 10) == 3


class TestPageRequest:

    def test_defaults(self):
        req = PageRequest.normalize(default_page_size=6)
        assert req.page == 1
        assert req.page_size == 6
        assert req.offset == 0

    def test_degenerate_input_still_valid(self):
        req = PageRequest.normalize(page=-2, page_size=0.5)
        assert req.page >= 1
        assert req.page_size >= 1

    def test_offset(self):
        assert PageRequest.normalize(page=3, page_size=10).offset == 20

    @pytest.mark.parametrize("page, size, total, expected", [
        (1, 10, 0, False),
        (1, 10, 10, False),
        (1, 10, 11, True),
        (2, 5, 11, True),
        (3, 5, 11, False),
    ])
    def test_has_next(self, page, size, total, expected):
        assert has_next_page(page, size, total) is expected
        assert PageRequest(page, size).has_next(total) is expected
