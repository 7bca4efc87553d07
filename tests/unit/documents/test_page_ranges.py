from __future__ import annotations

import pytest

from pixelpage.documents.page_ranges import parse_page_selection, parse_range_groups
from pixelpage.exceptions import InvalidParameterError


def test_range_groups_keep_token_order_and_skip_invalid_tokens() -> None:
    groups = parse_range_groups("1-3, 5, x, 9-2, 7, 2-2", page_count=6)

    assert groups == [[0, 1, 2], [4], [1]]


def test_range_groups_may_overlap() -> None:
    assert parse_range_groups("1-2,2-3", page_count=3) == [[0, 1], [1, 2]]


def test_range_groups_reject_ranges_past_the_end() -> None:
    assert parse_range_groups("1-9,2", page_count=4) == [[1]]


def test_range_groups_fail_when_nothing_is_valid() -> None:
    with pytest.raises(InvalidParameterError, match="No valid page ranges"):
        parse_range_groups("0, 8, a-b", page_count=3)


def test_selection_is_sorted_and_deduplicated() -> None:
    assert parse_page_selection("3,1-2,2,10", page_count=5) == [1, 2, 3]


def test_selection_clips_range_end() -> None:
    assert parse_page_selection("4-10", page_count=5) == [4, 5]


def test_selection_all_selects_every_page() -> None:
    assert parse_page_selection(" ALL ", page_count=3) == [1, 2, 3]


def test_selection_fails_when_empty() -> None:
    with pytest.raises(InvalidParameterError, match="No valid pages specified"):
        parse_page_selection("abc, 0", page_count=3)
