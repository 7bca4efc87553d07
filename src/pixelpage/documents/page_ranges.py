"""Page-range parsing helpers.

Parsing is lenient: malformed or out-of-range tokens are logged and skipped.
Only an empty overall result is an error.
"""

from __future__ import annotations

import re

from pixelpage.exceptions import InvalidParameterError
from pixelpage.logging import get_logger

logger = get_logger(__name__)

_SINGLE = re.compile(r"^\d+$")
_RANGE = re.compile(r"^(\d+)\s*-\s*(\d+)$")
ALL_PAGES = "all"


def _tokens(spec: str) -> list[str]:
    return [token.strip() for token in spec.split(",") if token.strip()]


def _skip(token: str, reason: str, page_count: int) -> None:
    logger.warning("Skipping page range token", extra={"token": token, "reason": reason, "pages": page_count})


def parse_range_groups(spec: str, page_count: int) -> list[list[int]]:
    """Parse `"1-3,5,7-9"` into one group of 0-based page indices per token.

    A range token `N-M` must satisfy `1 <= N <= M <= page_count`; a single
    token `N` must satisfy `1 <= N <= page_count`. Groups keep token order and
    may overlap.

    Args:
        spec: Comma-separated list of `N` or `N-M` tokens (1-based, inclusive).
        page_count: Number of pages in the document.

    Raises:
        InvalidParameterError: If no token yields a valid group.

    Returns:
        list[list[int]]: Page index groups.
    """
    groups: list[list[int]] = []
    for token in _tokens(spec):
        if match := _RANGE.match(token):
            start, end = int(match.group(1)), int(match.group(2))
            if not 1 <= start <= end <= page_count:
                _skip(token, "range outside document", page_count)
                continue
            groups.append(list(range(start - 1, end)))
        elif _SINGLE.match(token):
            page = int(token)
            if not 1 <= page <= page_count:
                _skip(token, "page outside document", page_count)
                continue
            groups.append([page - 1])
        else:
            _skip(token, "malformed token", page_count)

    if not groups:
        raise InvalidParameterError(message=f"No valid page ranges in '{spec}'", field="ranges")
    return groups


def parse_page_selection(spec: str, page_count: int) -> list[int]:
    """Parse a selection into sorted, de-duplicated 1-based page numbers.

    `all` selects every page. Range ends beyond the page count are clipped.

    Args:
        spec: `all` or comma-separated `N` / `N-M` tokens.
        page_count: Number of pages in the document.

    Raises:
        InvalidParameterError: If nothing valid is selected.

    Returns:
        list[int]: Selected page numbers.
    """
    if spec.strip().lower() == ALL_PAGES:
        return list(range(1, page_count + 1))

    selected: set[int] = set()
    for token in _tokens(spec):
        if match := _RANGE.match(token):
            start, end = int(match.group(1)), int(match.group(2))
            pages = range(max(start, 1), min(end, page_count) + 1)
            if not pages:
                _skip(token, "range outside document", page_count)
            selected.update(pages)
        elif _SINGLE.match(token) and 1 <= int(token) <= page_count:
            selected.add(int(token))
        else:
            _skip(token, "malformed or out of range", page_count)

    if not selected:
        raise InvalidParameterError(message="No valid pages specified", field="pages")
    return sorted(selected)

