"""Page-range expression parsing.

Turns user input like ``"1-5, 8, 10-12"`` into a sorted list of 1-based
page numbers. Parsing is forgiving: bad tokens are skipped, reversed spans
are dropped and out-of-bounds values are clipped, so malformed input
degrades to whatever valid tokens remain.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Set

from page_assembler.core.errors import EmptyRangeError

logger = logging.getLogger(__name__)

ALL_KEYWORD = "all"

_SPAN_RE = re.compile(r"^\s*(\d+)\s*-\s*(\d+)\s*$")
_SINGLE_RE = re.compile(r"^\s*(\d+)\s*$")


def parse_range(expression: Optional[str], maximum: int) -> List[int]:
    """Parse a page-range expression.

    Args:
        expression: Comma-separated integers and ``start-end`` spans, or
            ``"all"`` / empty for every page.
        maximum: Highest valid page number.

    Returns:
        Sorted unique page numbers in ``[1, maximum]``. Empty when no token
        is valid.

    Examples:
        >>> parse_range("all", 3)
        [1, 2, 3]
        >>> parse_range("0-3, 3, x", 5)
        [1, 2, 3]
        >>> parse_range("2-1", 5)
        []
    """
    if maximum <= 0:
        return []

    text = (expression or "").strip()
    if not text or text.lower() == ALL_KEYWORD:
        return list(range(1, maximum + 1))

    pages: Set[int] = set()
    for token in text.split(","):
        span = _SPAN_RE.match(token)
        if span:
            start, end = int(span.group(1)), int(span.group(2))
            if start > end:
                logger.debug(f"Dropping reversed span {token.strip()!r}")
                continue
            pages.update(range(max(1, start), min(maximum, end) + 1))
            continue

        single = _SINGLE_RE.match(token)
        if single:
            value = int(single.group(1))
            if 1 <= value <= maximum:
                pages.add(value)
            continue

        if token.strip():
            logger.debug(f"Ignoring unparsable range token {token.strip()!r}")

    return sorted(pages)


def require_range(expression: Optional[str], maximum: int) -> List[int]:
    """Parse a range and fail when it selects nothing.

    Raises:
        EmptyRangeError: If no valid page remains.
    """
    pages = parse_range(expression, maximum)
    if not pages:
        raise EmptyRangeError(expression or "", maximum)
    return pages
