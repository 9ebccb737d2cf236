"""
page_ranges.py - Page selection expressions.

Grammar (1-based, inclusive, whitespace-insensitive):
    expr := term (',' term)*
    term := INTEGER | INTEGER '-' INTEGER

Each side is read by its leading integer, so "2a" is 2 and "1.5" is 1.
A range term uses its first two '-' fields: "1-3-5" is 1-3.

Best-effort: malformed terms and out-of-range pages are dropped. The only
failure is an expression that selects nothing.
"""

import logging
import re
from typing import List, Optional, Set

from .exceptions import InvalidRangeError

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _parse_int(text: str) -> Optional[int]:
    match = _LEADING_INT.match(text)
    if match is None:
        return None
    return int(match.group(1))


def parse_ranges(expression: str, total_pages: int) -> List[int]:
    """
    Parse a page-range expression into zero-based page indices.

    Args:
        expression: Text such as "1-3, 5"
        total_pages: Page count of the document being selected from

    Returns:
        Ascending, deduplicated zero-based indices in [0, total_pages)

    Raises:
        InvalidRangeError: If no valid page remains after parsing
    """
    selected: Set[int] = set()

    for term in expression.split(","):
        if "-" in term:
            fields = term.split("-")
            start = _parse_int(fields[0])
            end = _parse_int(fields[1])
            if start is None or end is None:
                logger.debug(f"Dropping malformed range term: {term!r}")
                continue
            for page_num in range(start, end + 1):
                if 1 <= page_num <= total_pages:
                    selected.add(page_num - 1)
        else:
            page_num = _parse_int(term)
            if page_num is None:
                logger.debug(f"Dropping malformed page term: {term!r}")
                continue
            if 1 <= page_num <= total_pages:
                selected.add(page_num - 1)

    if not selected:
        raise InvalidRangeError(
            f"Invalid page range {expression!r} for a {total_pages}-page document"
        )

    return sorted(selected)
