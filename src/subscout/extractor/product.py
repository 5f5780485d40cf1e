"""Product/plan extractor: the words following a plan or tier keyword."""

from __future__ import annotations

import regex

from subscout.extractor.text import safe_search

PRODUCT_PATTERN = regex.compile(
    r"(?:plan|subscription|membership|premium|pro|plus|monthly|annual)"
    r"[\s:]*(?P<label>[A-Za-z0-9 -]+)",
    regex.IGNORECASE,
)


def extract_product(text: str) -> str | None:
    """Return the plan label after the first tier keyword, if any.

    Keywords match anywhere, including inside longer words, so the label is
    a best guess. Only the first line of the capture is kept. A capture that
    is only whitespace yields "", which keys apart from a missing product.
    """
    match = safe_search(PRODUCT_PATTERN, text)
    if match is None:
        return None
    return match.group("label").strip().split("\n")[0]
