"""Candidate filter: decides which messages are worth extracting from.

A message passes only when it mentions a known brand, uses subscription
language and carries something that looks like money. Rejected messages
never reach the extractors.
"""

from __future__ import annotations

from collections.abc import Iterable

import regex

from subscout.extractor.text import safe_search

# A currency symbol, or a bare number followed by a currency code ("15 usd")
CURRENCY_TOKEN_PATTERN = regex.compile(
    r"\$|₦|€|£|\d{1,5}\s?(?:usd|ngn|eur|gbp)",
    regex.IGNORECASE,
)


def has_currency_token(text: str) -> bool:
    """True if text contains a currency symbol or a number tagged with a code."""
    return safe_search(CURRENCY_TOKEN_PATTERN, text) is not None


def rejection_reason(
    text: str,
    brands: Iterable[str],
    intent_keywords: Iterable[str],
) -> str | None:
    """Explain why a message fails the filter.

    Args:
        text: Message text (any case)
        brands: Known brand names, lower-case
        intent_keywords: Subscription-intent keywords, lower-case

    Returns:
        "no_brand", "no_intent_keyword" or "no_currency", or None if it passes
    """
    lowered = text.lower()
    if not any(brand in lowered for brand in brands):
        return "no_brand"
    if not any(keyword in lowered for keyword in intent_keywords):
        return "no_intent_keyword"
    if not has_currency_token(lowered):
        return "no_currency"
    return None


def passes_filter(
    text: str,
    brands: Iterable[str],
    intent_keywords: Iterable[str],
) -> bool:
    """True if the message should go through extraction."""
    return rejection_reason(text, brands, intent_keywords) is None
