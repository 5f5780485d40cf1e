"""Monetary extractor: the first currency-tagged amount in a message.

Only the first numeric match counts. A message quoting both a list price and
a discounted price yields whichever comes first.
"""

from __future__ import annotations

from dataclasses import dataclass

import regex

from subscout.core.errors import FieldParseError
from subscout.core.logging import get_logger
from subscout.extractor.text import safe_search

logger = get_logger(__name__)

DEFAULT_CURRENCY = "USD"

CURRENCY_CODES = ("USD", "EUR", "NGN", "GBP")

MONEY_PATTERN = regex.compile(
    r"(?P<lead>USD|EUR|NGN|GBP|\$|€|₦|£)?\s?"
    r"(?P<number>[0-9]+(?:[.,][0-9]{1,2})?)"
    r"\s?(?P<trail>USD|EUR|NGN|GBP|€|₦|£)?",
    regex.IGNORECASE,
)

# Checked in order when the amount carries no explicit currency code
SYMBOL_CURRENCIES = (
    ("$", "USD"),
    ("€", "EUR"),
    ("₦", "NGN"),
)


@dataclass(frozen=True, slots=True)
class Money:
    """An amount and its currency, always produced together."""

    amount: float
    currency: str


def parse_amount(raw: str) -> float:
    """Parse a numeric token, treating a comma as the decimal separator.

    Raises:
        FieldParseError: If the token is not a number
    """
    try:
        return float(raw.replace(",", "."))
    except ValueError as e:
        raise FieldParseError(f"Not a number: {raw!r}", field="amount", raw=raw) from e


def infer_currency(text: str, explicit: str | None = None) -> str:
    """Pick the currency for an amount.

    An explicit code next to the amount wins. Otherwise the first symbol in
    SYMBOL_CURRENCIES present anywhere in the text decides, and with no
    symbol at all the result is USD.
    """
    if explicit:
        return explicit.upper()
    for symbol, code in SYMBOL_CURRENCIES:
        if symbol in text:
            return code
    return DEFAULT_CURRENCY


def _explicit_code(match: regex.Match) -> str | None:
    for marker in (match.group("lead"), match.group("trail")):
        if marker and marker.upper() in CURRENCY_CODES:
            return marker
    return None


def extract_amount(text: str) -> Money | None:
    """Find the first amount in text.

    Args:
        text: Raw message text (original case)

    Returns:
        Money, or None when no number is present or it cannot be parsed
    """
    match = safe_search(MONEY_PATTERN, text)
    if match is None:
        return None

    try:
        amount = parse_amount(match.group("number"))
    except FieldParseError as e:
        logger.debug("amount_parse_failed", raw=e.raw)
        return None

    return Money(amount=amount, currency=infer_currency(text, _explicit_code(match)))
