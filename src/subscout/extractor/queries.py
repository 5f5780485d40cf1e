"""Mailbox search queries built from the brand list.

The mail-retrieval side runs one query per brand so that only messages
likely to pass the candidate filter are fetched at all.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

DEFAULT_LOOKBACK_DAYS = 365

FALLBACK_QUERY = "subject:(subscription OR invoice OR payment)"


def lookback_since(days: int = DEFAULT_LOOKBACK_DAYS, now: datetime | None = None) -> datetime:
    """Start of the search window, `days` before now (UTC)."""
    now = now or datetime.now(timezone.utc)
    return now - timedelta(days=days)


def build_search_queries(brands: Iterable[str], since: datetime) -> list[str]:
    """Build Gmail-style search queries, one per distinct brand.

    Args:
        brands: Brand names
        since: Only match messages received after this instant

    Returns:
        Query strings; a single subject-keyword query when there are no brands
    """
    after = f"after:{int(since.timestamp())}"
    names = dict.fromkeys(brand.strip() for brand in brands if brand.strip())
    if not names:
        return [f"{after} {FALLBACK_QUERY}"]
    return [f'{after} (subject:{name} OR from:{name} OR "{name}")' for name in names]
