"""Aggregator: collapse candidates sharing a provider::product key.

The first candidate seen for a key is kept and later ones are dropped, even
when a later one carries more fields.
"""

from __future__ import annotations

from collections.abc import Iterable

from subscout.core.logging import get_logger
from subscout.extractor.models import SubscriptionCandidate

logger = get_logger(__name__)


def deduplicate(candidates: Iterable[SubscriptionCandidate]) -> list[SubscriptionCandidate]:
    """Keep the first candidate per dedup key, preserving input order."""
    grouped: dict[str, SubscriptionCandidate] = {}
    for candidate in candidates:
        key = candidate.dedup_key
        if key in grouped:
            logger.debug(
                "duplicate_candidate_dropped",
                key=key,
                kept=grouped[key].evidence.source_message_id,
                dropped=candidate.evidence.source_message_id,
            )
            continue
        grouped[key] = candidate
    return list(grouped.values())
