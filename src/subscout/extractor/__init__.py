"""Subscription extraction components.

This package turns decoded email text into subscription candidates:
- Candidate filter gating messages on brand, intent keyword and currency
- Provider, amount, date and product extractors
- Aggregator collapsing duplicates to the first-seen candidate
- Search query builder for the mail-retrieval side
"""

from subscout.extractor.aggregate import deduplicate
from subscout.extractor.candidate_filter import passes_filter, rejection_reason
from subscout.extractor.dates import BillingDates, extract_dates
from subscout.extractor.models import (
    Evidence,
    Header,
    InputMessage,
    SubscriptionCandidate,
)
from subscout.extractor.money import Money, extract_amount
from subscout.extractor.pipeline import extract_candidate, extract_subscriptions
from subscout.extractor.product import extract_product
from subscout.extractor.provider import match_provider
from subscout.extractor.queries import build_search_queries, lookback_since

__all__ = [
    # Pipeline
    "extract_candidate",
    "extract_subscriptions",
    # Models
    "Evidence",
    "Header",
    "InputMessage",
    "SubscriptionCandidate",
    # Filter and extractors
    "BillingDates",
    "Money",
    "extract_amount",
    "extract_dates",
    "extract_product",
    "match_provider",
    "passes_filter",
    "rejection_reason",
    # Aggregator
    "deduplicate",
    # Mailbox queries
    "build_search_queries",
    "lookback_since",
]
