"""Extraction pipeline entry point.

Per message: filter -> provider, amount, dates, product -> candidate.
Per batch: candidates are reduced in input order by the aggregator, so the
result is the same whether messages are processed sequentially or on a
thread pool.

Usage:
    from subscout.extractor import extract_subscriptions

    candidates = extract_subscriptions(messages, ["netflix", "spotify"])
    for candidate in candidates:
        store.upsert(owner_id, candidate.to_dict())
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from contextvars import copy_context
from typing import Any

from subscout.config_schema import ExtractionConfig
from subscout.core.errors import InvalidInputError
from subscout.core.logging import get_batch_id, get_logger, set_batch_id
from subscout.extractor.aggregate import deduplicate
from subscout.extractor.candidate_filter import rejection_reason
from subscout.extractor.dates import extract_dates
from subscout.extractor.models import Evidence, InputMessage, SubscriptionCandidate
from subscout.extractor.money import extract_amount
from subscout.extractor.product import extract_product
from subscout.extractor.provider import match_provider

logger = get_logger(__name__)


def _coerce_batch(messages: Any) -> list[InputMessage]:
    """Validate the batch and convert mappings to InputMessage.

    Raises:
        InvalidInputError: If the batch or any item violates the input contract
    """
    if messages is None or isinstance(messages, (str, bytes, Mapping)):
        raise InvalidInputError(
            f"messages must be a sequence of messages, got {type(messages).__name__}"
        )
    try:
        items = list(messages)
    except TypeError as e:
        raise InvalidInputError(
            f"messages must be iterable, got {type(messages).__name__}"
        ) from e

    batch = []
    for index, item in enumerate(items):
        if isinstance(item, InputMessage):
            batch.append(item)
        elif isinstance(item, Mapping):
            try:
                batch.append(InputMessage.from_dict(item))
            except InvalidInputError as e:
                raise InvalidInputError(f"Message {index}: {e}", index=index) from e
        else:
            raise InvalidInputError(
                f"Message {index} must be an InputMessage or mapping, "
                f"got {type(item).__name__}",
                index=index,
            )
    return batch


def _coerce_brands(known_brands: Any) -> list[str]:
    if known_brands is None or isinstance(known_brands, (str, bytes)):
        raise InvalidInputError(
            f"known_brands must be a sequence of names, got {type(known_brands).__name__}"
        )
    try:
        return [str(brand).strip().lower() for brand in known_brands if str(brand).strip()]
    except TypeError as e:
        raise InvalidInputError(
            f"known_brands must be iterable, got {type(known_brands).__name__}"
        ) from e


def extract_candidate(
    message: InputMessage,
    brands: list[str],
    config: ExtractionConfig,
) -> SubscriptionCandidate | None:
    """Run the filter and all extractors on one message.

    Args:
        message: The decoded message
        brands: Known brand names, lower-case
        config: Extraction settings

    Returns:
        A candidate, or None if the message was rejected by the filter
    """
    reason = rejection_reason(message.text, brands, config.intent_keywords)
    if reason is not None:
        logger.debug("message_rejected", message_id=message.id, reason=reason)
        return None

    money = extract_amount(message.text)
    dates = extract_dates(message.text, config.billing_cycle_days)

    return SubscriptionCandidate(
        provider=match_provider(message, config.providers),
        product=extract_product(message.text),
        amount=money.amount if money else None,
        currency=money.currency if money else None,
        start_date=dates.start_date,
        next_billing_date=dates.next_billing_date,
        evidence=Evidence(source_message_id=message.id, raw_text=message.text),
    )


def _extract_all(
    batch: list[InputMessage],
    brands: list[str],
    config: ExtractionConfig,
) -> list[SubscriptionCandidate | None]:
    if config.max_workers <= 1 or len(batch) <= 1:
        return [extract_candidate(message, brands, config) for message in batch]

    # Worker threads don't inherit contextvars; give each task a copy so
    # logs keep the batch ID. Executor.map yields results in input order.
    contexts = [copy_context() for _ in batch]
    with ThreadPoolExecutor(max_workers=min(config.max_workers, len(batch))) as executor:
        return list(
            executor.map(
                lambda ctx, message: ctx.run(extract_candidate, message, brands, config),
                contexts,
                batch,
            )
        )


def extract_subscriptions(
    messages: Iterable[InputMessage | Mapping[str, Any]],
    known_brands: Iterable[str],
    config: ExtractionConfig | None = None,
) -> list[SubscriptionCandidate]:
    """Extract deduplicated subscription candidates from a batch of messages.

    Args:
        messages: Decoded messages (InputMessage or mappings for InputMessage.from_dict)
        known_brands: Brand names that gate candidate detection
        config: Extraction settings; defaults to ExtractionConfig()

    Returns:
        One candidate per provider::product key, first-seen order

    Raises:
        InvalidInputError: If messages or known_brands violate the input contract
    """
    config = config or ExtractionConfig()
    batch = _coerce_batch(messages)
    brands = _coerce_brands(known_brands)

    previous_batch_id = get_batch_id()
    set_batch_id(str(uuid.uuid4()))
    start = time.monotonic()
    try:
        extracted = _extract_all(batch, brands, config)
        accepted = [candidate for candidate in extracted if candidate is not None]
        candidates = deduplicate(accepted)

        logger.info(
            "extraction_complete",
            messages=len(batch),
            accepted=len(accepted),
            candidates=len(candidates),
            duration_ms=int((time.monotonic() - start) * 1000),
        )
        return candidates
    finally:
        set_batch_id(previous_batch_id)
