"""Provider matcher.

The From header is checked first; the body is only scanned when the header
names no known provider.
"""

from __future__ import annotations

from collections.abc import Sequence

from subscout.core.logging import get_logger
from subscout.extractor.models import UNKNOWN_PROVIDER, InputMessage

logger = get_logger(__name__)


def _first_provider_in(haystack: str, providers: Sequence[str]) -> str | None:
    # Enumeration order, not alphabetical and not position in the text
    for provider in providers:
        if provider in haystack:
            return provider
    return None


def provider_from_headers(message: InputMessage, providers: Sequence[str]) -> str | None:
    """Match the From header against the provider list."""
    sender = (message.header("from") or "").lower()
    if not sender:
        return None
    return _first_provider_in(sender, providers)


def provider_from_text(text: str, providers: Sequence[str]) -> str | None:
    """Match the message text against the provider list."""
    return _first_provider_in(text.lower(), providers)


def match_provider(message: InputMessage, providers: Sequence[str]) -> str:
    """Resolve the provider for a message.

    Args:
        message: The input message
        providers: Provider names, lower-case, in priority order

    Returns:
        The matched provider, or "unknown"
    """
    provider = provider_from_headers(message, providers)
    if provider:
        return provider

    provider = provider_from_text(message.text, providers)
    if provider:
        logger.debug("provider_from_body", message_id=message.id, provider=provider)
        return provider

    return UNKNOWN_PROVIDER
