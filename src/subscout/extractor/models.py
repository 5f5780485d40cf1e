"""Data types flowing through the extraction pipeline.

InputMessage is what the mail-retrieval collaborator hands in; it is already
decoded to readable text. SubscriptionCandidate is the only thing the
pipeline hands out.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from subscout.core.errors import InvalidInputError
from subscout.extractor.text import compose_text

UNKNOWN_PROVIDER = "unknown"

# Stands in for a missing product when building dedup keys
UNKNOWN_PRODUCT = "unknown"

TEXT_KEYS = ("text", "subject", "snippet", "body", "body_html")


@dataclass(frozen=True, slots=True)
class Header:
    """A single message header."""

    name: str
    value: str


@dataclass(frozen=True, slots=True)
class InputMessage:
    """A decoded message ready for extraction.

    Attributes:
        id: Message ID assigned by the mail provider
        text: Subject, snippet and body concatenated into one blob
        headers: Headers in their original order
    """

    id: str
    text: str
    headers: tuple[Header, ...] = ()
    _header_index: dict[str, str] = field(
        init=False, repr=False, compare=False, hash=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        # Case-insensitive lookup; the first header with a given name wins.
        index: dict[str, str] = {}
        for header in self.headers:
            index.setdefault(header.name.lower(), header.value)
        object.__setattr__(self, "_header_index", index)

    def header(self, name: str) -> str | None:
        """Return the value of the first header called name (case-insensitive)."""
        return self._header_index.get(name.lower())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InputMessage:
        """Build a message from a JSON-like mapping.

        Accepted keys:
            id: required
            text: full text blob; when present the parts below are ignored
            subject, snippet, body: plain-text parts joined with newlines
            body_html: HTML body, stripped of tags (used when body is absent)
            headers: list of {"name", "value"} mappings or a {name: value} mapping
            payload.headers: Gmail API layout, used when headers is absent

        Raises:
            InvalidInputError: If id is missing, a text part is not a string,
                or headers/payload are malformed
        """
        message_id = data.get("id")
        if not message_id:
            raise InvalidInputError("Message mapping has no 'id'")

        for key in TEXT_KEYS:
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise InvalidInputError(
                    f"Message field '{key}' must be a string, got {type(value).__name__}"
                )

        text = data.get("text")
        if text is None:
            body = data.get("body")
            is_html = not body and bool(data.get("body_html"))
            text = compose_text(
                data.get("subject"),
                data.get("snippet"),
                body or data.get("body_html"),
                is_html=is_html,
            )

        raw_headers = data.get("headers")
        if raw_headers is None:
            payload = data.get("payload") or {}
            if not isinstance(payload, Mapping):
                raise InvalidInputError(
                    f"Message payload must be a mapping, got {type(payload).__name__}"
                )
            raw_headers = payload.get("headers", [])

        return cls(id=str(message_id), text=str(text), headers=_parse_headers(raw_headers))


def _parse_headers(raw: Any) -> tuple[Header, ...]:
    if isinstance(raw, Mapping):
        return tuple(Header(name=str(k), value=str(v)) for k, v in raw.items())

    if not isinstance(raw, (list, tuple)):
        raise InvalidInputError(f"Headers must be a list or mapping, got {type(raw).__name__}")

    headers = []
    for item in raw:
        if not isinstance(item, Mapping) or "name" not in item:
            raise InvalidInputError(f"Header entry must have a 'name': {item!r}")
        headers.append(Header(name=str(item["name"]), value=str(item.get("value") or "")))
    return tuple(headers)


@dataclass(frozen=True, slots=True)
class Evidence:
    """Where a candidate came from, kept for audit and downstream merges."""

    source_message_id: str
    raw_text: str


@dataclass(frozen=True, slots=True)
class SubscriptionCandidate:
    """An unconfirmed subscription inferred from a single message.

    Attributes:
        provider: Matched provider name, or "unknown"
        product: Plan label (first line, trimmed), if one was found
        amount: Charged amount; set together with currency
        currency: ISO 4217 code; set together with amount
        start_date: Date found in the message
        next_billing_date: Projected next charge (start + billing cycle)
        evidence: Source message ID and raw text
    """

    provider: str
    product: str | None
    amount: float | None
    currency: str | None
    start_date: date | None
    next_billing_date: date | None
    evidence: Evidence

    @property
    def dedup_key(self) -> str:
        """Key used to collapse duplicates: provider::product."""
        return f"{self.provider}::{UNKNOWN_PRODUCT if self.product is None else self.product}"

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable record for the persistence layer."""
        return {
            "provider": self.provider,
            "product": self.product,
            "amount": self.amount,
            "currency": self.currency,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "next_billing_date": (
                self.next_billing_date.isoformat() if self.next_billing_date else None
            ),
            "evidence": {
                "source_message_id": self.evidence.source_message_id,
                "raw_text": self.evidence.raw_text,
            },
        }
