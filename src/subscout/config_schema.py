"""Pydantic configuration schema for Subscout.

This module defines the configuration schema that mirrors config.yaml structure.
The extraction section is also what callers pass straight into
extract_subscriptions(), so keyword and provider lists can be tuned per
deployment (or per test) without touching the extractors.

Usage:
    from subscout.config_schema import AppConfig, ExtractionConfig

    config = AppConfig(**yaml_data)
    candidates = extract_subscriptions(messages, config.brands.names, config.extraction)
"""

from pydantic import BaseModel, Field, field_validator

# Current schema version - increment when adding new required fields
CURRENT_SCHEMA_VERSION = 1

DEFAULT_INTENT_KEYWORDS = [
    "subscription",
    "renewal",
    "renewed",
    "payment",
    "invoice",
    "charged",
    "billed",
    "receipt",
    "plan",
    "auto-renew",
    "membership",
]

# Order matters: the first provider found in a header or body wins.
DEFAULT_PROVIDERS = [
    "openai",
    "perplexity",
    "claude",
    "spotify",
    "youtube",
    "netflix",
    "stripe",
    "apple",
    "amazon",
]

DEFAULT_BILLING_CYCLE_DAYS = 30


def _normalize_terms(values: list[str], label: str) -> list[str]:
    """Lower-case and strip a list of match terms, rejecting blanks."""
    normalized = []
    for value in values:
        term = value.strip().lower()
        if not term:
            raise ValueError(f"{label} cannot contain blank entries")
        normalized.append(term)
    return normalized


class ExtractionConfig(BaseModel):
    """Heuristic extraction settings."""

    intent_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INTENT_KEYWORDS),
        description="Subscription-intent keywords; at least one must appear in a message",
    )
    providers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PROVIDERS),
        description="Provider enumeration, checked in order against From header then body",
    )
    billing_cycle_days: int = Field(
        default=DEFAULT_BILLING_CYCLE_DAYS,
        ge=1,
        le=366,
        description="Days added to the start date to project the next charge",
    )
    max_workers: int = Field(
        default=1,
        ge=1,
        le=32,
        description="Threads used for per-message extraction (1 = sequential)",
    )

    @field_validator("intent_keywords")
    @classmethod
    def validate_intent_keywords(cls, v: list[str]) -> list[str]:
        """Require at least one keyword and normalize case."""
        if not v:
            raise ValueError("At least one intent keyword is required")
        return _normalize_terms(v, "Intent keywords")

    @field_validator("providers")
    @classmethod
    def validate_providers(cls, v: list[str]) -> list[str]:
        """Require at least one provider, normalize case, reject the sentinel."""
        if not v:
            raise ValueError("At least one provider is required")
        providers = _normalize_terms(v, "Providers")
        if "unknown" in providers:
            raise ValueError("'unknown' is reserved for unmatched providers")
        return providers


class BrandsConfig(BaseModel):
    """Known subscription brand names used to gate candidate messages."""

    names: list[str] = Field(
        default_factory=list,
        description="Brand names matched as case-insensitive substrings",
    )

    @field_validator("names")
    @classmethod
    def validate_names(cls, v: list[str]) -> list[str]:
        """Normalize brand case and drop duplicates, keeping first-seen order."""
        return list(dict.fromkeys(_normalize_terms(v, "Brand names")))


class AppConfig(BaseModel):
    """Root configuration schema for Subscout.

    Every section has defaults, so an empty config.yaml is valid. Without any
    brand names, however, every message is rejected by the candidate filter.
    """

    schema_version: int = Field(
        default=CURRENT_SCHEMA_VERSION,
        ge=1,
        description="Config schema version for migration tracking",
    )
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    brands: BrandsConfig = Field(default_factory=BrandsConfig)
