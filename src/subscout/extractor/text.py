"""Text helpers shared by the extractors.

All regex operations on message text go through the helpers here, which use
the `regex` library with a match-time timeout. Message bodies are untrusted
input, so a pathological body must never stall a batch (ReDoS).

Usage:
    from subscout.extractor.text import compose_text, safe_search

    text = compose_text(subject, snippet, body_html, is_html=True)
    match = safe_search(MONEY_PATTERN, text)
"""

from __future__ import annotations

import html

import regex

from subscout.core.logging import get_logger

logger = get_logger(__name__)

# Regex timeout in seconds (all match operations MUST use this)
REGEX_TIMEOUT = 1.0

HTML_TAG_PATTERN = regex.compile(r"<[^>]+>")


def _pattern_preview(pattern: regex.Pattern) -> str:
    return pattern.pattern[:50] if len(pattern.pattern) > 50 else pattern.pattern


def safe_search(pattern: regex.Pattern, text: str) -> regex.Match | None:
    """Search text with a timeout, treating a timeout as no match.

    Args:
        pattern: Compiled regex pattern
        text: Text to scan

    Returns:
        The first match, or None if there is none or the search timed out
    """
    try:
        return pattern.search(text, timeout=REGEX_TIMEOUT)
    except TimeoutError:
        logger.warning("Regex timeout during search", pattern=_pattern_preview(pattern))
        return None


def safe_sub(pattern: regex.Pattern, repl: str, text: str) -> tuple[str, bool]:
    """Safely perform regex substitution with timeout.

    Returns:
        Tuple of (result_text, was_modified); the input is returned unchanged on timeout
    """
    try:
        result = pattern.sub(repl, text, timeout=REGEX_TIMEOUT)
        return result, result != text
    except TimeoutError:
        logger.warning("Regex timeout during substitution", pattern=_pattern_preview(pattern))
        return text, False


def strip_html(text: str) -> str:
    """Replace HTML tags with spaces and decode entities (&amp; -> &)."""
    cleaned, _ = safe_sub(HTML_TAG_PATTERN, " ", text)
    return html.unescape(cleaned)


def compose_text(*parts: str | None, is_html: bool = False) -> str:
    """Join message parts (subject, snippet, body) into one text blob.

    Empty parts are skipped and the rest joined with newlines, the same
    shape mail retrieval produces when it appends the decoded body to the
    provider snippet.

    Args:
        parts: Text fragments in reading order (None is skipped)
        is_html: If True, the last part is treated as an HTML body and stripped

    Returns:
        The combined text
    """
    fragments = [part for part in parts if part]
    if is_html and fragments:
        fragments[-1] = strip_html(fragments[-1])
    return "\n".join(fragments)
