"""Retry backoff for REST APIs (Gamma). Backoff on 429 and 5xx."""

from __future__ import annotations

RETRY_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


def should_retry(status_code: int) -> bool:
    return status_code in RETRY_STATUS_CODES


def backoff_delay(retries: int, base_delay: float = 1.0, max_delay: float = 30.0) -> float:
    """Return delay in seconds before retry number `retries` (0-based). Exponential backoff."""
    return min(max_delay, base_delay * (2 ** retries))
