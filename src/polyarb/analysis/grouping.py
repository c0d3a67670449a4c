"""Market grouping by event key, plus the false-positive denylist."""

from __future__ import annotations

import re
from collections.abc import Iterable

from polyarb.analysis.normalize import extract_event_key
from polyarb.models import Market

# Questions whose "outcomes" are not mutually exclusive (several acts can each perform).
EXCLUDE_KEYWORDS: tuple[str, ...] = (
    "perform",
    "halftime show",
    "headline",
    "lineup",
    "opening act",
    "surprise guest",
)

RANGE_KEYWORDS: tuple[str, ...] = (
    "less than",
    "more than",
    "greater than",
    "between",
    "under",
    "over",
)
_BUCKET_PAIR_RE = re.compile(r"\$\d+[bmt]-\$\d+[bmt]", re.IGNORECASE)


def should_exclude(question: str) -> bool:
    """Return True if the question matches the false-positive denylist."""
    q = question.lower()
    return any(keyword in q for keyword in EXCLUDE_KEYWORDS)


def filter_markets(markets: Iterable[Market]) -> list[Market]:
    """Drop denylisted markets, preserving order."""
    return [m for m in markets if not should_exclude(m.question)]


def is_range_market(question: str) -> bool:
    """Heuristic: range/bucket question (keywords or a $10b-$20b pair). Diagnostic only."""
    q = question.lower()
    if any(keyword in q for keyword in RANGE_KEYWORDS):
        return True
    return bool(_BUCKET_PAIR_RE.search(question))


def group_by_event(markets: Iterable[Market]) -> dict[str, list[Market]]:
    """Group markets by event key. Keys and members keep first-seen order."""
    groups: dict[str, list[Market]] = {}
    for market in markets:
        groups.setdefault(extract_event_key(market.question), []).append(market)
    return groups
