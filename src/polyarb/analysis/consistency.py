"""Consistency engine - probability-sum checks over grouped and paired markets.

Two strategies run over the denylist-filtered market set:

* grouped outcomes: markets sharing an event key are treated as mutually exclusive
  outcomes, so their YES prices should sum to ~100%;
* contradictions: two differently-worded markets that negate each other should
  also sum to ~100%. Only the under-100% direction is reported.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal

import structlog

from polyarb.analysis.grouping import filter_markets, group_by_event
from polyarb.models import MalformedPriceData, Market, Opportunity, OpportunityMarket, OpportunityType
from polyarb.models.opportunity import quantize_pct

log = structlog.get_logger(__name__)

HUNDRED = Decimal(100)
UNDERBOOK_THRESHOLD = Decimal(98)
OVERBOOK_THRESHOLD = Decimal(102)
INVERSE_OVERLAP = 0.5

NEGATIVE_MARKERS: tuple[str, ...] = ("not", "won't", "doesn't", "no ", "less than", "under")


def _priced(markets: Iterable[Market]) -> list[tuple[Market, Decimal]]:
    """Pair each market with its YES price, skipping malformed price data."""
    out = []
    for m in markets:
        try:
            out.append((m, m.yes_price()))
        except MalformedPriceData as e:
            log.debug("skip_market", slug=m.slug, reason=str(e))
    return out


def _total_pct(prices: Sequence[Decimal]) -> Decimal | None:
    """Sum of prices as a percentage, or None when any price is NaN or infinite."""
    if not all(p.is_finite() for p in prices):
        return None
    return sum(prices, Decimal(0)) * HUNDRED


def _members(priced: Sequence[tuple[Market, Decimal]]) -> list[OpportunityMarket]:
    return [OpportunityMarket(question=m.question, yes_price=float(p), slug=m.slug) for m, p in priced]


def _opportunity(
    kind: OpportunityType,
    event_name: str,
    priced: Sequence[tuple[Market, Decimal]],
    total: Decimal,
) -> Opportunity:
    return Opportunity(
        type=kind,
        event_name=event_name,
        markets=_members(priced),
        total_prob=quantize_pct(total),
        edge=quantize_pct(abs(HUNDRED - total)),
        volume_24h=sum(m.volume_24h for m, _ in priced),
    )


def find_group_mispricings(groups: Mapping[str, Sequence[Market]]) -> list[Opportunity]:
    """Underbook/overbook check for each event group with at least two priced members."""
    opportunities = []
    for event_name, members in groups.items():
        if len(members) < 2:
            continue
        priced = _priced(members)
        if len(priced) < 2:
            continue
        total = _total_pct([p for _, p in priced])
        if total is None:
            log.debug("skip_group", key=event_name, reason="non-finite total")
            continue
        if total < UNDERBOOK_THRESHOLD:
            opportunities.append(_opportunity(OpportunityType.UNDERBOOK, event_name, priced, total))
        elif total > OVERBOOK_THRESHOLD:
            opportunities.append(_opportunity(OpportunityType.OVERBOOK, event_name, priced, total))
    return opportunities


def has_negative_marker(question: str) -> bool:
    q = question.lower()
    return any(marker in q for marker in NEGATIVE_MARKERS)


def text_overlap(a: str, b: str) -> float:
    """Jaccard similarity of whitespace-separated token sets."""
    words_a = set(a.split())
    words_b = set(b.split())
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)


def are_inverse(q1: str, q2: str) -> bool:
    """True if exactly one question is negated and the two share most of their words."""
    if has_negative_marker(q1) == has_negative_marker(q2):
        return False
    return text_overlap(q1.lower(), q2.lower()) > INVERSE_OVERLAP


def find_contradictions(markets: Sequence[Market]) -> list[Opportunity]:
    """Pairwise search for inverse questions whose YES prices sum below 98%."""
    contradictions = []
    for i, m1 in enumerate(markets):
        for m2 in markets[i + 1 :]:
            if not are_inverse(m1.question, m2.question):
                continue
            priced = _priced((m1, m2))
            if len(priced) != 2:
                continue
            combined = _total_pct([p for _, p in priced])
            if combined is None:
                continue
            if combined < UNDERBOOK_THRESHOLD:
                contradictions.append(
                    _opportunity(
                        OpportunityType.CONTRADICTION,
                        f"{m1.question} vs {m2.question}",
                        priced,
                        combined,
                    )
                )
    return contradictions


def detect_arbitrage(markets: Iterable[Market]) -> list[Opportunity]:
    """Run both strategies on a market snapshot; return opportunities by descending edge."""
    markets = list(markets)
    for m in markets:
        if not isinstance(m, Market):
            raise TypeError(f"expected Market, got {type(m).__name__}")
    valid = filter_markets(markets)
    groups = group_by_event(valid)
    opportunities = find_group_mispricings(groups)
    opportunities.extend(find_contradictions(valid))
    # stable: equal edges keep detection order
    opportunities = sorted(opportunities, key=lambda o: o.edge, reverse=True)
    log.info(
        "scan_complete",
        markets=len(markets),
        excluded=len(markets) - len(valid),
        groups=len(groups),
        opportunities=len(opportunities),
    )
    return opportunities
