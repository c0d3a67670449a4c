"""Per-market value scan: implied probabilities, spread, volume/liquidity ratio."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from polyarb.analysis.grouping import is_range_market
from polyarb.models import MalformedPriceData, Market, MarketValue

log = structlog.get_logger(__name__)


def implied_probability(price: float) -> float:
    """Price in [0, 1] -> implied probability in percent."""
    return price * 100


def analyze_value(market: Market) -> MarketValue | None:
    """Summarize one market; None if its outcome prices are malformed or out of range."""
    try:
        yes, no = market.prices()
    except MalformedPriceData as e:
        log.debug("skip_market", slug=market.slug, reason=str(e))
        return None
    yes_price, no_price = float(yes), float(no)
    if not (0 <= yes_price <= 1 and 0 <= no_price <= 1):
        log.debug("skip_market", slug=market.slug, reason="price out of range")
        return None
    yes_prob = implied_probability(yes_price)
    no_prob = implied_probability(no_price)
    liquidity = market.liquidity if market.liquidity > 0 else 1.0
    volume = market.volume_24h
    return MarketValue(
        slug=market.slug,
        title=market.question,
        category=market.category,
        yes_price=yes_price,
        no_price=no_price,
        yes_prob=round(yes_prob, 2),
        no_prob=round(no_prob, 2),
        spread=round(abs(yes_prob + no_prob - 100), 2),
        volume_24h=volume,
        liquidity=liquidity,
        volume_liquidity_ratio=round(volume / liquidity, 2),
        end_date=market.end_date,
        is_range=is_range_market(market.question),
    )


def score_markets(markets: Iterable[Market]) -> list[MarketValue]:
    """Analyze markets and sort by volume/liquidity ratio (most tradeable first)."""
    analyzed = [v for v in (analyze_value(m) for m in markets) if v is not None]
    analyzed.sort(key=lambda v: v.volume_liquidity_ratio, reverse=True)
    return analyzed
