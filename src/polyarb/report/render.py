"""Text and JSON rendering of scan results.

The arbitrage text layout is parsed back by polyarb.alerts; keep these lines stable:

    1. UNDERBOOK - Edge: 21.00%
       Event: ...
       Total Probability: 79.00%
       Combined Volume: $12,345
       Markets:
         - <question>: 30.00%
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from polyarb.models import Market, MarketValue, Opportunity

NO_OPPORTUNITIES = "No arbitrage opportunities found."


def format_usd(amount: float) -> str:
    """Thousands separators, up to three decimals, no trailing zeros: 1234.5 -> 1,234.5."""
    text = f"{amount:,.3f}".rstrip("0").rstrip(".")
    return text or "0"


def render_opportunities_text(opportunities: Sequence[Opportunity], top: int = 10) -> str:
    if not opportunities:
        return NO_OPPORTUNITIES + "\n"
    lines = [f"🎯 Found {len(opportunities)} Arbitrage Opportunities", ""]
    for i, opp in enumerate(opportunities[:top], start=1):
        lines.append(f"{i}. {opp.type.value.upper()} - Edge: {opp.edge:.2f}%")
        lines.append(f"   Event: {opp.event_name}")
        lines.append(f"   Total Probability: {opp.total_prob:.2f}%")
        lines.append(f"   Combined Volume: ${format_usd(opp.volume_24h)}")
        lines.append("   Markets:")
        for m in opp.markets:
            lines.append(f"     - {m.question}: {m.yes_price * 100:.2f}%")
        lines.append("")
    return "\n".join(lines) + "\n"


def render_values_text(values: Sequence[MarketValue], top: int = 20) -> str:
    lines = ["💡 Opportunities", "", "(Sorted by Volume/Liquidity Ratio - higher = more tradeable)", ""]
    for i, v in enumerate(values[:top], start=1):
        lines.append(f"{i}. {v.title}")
        lines.append(f"   Category: {v.category or 'N/A'}{'  [range]' if v.is_range else ''}")
        lines.append(
            f"   YES: {v.yes_price:.4f} ({v.yes_prob:.2f}%) | NO: {v.no_price:.4f} ({v.no_prob:.2f}%)"
        )
        lines.append(f"   Spread: {v.spread:.2f}% | V/L Ratio: {v.volume_liquidity_ratio:.2f}")
        lines.append(f"   Volume: ${format_usd(v.volume_24h)} | Liquidity: ${format_usd(v.liquidity)}")
        lines.append(f"   Ends: {(v.end_date or 'N/A')[:10]}")
        lines.append("")
    return "\n".join(lines) + "\n"


def render_top_text(markets: Sequence[Market]) -> str:
    lines = ["🔥 Top Markets by 24h Volume", ""]
    for i, m in enumerate(markets, start=1):
        lines.append(f"{i}. {m.question}")
        lines.append(f"   Volume: ${format_usd(m.volume_24h)}")
        lines.append(f"   Liquidity: ${format_usd(m.liquidity)}")
        lines.append(f"   Category: {m.category or 'N/A'}")
        lines.append("")
    return "\n".join(lines) + "\n"


def opportunities_to_json(opportunities: Sequence[Opportunity]) -> str:
    """JSON array with camelCase keys; totalProb and edge as two-decimal strings."""
    return json.dumps(
        [o.model_dump(mode="json", by_alias=True) for o in opportunities],
        indent=2,
        ensure_ascii=False,
    )


def values_to_json(values: Sequence[MarketValue]) -> str:
    return json.dumps(
        [v.model_dump(mode="json", by_alias=True) for v in values],
        indent=2,
        ensure_ascii=False,
    )
