"""Heartbeat alerting - parse the arbitrage text report, select high-value rows, format a DM."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field

from polyarb.config import Settings

_HEADER_RE = re.compile(r"^\d+\. (UNDERBOOK|OVERBOOK|CONTRADICTION)\b")
_EDGE_RE = re.compile(r"Edge: ([\d.]+)%")
_PCT_RE = re.compile(r"([\d.]+)%")
_VOLUME_RE = re.compile(r"\$([\d,]+\.?\d*)")
_MARKET_RE = re.compile(r"^- (.+): ([\d.]+)%$")

MAX_QUESTION_CHARS = 60
MARKETS_SHOWN = 3


@dataclass(frozen=True)
class AlertConfig:
    """Alert thresholds and DM destination."""

    min_edge: float = 20.0
    min_volume: float = 10_000.0
    session_key: str = ""

    @classmethod
    def from_settings(cls, settings: Settings) -> AlertConfig:
        return cls(
            min_edge=settings.alert_min_edge,
            min_volume=settings.alert_min_volume,
            session_key=settings.alert_session_key,
        )


@dataclass
class ReportedMarket:
    question: str
    probability: float


@dataclass
class ReportedOpportunity:
    """One opportunity as recovered from the text report."""

    type: str
    edge: float = 0.0
    event: str = ""
    probability: float = 0.0
    volume: float = 0.0
    markets: list[ReportedMarket] = field(default_factory=list)


@dataclass
class HeartbeatResult:
    found: int
    alerts: list[ReportedOpportunity]
    message: str | None = None

    def notification(self, config: AlertConfig) -> str | None:
        """DM_NOTIFICATION line for the agent runtime, or None when nothing to send."""
        if self.message is None:
            return None
        payload = {"sessionKey": config.session_key, "message": self.message}
        return "DM_NOTIFICATION: " + json.dumps(payload, ensure_ascii=False)


def parse_report_text(text: str) -> list[ReportedOpportunity]:
    """Recover opportunities from render_opportunities_text output. Unknown lines are ignored."""
    opportunities: list[ReportedOpportunity] = []
    current: ReportedOpportunity | None = None
    for raw in text.splitlines():
        line = raw.strip()
        header = _HEADER_RE.match(raw)
        if header:
            edge = _EDGE_RE.search(raw)
            current = ReportedOpportunity(type=header.group(1), edge=float(edge.group(1)) if edge else 0.0)
            opportunities.append(current)
            continue
        if current is None:
            continue
        if line.startswith("Event:"):
            current.event = line[len("Event:"):].strip()
        elif line.startswith("Total Probability:"):
            pct = _PCT_RE.search(line)
            if pct:
                current.probability = float(pct.group(1))
        elif line.startswith("Combined Volume:"):
            vol = _VOLUME_RE.search(line)
            if vol:
                current.volume = float(vol.group(1).replace(",", ""))
        else:
            market = _MARKET_RE.match(line)
            if market:
                current.markets.append(ReportedMarket(market.group(1), float(market.group(2))))
    return opportunities


def select_alerts(
    opportunities: list[ReportedOpportunity], config: AlertConfig
) -> list[ReportedOpportunity]:
    return [o for o in opportunities if o.edge >= config.min_edge and o.volume >= config.min_volume]


def _truncate(question: str) -> str:
    if len(question) > MAX_QUESTION_CHARS:
        return question[: MAX_QUESTION_CHARS - 3] + "..."
    return question


def format_discord_message(opportunities: list[ReportedOpportunity]) -> str:
    n = len(opportunities)
    parts = [
        "🎯 **Polymarket Arbitrage Alert**",
        "",
        f"Found {n} high-value opportunit{'y' if n == 1 else 'ies'}!",
        "",
    ]
    for i, opp in enumerate(opportunities, start=1):
        parts.append(f"**{i}. {opp.type}** - {opp.event}")
        parts.append(f"• **Edge:** {opp.edge:.1f}% | **Volume:** ${opp.volume:,.0f}")
        parts.append(f"• **Total Probability:** {opp.probability:.1f}%")
        parts.append(f"• **Markets:** {len(opp.markets)} related markets")
        for m in opp.markets[:MARKETS_SHOWN]:
            parts.append(f"  - {_truncate(m.question)} ({m.probability:.1f}%)")
        if len(opp.markets) > MARKETS_SHOWN:
            parts.append(f"  - ...and {len(opp.markets) - MARKETS_SHOWN} more")
        parts.append("")
    parts.append("*Check Polymarket Scanner for details*")
    return "\n".join(parts)


def run_heartbeat(report_text: str, config: AlertConfig) -> HeartbeatResult:
    """Parse a report and build the alert message if any opportunity clears the thresholds."""
    found = parse_report_text(report_text)
    alerts = select_alerts(found, config)
    message = format_discord_message(alerts) if alerts else None
    return HeartbeatResult(found=len(found), alerts=alerts, message=message)
