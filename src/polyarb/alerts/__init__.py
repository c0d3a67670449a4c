"""Heartbeat alerting over rendered arbitrage reports."""

from polyarb.alerts.heartbeat import (
    AlertConfig,
    HeartbeatResult,
    ReportedOpportunity,
    format_discord_message,
    parse_report_text,
    run_heartbeat,
    select_alerts,
)

__all__ = [
    "AlertConfig",
    "HeartbeatResult",
    "ReportedOpportunity",
    "parse_report_text",
    "select_alerts",
    "format_discord_message",
    "run_heartbeat",
]
