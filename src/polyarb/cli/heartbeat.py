"""Heartbeat command: scan (or read a saved report) and emit a DM notification."""

from __future__ import annotations

from pathlib import Path

import structlog
import typer

from polyarb.alerts import AlertConfig, run_heartbeat
from polyarb.cli.scan import build_arb_report

log = structlog.get_logger(__name__)

app = typer.Typer(help="Threshold alerts over the arbitrage report")


@app.command("heartbeat")
def heartbeat(
    ctx: typer.Context,
    report: Path | None = typer.Option(
        None, "--report", "-r", help="Saved 'polyarb arb' text output (default: run a live scan)"
    ),
    min_edge: float | None = typer.Option(None, "--min-edge", help="Minimum edge % (overrides config)"),
    min_volume: float | None = typer.Option(None, "--min-volume", help="Minimum combined volume (overrides config)"),
) -> None:
    """Alert on high-value opportunities. Prints DM_NOTIFICATION: {json} when any qualify."""
    settings = ctx.obj["settings"]
    base = AlertConfig.from_settings(settings)
    config = AlertConfig(
        min_edge=min_edge if min_edge is not None else base.min_edge,
        min_volume=min_volume if min_volume is not None else base.min_volume,
        session_key=base.session_key,
    )
    if report is not None:
        try:
            text = report.read_text(encoding="utf-8")
        except OSError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1) from e
    else:
        # render every row; thresholds are applied after parsing
        text = build_arb_report(settings, min_volume=0, limit=settings.arb_limit, top=10**6)

    result = run_heartbeat(text, config)
    log.info("heartbeat", found=result.found, alerts=len(result.alerts))
    if result.found == 0:
        typer.echo("[Polymarket Heartbeat] No opportunities found")
        return
    notification = result.notification(config)
    if notification is None:
        typer.echo(f"[Polymarket Heartbeat] Found {result.found} opportunities but none meet thresholds")
        typer.echo(f"  Min edge: {config.min_edge}%, Min volume: ${config.min_volume:,.0f}")
        return
    typer.echo("[Polymarket Heartbeat] High-value opportunities found, sending DM...")
    typer.echo(notification)
