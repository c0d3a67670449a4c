"""Scan commands: value ranking (scan) and arbitrage detection (arb)."""

from __future__ import annotations

import typer

from polyarb.analysis import detect_arbitrage, score_markets
from polyarb.cli.markets import fetch_or_exit
from polyarb.config import Settings
from polyarb.report import (
    opportunities_to_json,
    render_opportunities_text,
    render_values_text,
    values_to_json,
)


app = typer.Typer(help="Value ranking and arbitrage scans")


@app.command("scan")
def scan(
    ctx: typer.Context,
    min_volume: float = typer.Option(0, "--min-volume", help="Minimum 24h volume"),
    min_liquidity: float | None = typer.Option(None, "--min-liquidity", help="Minimum liquidity"),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Max markets to fetch"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Rank active markets by volume/liquidity ratio."""
    settings = ctx.obj["settings"]
    limit = limit if limit is not None else settings.scan_limit
    min_liquidity = min_liquidity if min_liquidity is not None else settings.scan_min_liquidity
    typer.echo(
        f"Fetching markets (min_volume={min_volume}, min_liquidity={min_liquidity}, limit={limit})",
        err=True,
    )
    markets = fetch_or_exit(settings, limit=limit, min_volume=min_volume, min_liquidity=min_liquidity)
    typer.echo(f"Found {len(markets)} active markets", err=True)
    values = score_markets(markets)
    if as_json:
        typer.echo(values_to_json(values))
    else:
        typer.echo(render_values_text(values))


def build_arb_report(settings: Settings, min_volume: float, limit: int, top: int) -> str:
    """Fetch, detect and render the arbitrage text report."""
    markets = fetch_or_exit(settings, limit=limit, min_volume=min_volume)
    typer.echo(f"Analyzing {len(markets)} markets...", err=True)
    return render_opportunities_text(detect_arbitrage(markets), top=top)


@app.command("arb")
def arb(
    ctx: typer.Context,
    min_volume: float = typer.Option(0, "--min-volume", help="Minimum 24h volume"),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Markets to analyze"),
    top: int | None = typer.Option(None, "--top", help="Opportunities to print (text output)"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Detect underbook, overbook and contradiction opportunities."""
    settings = ctx.obj["settings"]
    limit = limit if limit is not None else settings.arb_limit
    top = top if top is not None else settings.report_top
    if as_json:
        markets = fetch_or_exit(settings, limit=limit, min_volume=min_volume)
        typer.echo(f"Analyzing {len(markets)} markets...", err=True)
        typer.echo(opportunities_to_json(detect_arbitrage(markets)))
    else:
        typer.echo(build_arb_report(settings, min_volume, limit, top))
