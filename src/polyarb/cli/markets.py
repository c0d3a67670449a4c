"""Market listing commands: top, event."""

from __future__ import annotations

import httpx
import typer

from polyarb.analysis import detect_arbitrage
from polyarb.config import Settings
from polyarb.ingestion.polymarket.gamma import PaginationLimitError, fetch_event_by_slug, fetch_markets
from polyarb.models import Market
from polyarb.report import opportunities_to_json, render_opportunities_text, render_top_text

app = typer.Typer(help="Market listing and single-event checks")

FETCH_ERRORS = (httpx.HTTPError, PaginationLimitError, ValueError)


def fail(error: Exception) -> typer.Exit:
    typer.echo(f"Error: {error}", err=True)
    return typer.Exit(1)


def fetch_or_exit(
    settings: Settings,
    limit: int,
    min_volume: float = 0,
    min_liquidity: float = 0,
) -> list[Market]:
    """Fetch active markets with configured paging; exit 1 on any fetch error."""
    try:
        return fetch_markets(
            base_url=settings.gamma_api_base,
            limit=limit,
            active_only=True,
            min_volume=min_volume,
            min_liquidity=min_liquidity,
            page_size=settings.page_size,
            max_pages=settings.max_pages,
            timeout=settings.timeout_sec,
            max_retries=settings.max_retries,
            retry_base_delay=settings.retry_base_delay_sec,
        )
    except FETCH_ERRORS as e:
        raise fail(e) from e


@app.command("top")
def top(
    ctx: typer.Context,
    limit: int = typer.Option(10, "--limit", "-n", help="Number of markets to show"),
) -> None:
    """Show top active markets by 24h volume."""
    markets = fetch_or_exit(ctx.obj["settings"], limit=limit)
    typer.echo(render_top_text(markets))


@app.command("event")
def event(
    ctx: typer.Context,
    slug: str = typer.Argument(..., help="Gamma event slug"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Check one event's complete market set for arbitrage."""
    settings = ctx.obj["settings"]
    try:
        title, markets = fetch_event_by_slug(
            slug,
            base_url=settings.gamma_api_base,
            timeout=settings.timeout_sec,
            max_retries=settings.max_retries,
            retry_base_delay=settings.retry_base_delay_sec,
        )
    except FETCH_ERRORS as e:
        raise fail(e) from e
    typer.echo(f"Analyzing {len(markets)} markets in event: {title}", err=True)
    opportunities = detect_arbitrage(markets)
    if as_json:
        typer.echo(opportunities_to_json(opportunities))
    else:
        typer.echo(render_opportunities_text(opportunities, top=settings.report_top))
