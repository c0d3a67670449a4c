"""Polymarket Gamma API client - paginated market listing and event lookup."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from polyarb.ingestion.rate_limit import backoff_delay, should_retry
from polyarb.models import Market

log = structlog.get_logger(__name__)

GAMMA_API_BASE = "https://gamma-api.polymarket.com"


class PaginationLimitError(RuntimeError):
    """Page ceiling reached before the listing was exhausted."""

    def __init__(self, max_pages: int, fetched: int) -> None:
        super().__init__(
            f"Gamma listing not exhausted after {max_pages} pages ({fetched} markets); "
            "raise fetch.max_pages or fetch.page_size"
        )
        self.max_pages = max_pages
        self.fetched = fetched


def parse_market(raw: dict[str, Any]) -> Market:
    """Convert Gamma API market object to canonical Market."""
    return Market(
        question=raw.get("question") or raw.get("title") or "",
        outcome_prices=raw.get("outcomePrices"),
        volume_24h=raw.get("volume24hr"),
        slug=raw.get("slug"),
        market_id=str(raw.get("conditionId") or raw.get("id") or "") or None,
        category=raw.get("category"),
        liquidity=raw.get("liquidityNum") if raw.get("liquidityNum") is not None else raw.get("liquidity"),
        end_date=raw.get("endDate"),
        active=raw.get("active") is not False,
        closed=raw.get("closed") is True,
    )


def _parse_rows(rows: list[Any]) -> list[Market]:
    markets = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        try:
            markets.append(parse_market(row))
        except ValidationError as e:
            log.warning("skip_market", slug=row.get("slug"), error=str(e))
    return markets


def _get_json(
    client: httpx.Client,
    url: str,
    params: dict[str, Any] | None = None,
    max_retries: int = 3,
    retry_base_delay: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> Any:
    """GET with retry on 429/5xx and transport errors. Raises httpx.HTTPError when exhausted."""
    attempt = 0
    while True:
        try:
            resp = client.get(url, params=params)
            if should_retry(resp.status_code) and attempt < max_retries:
                log.warning("gamma_retry", url=url, status=resp.status_code, attempt=attempt + 1)
            else:
                resp.raise_for_status()
                return resp.json()
        except httpx.TransportError as e:
            if attempt >= max_retries:
                raise
            log.warning("gamma_retry", url=url, error=str(e), attempt=attempt + 1)
        sleep(backoff_delay(attempt, retry_base_delay))
        attempt += 1


def _page_rows(data: Any) -> list[Any]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("data"), list):
        return data["data"]
    return []


def fetch_markets(
    base_url: str | None = None,
    limit: int = 200,
    active_only: bool = True,
    min_volume: float = 0,
    min_liquidity: float = 0,
    page_size: int = 500,
    max_pages: int = 50,
    timeout: float = 30.0,
    max_retries: int = 3,
    retry_base_delay: float = 1.0,
    transport: httpx.BaseTransport | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> list[Market]:
    """Fetch every listed market page by page, then filter, rank by 24h volume and truncate.

    Paging stops at the first short page. Reading max_pages full pages without
    reaching one raises PaginationLimitError.
    """
    url = (base_url or GAMMA_API_BASE).rstrip("/")
    if not url.endswith("/markets"):
        url += "/markets"
    base_params: dict[str, Any] = {"limit": page_size}
    if active_only:
        base_params["active"] = "true"
        base_params["closed"] = "false"

    markets: list[Market] = []
    with httpx.Client(timeout=timeout, transport=transport) as client:
        for page in range(max_pages):
            params = {**base_params, "offset": page * page_size}
            rows = _page_rows(
                _get_json(client, url, params, max_retries, retry_base_delay, sleep)
            )
            markets.extend(_parse_rows(rows))
            log.debug("fetch_page", page=page, rows=len(rows))
            if len(rows) < page_size:
                break
        else:
            raise PaginationLimitError(max_pages, len(markets))

    if active_only:
        markets = [m for m in markets if m.active and not m.closed]
    if min_volume > 0:
        markets = [m for m in markets if m.volume_24h >= min_volume]
    if min_liquidity > 0:
        markets = [m for m in markets if m.liquidity >= min_liquidity]
    markets.sort(key=lambda m: m.volume_24h, reverse=True)
    log.info("fetch_complete", fetched=len(markets), limit=limit)
    return markets[:limit]


def fetch_event_by_slug(
    slug: str,
    base_url: str | None = None,
    timeout: float = 30.0,
    max_retries: int = 3,
    retry_base_delay: float = 1.0,
    transport: httpx.BaseTransport | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> tuple[str, list[Market]]:
    """Fetch one Gamma event by slug. Returns (event title, its markets in listed order)."""
    url = f"{(base_url or GAMMA_API_BASE).rstrip('/')}/events/slug/{slug}"
    with httpx.Client(timeout=timeout, transport=transport) as client:
        data = _get_json(client, url, None, max_retries, retry_base_delay, sleep)
    if isinstance(data, list):
        data = data[0] if data else {}
    if not isinstance(data, dict):
        data = {}
    return str(data.get("title") or slug), _parse_rows(data.get("markets") or [])
