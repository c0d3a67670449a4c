"""Market - canonical listing snapshot consumed by the analysis core."""

from __future__ import annotations

import json
import math
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MalformedPriceData(ValueError):
    """Outcome prices do not parse to exactly two numbers."""


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise MalformedPriceData(f"not a price: {value!r}")
    try:
        price = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise MalformedPriceData(f"not a price: {value!r}") from e
    if price.is_snan():
        raise MalformedPriceData(f"not a price: {value!r}")
    # quiet NaN and infinity pass through; callers skip non-finite sums
    if price.is_finite() and not 0 <= price <= 1:
        raise MalformedPriceData(f"price out of range [0, 1]: {value!r}")
    return price


def parse_outcome_prices(value: Any) -> tuple[Decimal, Decimal]:
    """Parse Gamma outcomePrices (JSON string or list) into (yes, no).

    Prices are parsed as Decimal so that probability sums are exact, e.g. three
    buckets at 0.49/0.29/0.20 sum to exactly 98.00.
    """
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as e:
            raise MalformedPriceData(f"invalid outcomePrices JSON: {value!r}") from e
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise MalformedPriceData(f"expected two outcome prices, got {value!r}")
    yes, no = (_to_decimal(p) for p in value)
    return yes, no


class Market(BaseModel):
    """Prediction market listing. Immutable for the duration of a scan."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    question: str = ""
    outcome_prices: str | list[Any] | None = Field(None, alias="outcomePrices")
    volume_24h: float = Field(0.0, alias="volume24hr")
    slug: str | None = None
    market_id: str | None = None
    category: str | None = None
    liquidity: float = 0.0
    end_date: str | None = Field(None, alias="endDate")
    active: bool = True
    closed: bool = False

    @field_validator("volume_24h", "liquidity", mode="before")
    @classmethod
    def _coerce_amount(cls, v: Any) -> float:
        try:
            amount = float(v)
        except (TypeError, ValueError):
            return 0.0
        if not math.isfinite(amount) or amount < 0:
            return 0.0
        return amount

    @field_validator("question", mode="before")
    @classmethod
    def _coerce_question(cls, v: Any) -> str:
        return "" if v is None else str(v)

    def prices(self) -> tuple[Decimal, Decimal]:
        """Return (yes, no) prices. Raises MalformedPriceData."""
        return parse_outcome_prices(self.outcome_prices)

    def yes_price(self) -> Decimal:
        return self.prices()[0]
