"""Opportunity - detected probability inconsistency across one or more markets."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_serializer

CENTS = Decimal("0.01")


def quantize_pct(value: Decimal) -> Decimal:
    """Round a percentage to two decimals (half up)."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


class OpportunityType(str, Enum):
    UNDERBOOK = "underbook"
    OVERBOOK = "overbook"
    CONTRADICTION = "contradiction"


class OpportunityMarket(BaseModel):
    """Member market as reported in an opportunity."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    question: str
    yes_price: float = Field(..., alias="yesPrice")
    slug: str | None = None


class Opportunity(BaseModel):
    """Underbook/overbook group or contradictory pair. total_prob and edge are percentages."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: OpportunityType
    event_name: str = Field(..., alias="eventName")
    markets: list[OpportunityMarket] = Field(default_factory=list)
    total_prob: Decimal = Field(..., alias="totalProb")
    edge: Decimal = Field(..., ge=0)
    volume_24h: float = Field(0.0, alias="volume24hr")

    @field_serializer("total_prob", "edge", when_used="json")
    def _two_decimals(self, value: Decimal) -> str:
        return f"{quantize_pct(value):.2f}"