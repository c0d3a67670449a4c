"""MarketValue - per-market pricing summary for the value scan."""

from pydantic import BaseModel, ConfigDict, Field


class MarketValue(BaseModel):
    """Implied probabilities and tradeability of a single binary market."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    slug: str | None = None
    title: str = ""
    category: str | None = None
    yes_price: float = Field(..., ge=0, le=1, alias="yesPrice")
    no_price: float = Field(..., ge=0, le=1, alias="noPrice")
    yes_prob: float = Field(..., alias="yesProb")  # percent
    no_prob: float = Field(..., alias="noProb")
    spread: float = 0.0  # |yes% + no% - 100|
    volume_24h: float = Field(0.0, alias="volume24hr")
    liquidity: float = 1.0
    volume_liquidity_ratio: float = Field(0.0, alias="volumeLiquidityRatio")
    end_date: str | None = Field(None, alias="endDate")
    is_range: bool = Field(False, alias="isRange")
