"""Canonical schema (Pydantic) - Market, Opportunity, MarketValue."""

from polyarb.models.market import MalformedPriceData, Market, parse_outcome_prices
from polyarb.models.opportunity import Opportunity, OpportunityMarket, OpportunityType
from polyarb.models.value import MarketValue

__all__ = [
    "Market",
    "MalformedPriceData",
    "parse_outcome_prices",
    "Opportunity",
    "OpportunityMarket",
    "OpportunityType",
    "MarketValue",
]
