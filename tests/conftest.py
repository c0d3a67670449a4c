"""Shared fixtures: market factory and the DOGE bucket snapshot."""

import json

import pytest

from polyarb.models import Market


def make_market(question, yes, no=None, volume=0.0, slug=None, **extra):
    prices = [str(yes), str(no if no is not None else round(1 - yes, 4))]
    return Market(
        question=question,
        outcome_prices=json.dumps(prices),
        volume_24h=volume,
        slug=slug,
        **extra,
    )


@pytest.fixture
def market_factory():
    return make_market


@pytest.fixture
def doge_buckets():
    """Four buckets of one metric at 30/25/20/4 (79% total); no negated wording."""
    return [
        make_market("Will DOGE cut $50b-$100b in federal spending in 2025?", 0.30, volume=5000, slug="doge-50-100"),
        make_market("Will DOGE cut $100b-$150b in federal spending in 2025?", 0.25, volume=4000, slug="doge-100-150"),
        make_market("Will DOGE cut $150b-$200b in federal spending in 2025?", 0.20, volume=3000, slug="doge-150-200"),
        make_market("Will DOGE cut more than $250b in federal spending in 2025?", 0.04, volume=500, slug="doge-250"),
    ]
