"""Consistency engine: grouped-outcome sums, contradictions, ordering."""

from decimal import Decimal

import pytest

from polyarb.analysis.consistency import (
    are_inverse,
    detect_arbitrage,
    find_contradictions,
    find_group_mispricings,
    text_overlap,
)
from polyarb.analysis.grouping import group_by_event
from polyarb.models import Market, OpportunityType


def _pair(factory, yes1, yes2):
    return [
        factory("Will Tesla deliver 1m-2m cars?", yes1, volume=100),
        factory("Will Tesla deliver 2m-3m cars?", yes2, volume=250),
    ]


def test_underbook_boundary(market_factory):
    assert detect_arbitrage(_pair(market_factory, 0.49, 0.49)) == []  # exactly 98.00
    [opp] = detect_arbitrage(_pair(market_factory, 0.4899, 0.49))
    assert opp.type is OpportunityType.UNDERBOOK
    assert opp.total_prob == Decimal("97.99")
    assert opp.edge == Decimal("2.01")
    assert opp.volume_24h == 350
    assert opp.event_name == "tesla deliver cars"


def test_overbook_boundary(market_factory):
    assert detect_arbitrage(_pair(market_factory, 0.51, 0.51)) == []  # exactly 102.00
    [opp] = detect_arbitrage(_pair(market_factory, 0.5101, 0.51))
    assert opp.type is OpportunityType.OVERBOOK
    assert opp.edge == Decimal("2.01")
    assert opp.total_prob == Decimal("102.01")


def test_consistent_band_emits_nothing(market_factory):
    assert detect_arbitrage(_pair(market_factory, 0.50, 0.505)) == []


def test_singleton_groups_are_skipped(market_factory):
    groups = group_by_event([market_factory("Will A win?", 0.1)])
    assert find_group_mispricings(groups) == []


def test_malformed_member_is_excluded(market_factory):
    markets = _pair(market_factory, 0.30, 0.30)
    markets.append(Market(question="Will Tesla deliver 3m-4m cars?", outcome_prices='["0.9"]'))
    markets.append(Market(question="Will Tesla deliver 4m-5m cars?", outcome_prices="not json"))
    [opp] = detect_arbitrage(markets)
    assert opp.total_prob == Decimal("60.00")
    assert len(opp.markets) == 2


def test_group_with_one_priced_member_is_skipped(market_factory):
    markets = [
        market_factory("Will Tesla deliver 1m-2m cars?", 0.30),
        Market(question="Will Tesla deliver 2m-3m cars?", outcome_prices=None),
    ]
    assert detect_arbitrage(markets) == []


def test_non_finite_sum_is_skipped(market_factory):
    markets = [
        market_factory("Will Tesla deliver 1m-2m cars?", 0.30),
        Market(question="Will Tesla deliver 2m-3m cars?", outcome_prices='["NaN", "0.5"]'),
    ]
    assert detect_arbitrage(markets) == []


@pytest.mark.parametrize("yes", ["NaN", "Infinity", "-Infinity"])
def test_non_finite_price_skips_group_and_scan_continues(market_factory, doge_buckets, yes):
    markets = [
        *doge_buckets,
        market_factory("Will Tesla deliver 1m-2m cars?", 0.30),
        Market(question="Will Tesla deliver 2m-3m cars?", outcome_prices=f'["{yes}", "0.5"]'),
    ]
    [opp] = detect_arbitrage(markets)
    assert opp.event_name == "doge cut in federal spending in 2025"


@pytest.mark.parametrize("yes", ["1e30", "1e999999", "sNaN", "-0.2"])
def test_unusable_price_drops_member(market_factory, yes):
    markets = [
        market_factory("Will Tesla deliver 1m-2m cars?", 0.30),
        market_factory("Will Tesla deliver 2m-3m cars?", 0.30),
        Market(question="Will Tesla deliver 3m-4m cars?", outcome_prices=f'["{yes}", "0"]'),
    ]
    [opp] = detect_arbitrage(markets)
    assert opp.total_prob == Decimal("60.00")
    assert len(opp.markets) == 2


def test_text_overlap():
    assert text_overlap("a b c", "a b c") == 1.0
    assert text_overlap("a b", "c d") == 0.0
    assert text_overlap("a b c", "a b d") == pytest.approx(0.5)
    assert text_overlap("", "") == 0.0


def test_are_inverse_requires_exactly_one_negative():
    yes = "Will Bitcoin hit $100k by June?"
    no = "Will Bitcoin not hit $100k by June?"
    assert are_inverse(yes, no)
    assert are_inverse(no, yes)
    assert not are_inverse(no, "Will Bitcoin not hit $100k by July?")
    assert not are_inverse(yes, yes)
    # one negative but little shared text
    assert not are_inverse(yes, "Will the Lakers not make the playoffs?")


def test_contradiction_detected(market_factory):
    markets = [
        market_factory("Will Bitcoin hit $100k by June?", 0.40, volume=1000, slug="btc-yes"),
        market_factory("Will Bitcoin not hit $100k by June?", 0.45, volume=2000, slug="btc-no"),
    ]
    [opp] = detect_arbitrage(markets)
    assert opp.type is OpportunityType.CONTRADICTION
    assert opp.event_name == "Will Bitcoin hit $100k by June? vs Will Bitcoin not hit $100k by June?"
    assert opp.total_prob == Decimal("85.00")
    assert opp.edge == Decimal("15.00")
    assert opp.volume_24h == 3000
    assert [m.slug for m in opp.markets] == ["btc-yes", "btc-no"]


def test_contradiction_is_under_only(market_factory):
    over = [
        market_factory("Will Bitcoin hit $100k by June?", 0.60),
        market_factory("Will Bitcoin not hit $100k by June?", 0.60),
    ]
    assert find_contradictions(over) == []
    at_band = [
        market_factory("Will Bitcoin hit $100k by June?", 0.50),
        market_factory("Will Bitcoin not hit $100k by June?", 0.48),
    ]
    assert find_contradictions(at_band) == []


def test_both_negated_is_not_a_contradiction(market_factory):
    markets = [
        market_factory("Will Bitcoin not hit $100k by June?", 0.10),
        market_factory("Will Bitcoin not hit $100k by July?", 0.10),
    ]
    assert find_contradictions(markets) == []


def test_contradiction_skips_malformed_prices(market_factory):
    markets = [
        market_factory("Will Bitcoin hit $100k by June?", 0.40),
        Market(question="Will Bitcoin not hit $100k by June?", outcome_prices='["x", "y"]'),
    ]
    assert find_contradictions(markets) == []


def test_halftime_show_excluded_from_both_strategies(market_factory):
    markets = [
        market_factory("Will Taylor Swift appear at the halftime show?", 0.10),
        market_factory("Will Taylor Swift not appear at the halftime show?", 0.10),
        market_factory("Will Kendrick appear at the halftime show $1m-$2m?", 0.10),
        market_factory("Will Kendrick appear at the halftime show $2m-$3m?", 0.10),
    ]
    assert detect_arbitrage(markets) == []


def test_scenario_distinct_subjects_do_not_group(market_factory):
    markets = [
        market_factory("Will A win?", 0.40, 0.60, volume=1000),
        market_factory("Will B win?", 0.35, 0.65, volume=2000),
        market_factory("Will C win?", 0.18, 0.82, volume=500),
    ]
    assert len(group_by_event(markets)) == 3
    assert detect_arbitrage(markets) == []


def test_scenario_bucket_partition_underbook(doge_buckets):
    [opp] = detect_arbitrage(doge_buckets)
    assert opp.type is OpportunityType.UNDERBOOK
    assert opp.event_name == "doge cut in federal spending in 2025"
    assert opp.total_prob == Decimal("79.00")
    assert opp.edge == Decimal("21.00")
    assert opp.volume_24h == 12500
    assert [m.yes_price for m in opp.markets] == [0.30, 0.25, 0.20, 0.04]


def test_sorted_by_descending_edge(market_factory, doge_buckets):
    markets = [
        *_pair(market_factory, 0.5101, 0.51),
        market_factory("Will Bitcoin hit $100k by June?", 0.40),
        market_factory("Will Bitcoin not hit $100k by June?", 0.45),
        *doge_buckets,
    ]
    edges = [o.edge for o in detect_arbitrage(markets)]
    assert edges == [Decimal("21.00"), Decimal("15.00"), Decimal("2.01")]


def test_idempotent(market_factory, doge_buckets):
    markets = [
        *doge_buckets,
        market_factory("Will Bitcoin hit $100k by June?", 0.40),
        market_factory("Will Bitcoin not hit $100k by June?", 0.45),
    ]
    first = detect_arbitrage(markets)
    second = detect_arbitrage(markets)
    assert first == second
    assert [o.model_dump() for o in first] == [o.model_dump() for o in second]


def test_empty_input():
    assert detect_arbitrage([]) == []


def test_non_market_input_is_rejected():
    with pytest.raises(TypeError):
        detect_arbitrage([{"question": "Will A win?", "outcomePrices": '["0.5", "0.5"]'}])
