"""Analysis core - event keys, grouping, consistency checks, value scan."""

from polyarb.analysis.consistency import are_inverse, detect_arbitrage, find_contradictions, find_group_mispricings
from polyarb.analysis.grouping import filter_markets, group_by_event, should_exclude
from polyarb.analysis.normalize import extract_event_key
from polyarb.analysis.value import analyze_value, score_markets

__all__ = [
    "extract_event_key",
    "should_exclude",
    "filter_markets",
    "group_by_event",
    "find_group_mispricings",
    "find_contradictions",
    "are_inverse",
    "detect_arbitrage",
    "analyze_value",
    "score_markets",
]
