"""Event-key extraction: rule stages and grouping properties."""

import pytest

from polyarb.analysis.normalize import (
    BUCKET_RULES,
    CLEANUP_RULES,
    KEY_LENGTH,
    PREFIX_RULE,
    UNICODE_RULES,
    extract_event_key,
    has_bucket_clause,
    strip_buckets,
)

BUCKET = {r.name: r for r in BUCKET_RULES}


def test_deterministic_and_total():
    q = "Will the Fed cut rates in March?"
    assert extract_event_key(q) == extract_event_key(q)
    assert extract_event_key("") == ""
    assert extract_event_key("   ") == ""
    assert isinstance(extract_event_key("¿Qué pasará? \u2265 \u2014 \u2264"), str)


def test_bucket_variants_collapse_to_one_key():
    keys = {
        extract_event_key("Will X spend $50B-$100B?"),
        extract_event_key("Will X spend $100B-$150B?"),
        extract_event_key("Will X spend less than $50B?"),
    }
    assert keys == {"x spend"}


@pytest.mark.parametrize(
    "question",
    [
        "Will DOGE cut between $50b and $100b?",
        "Will DOGE cut $50-$100b?",
        "Will DOGE cut between 50 and 100 billion?",
        "Will DOGE cut <$50b?",
        "Will DOGE cut >= $250b?",
        "Will DOGE cut at least $250b?",
        "Will DOGE cut $250b or more?",
        "Will DOGE cut $50b or less?",
        "Will DOGE cut $1,250.5 million or less?",
    ],
)
def test_bucket_shapes_are_stripped(question):
    assert extract_event_key(question) == "doge cut"


def test_unicode_variants_normalize():
    assert extract_event_key("Will Tesla deliver 1.5m\u20132m cars?") == "tesla deliver cars"
    assert extract_event_key("Will Tesla deliver \u22652.5m cars?") == "tesla deliver cars"
    assert extract_event_key("Will Fed cut rates\u00a0in March?") == "fed cut rates in march"


def test_prefix_stripped_at_most_once():
    assert extract_event_key("Will Will Smith win an Oscar?") == "will smith win an oscar"
    assert extract_event_key("Does Bitcoin hit 100k?") == "bitcoin hit 100k"
    assert extract_event_key("Willow wins?") == "willow wins"
    assert PREFIX_RULE.apply("HAVE rates risen?") == "rates risen?"


def test_amount_without_comparator_is_kept():
    assert not has_bucket_clause("Apple reach $4t market cap?")
    assert extract_event_key("Will Apple reach $4t market cap?") == "apple reach $4t market cap"


def test_comparator_without_unit_is_not_a_bucket():
    assert not has_bucket_clause("BTC above $100,000?")
    assert strip_buckets("BTC above $100,000?") == "BTC above $100,000?"


def test_degenerate_key_is_accepted():
    assert extract_event_key("Will $50b-$100b?") == ""


def test_key_is_truncated_and_lowercased():
    key = extract_event_key("Will " + "Very Long Question Words " * 10 + "?")
    assert len(key) == KEY_LENGTH
    assert key == key.lower()


def test_individual_bucket_rules():
    assert BUCKET["range_trailing_unit"].apply("cut $50-$100b now").split() == ["cut", "now"]
    assert BUCKET["symbol_below"].apply("cut <= $50b now").split() == ["cut", "now"]
    assert BUCKET["verbal_above"].apply("exceeding 2 trillion dollars").split() == ["dollars"]
    assert BUCKET["bare_amount"].apply("spend $3bn").split() == ["spend"]
    # bare numbers without a scale unit are not amounts
    assert BUCKET["bare_amount"].apply("win 3 games") == "win 3 games"


def test_unicode_and_cleanup_rules():
    text = "a\u00a0b \u2013 c \u2014 d \u2264 e \u2265 f"
    for rule in UNICODE_RULES:
        text = rule.apply(text)
    assert text == "a b - c - d <= e >= f"
    text = "x <= (y)? + z"
    for rule in CLEANUP_RULES:
        text = rule.apply(text)
    assert text.strip() == "x y z"
