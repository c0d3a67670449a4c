"""Event-key extraction - canonicalize a market question to a grouping key.

The key is produced by an ordered list of pattern rules applied in stages:

1. strip one leading auxiliary verb ("Will", "Does", ...)
2. normalize unicode punctuation variants
3. if the text carries a numeric bucket clause, strip every bucket shape so that
   buckets of the same metric ("$50b-$100b", "less than $50b") collapse together
4. drop leftover comparator symbols and punctuation, collapse whitespace
5. truncate to 50 characters and lowercase

Each rule is a named module-level object so it can be tested on its own.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

KEY_LENGTH = 50


@dataclass(frozen=True)
class Rule:
    """Regex substitution step."""

    name: str
    pattern: re.Pattern[str]
    replacement: str = " "
    count: int = 0

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text, count=self.count)


def _rule(name: str, src: str, replacement: str = " ", count: int = 0) -> Rule:
    return Rule(name, re.compile(src, re.IGNORECASE), replacement, count)


UNIT = r"(?:m|b|t|mn|bn|million|billion|trillion)"
NUMBER = r"\$?\s*\d{1,3}(?:,\d{3})*(?:\.\d+)?"
AMOUNT = rf"{NUMBER}\s*{UNIT}\b"

LOWER_COMPARATORS = r"(?:less\s+than|under|below|at\s+most|no\s+more\s+than)"
UPPER_COMPARATORS = (
    r"(?:more\s+than|over|above|greater\s+than|at\s+least|no\s+less\s+than"
    r"|exceed(?:s|ing)?|surpass(?:es|ing)?)"
)

PREFIX_RULE = _rule("auxiliary_prefix", r"^(?:will|does|is|are|did|has|have) ", "", count=1)

UNICODE_RULES: tuple[Rule, ...] = (
    Rule("nbsp", re.compile("\u00a0"), " "),
    Rule("dash", re.compile("[\u2013\u2014]"), "-"),
    Rule("less_equal", re.compile("\u2264"), "<="),
    Rule("greater_equal", re.compile("\u2265"), ">="),
)

_AMOUNT_RE = re.compile(AMOUNT, re.IGNORECASE)
_COMPARATOR_WORD_RE = re.compile(
    r"\b(?:between|less\s+than|more\s+than|greater\s+than|under|over|above|below"
    r"|at\s+least|at\s+most|no\s+more\s+than|no\s+less\s+than|or\s+more|or\s+less"
    r"|exceed(?:s|ing)?|surpass(?:es|ing)?)\b",
    re.IGNORECASE,
)
_COMPARATOR_SYMBOL_RE = re.compile(r"[<>]=?")
_RANGE_DASH_RE = re.compile(rf"{NUMBER}(?:\s*{UNIT})?\s*-\s*{AMOUNT}", re.IGNORECASE)

BUCKET_RULES: tuple[Rule, ...] = (
    _rule("between", rf"\bbetween\s+{NUMBER}(?:\s*{UNIT})?\s+(?:and|to)\s+{AMOUNT}"),
    _rule("range_both_units", rf"{AMOUNT}\s*-\s*{AMOUNT}"),
    _rule("range_trailing_unit", rf"{NUMBER}\s*-\s*{AMOUNT}"),
    _rule("range_to", rf"{NUMBER}\s+to\s+{AMOUNT}"),
    _rule("symbol_below", rf"(?:<=|<)\s*{AMOUNT}"),
    _rule("symbol_above", rf"(?:>=|>)\s*{AMOUNT}"),
    _rule("verbal_below", rf"\b{LOWER_COMPARATORS}\s+{AMOUNT}"),
    _rule("verbal_above", rf"\b{UPPER_COMPARATORS}\s+{AMOUNT}"),
    _rule("trailing_or_more", rf"{AMOUNT}\s*(?:\+|\bor\s+more\b|\band\s+up\b)"),
    _rule("trailing_or_less", rf"{AMOUNT}\s*(?:\bor\s+less\b|\band\s+under\b)"),
    _rule("bare_amount", AMOUNT),
)

CLEANUP_RULES: tuple[Rule, ...] = (
    Rule("comparator_symbols", re.compile(r"[<>]=?"), " "),
    Rule("plus", re.compile(r"\+"), " "),
    Rule("punctuation", re.compile(r"[?.,:;()\[\]{}]"), " "),
    Rule("whitespace", re.compile(r"\s+"), " "),
)


def has_bucket_clause(text: str) -> bool:
    """True if text has an amount with a scale unit plus a comparator or dash range."""
    if not _AMOUNT_RE.search(text):
        return False
    return bool(
        _COMPARATOR_WORD_RE.search(text)
        or _COMPARATOR_SYMBOL_RE.search(text)
        or _RANGE_DASH_RE.search(text)
    )


def apply_rules(text: str, rules: tuple[Rule, ...]) -> str:
    for rule in rules:
        text = rule.apply(text)
    return text


def strip_buckets(text: str) -> str:
    """Remove bucket clauses if present; otherwise return text unchanged."""
    if not has_bucket_clause(text):
        return text
    return apply_rules(text, BUCKET_RULES)


def extract_event_key(question: str) -> str:
    """Map a market question to its event key. Total; may return an empty string."""
    key = PREFIX_RULE.apply(question)
    key = apply_rules(key, UNICODE_RULES)
    key = strip_buckets(key)
    key = apply_rules(key, CLEANUP_RULES).strip()
    return key[:KEY_LENGTH].lower()
