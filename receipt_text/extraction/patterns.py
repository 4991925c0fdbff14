"""Ordered pattern tables used by the receipt text parser.

Every rule is a named, compiled descriptor so callers can enumerate the
tables, target a single rule in tests, or expose them over the API.
Order inside each table is precedence order.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class PatternRule:
    """A named regular expression with the role it plays in extraction."""

    name: str
    pattern: re.Pattern[str]
    role: str

    def search(self, text: str) -> re.Match[str] | None:
        return self.pattern.search(text)


def _rule(name: str, regex: str, role: str, flags: int = 0) -> PatternRule:
    return PatternRule(name=name, pattern=re.compile(regex, flags), role=role)


# Decimal amount: optional digit grouping, then exactly two decimals.
# Dotted dates such as 12.03.2024 and times such as 2024,14:32 are not amounts.
AMOUNT_TOKEN = r"(?<![\d.,])(?:\d{1,3}(?:[.,]\d{3})+|\d+)[.,]\d{2}(?![.,]?\d|:)"
CURRENCY_TOKEN = r"(?<![A-Za-z])(?:MAD|DHS?|EUR|USD|GBP)(?![A-Za-z])|[€$£]"

_MONTH = (
    r"(?:january|february|march|april|may|june|july|august|september|october"
    r"|november|december|janvier|f[ée]vrier|mars|avril|mai|juin|juillet"
    r"|ao[uû]t|septembre|octobre|novembre|d[ée]cembre|jan|janv|feb|f[ée]vr?"
    r"|mar|apr|avr|jun|jul|juil|aug|sept?|oct|nov|dec|d[ée]c)\b\.?"
)
# A year followed by a separator and two decimals is the integer part of a
# price; a following time such as ",14:32" is allowed.
_DATE_END = r"(?!\d|[.,]\d{2}(?![\d:]))"


STORE_RULES: tuple[PatternRule, ...] = (
    _rule("marjane", r"\bMARJANE\b", "merchant", re.IGNORECASE),
    _rule("carrefour", r"\bCARREFOUR\b", "merchant", re.IGNORECASE),
    _rule("acima", r"\bACIMA\b", "merchant", re.IGNORECASE),
    _rule("bim", r"\bBIM\b", "merchant", re.IGNORECASE),
    _rule("label_vie", r"\bLABEL['’]\s?VIE\b", "merchant", re.IGNORECASE),
    _rule("atacadao", r"\bATACADAO\b", "merchant", re.IGNORECASE),
    _rule("aswak_assalam", r"\bASWAK\s+ASSALAM\b", "merchant", re.IGNORECASE),
    _rule("hanouty", r"\bHANOUTY\b", "merchant", re.IGNORECASE),
)

DATE_RULES: tuple[PatternRule, ...] = (
    _rule(
        "numeric_dmy",
        rf"(?<![\d.,])\d{{1,2}}[/\-.]\d{{1,2}}[/\-.]\d{{2,4}}{_DATE_END}",
        "date",
    ),
    _rule(
        "iso_ymd",
        rf"(?<![\d.,])\d{{4}}[/\-]\d{{1,2}}[/\-]\d{{1,2}}{_DATE_END}",
        "date",
    ),
    _rule(
        "day_month_name",
        rf"(?<!\d)\d{{1,2}}\s+{_MONTH}\s+\d{{2,4}}{_DATE_END}",
        "date",
        re.IGNORECASE,
    ),
    _rule(
        "month_name_day",
        rf"\b{_MONTH}\s+\d{{1,2}},?\s+\d{{2,4}}{_DATE_END}",
        "date",
        re.IGNORECASE,
    ),
)

# Tried in order against a labelled line; the ``amount`` group is the value.
LINE_AMOUNT_RULES: tuple[PatternRule, ...] = (
    _rule(
        "amount_then_currency",
        rf"(?P<amount>{AMOUNT_TOKEN})\s*(?P<currency>{CURRENCY_TOKEN})",
        "amount",
        re.IGNORECASE,
    ),
    _rule(
        "currency_then_amount",
        rf"(?P<currency>{CURRENCY_TOKEN})\s*(?P<amount>{AMOUNT_TOKEN})",
        "amount",
        re.IGNORECASE,
    ),
    _rule("bare_amount", rf"(?P<amount>{AMOUNT_TOKEN})", "amount"),
)

# Used by the largest-amount fallback over the whole text.
DECIMAL_AMOUNT_RULE = _rule(
    "decimal_amount", rf"(?P<amount>{AMOUNT_TOKEN})", "amount"
)

CURRENCY_RULE = _rule("currency", CURRENCY_TOKEN, "currency", re.IGNORECASE)

# Most specific first; matching is a case-insensitive substring test.
LABEL_KEYWORDS: tuple[str, ...] = (
    "grand total",
    "total ttc",
    "total due",
    "balance due",
    "net à payer",
    "net a payer",
    "à payer",
    "a payer",
    "montant",
    "somme",
    "totale",
    "total",
    "ttc",
    "amount",
    "المجموع",
    "الإجمالي",
    "المبلغ",
)

# Merchant-line exclusion rules.
AMOUNT_SHAPE_RULE = _rule("amount_shape", r"\d+[.,]\d{2}", "exclude")
CONTACT_RULES: tuple[PatternRule, ...] = (
    _rule("email", r"@", "exclude"),
    _rule("web", r"www|https?:", "exclude", re.IGNORECASE),
    _rule(
        "phone",
        r"^(?:(?:t[ée]l[ée]?(?:phone)?|phone|fax|gsm)\.?\s*[/\-]?\s*)*:?\s*"
        r"(?:\+|00)?[\d\s().\-/]{6,}$",
        "exclude",
        re.IGNORECASE,
    ),
)
ADDRESS_RULES: tuple[PatternRule, ...] = (
    _rule(
        "numbered_street",
        r"\d+.*\b(?:rue|avenue|av|bd|blvd|boulevard|street|st|road|rd|lot)\b",
        "exclude",
        re.IGNORECASE,
    ),
    _rule(
        "street_prefix",
        r"^(?:rue|avenue|av\.?|bd\.?|blvd\.?|boulevard|route|quartier|angle)\s",
        "exclude",
        re.IGNORECASE,
    ),
)
BOILERPLATE_KEYWORDS: tuple[str, ...] = (
    "receipt",
    "reçu",
    "recu",
    "ticket",
    "facture",
    "invoice",
    "tel:",
    "tél:",
    "phone:",
    "fax:",
    "ice:",
    "merci",
    "thank you",
)

# A merchant line needs at least one Latin or Arabic letter.
READABLE_RULE = _rule("readable", r"[A-Za-zÀ-ÿ\u0600-\u06FF]", "require")


def merchant_rule(name: str) -> PatternRule:
    """Build an allowlist rule for a configured merchant name.

    Whitespace in the name matches any run of whitespace in the text.
    """
    words = [re.escape(part) for part in name.split()]
    regex = r"(?<!\w)" + r"\s+".join(words) + r"(?!\w)"
    slug = "_".join(part.lower() for part in name.split())
    return _rule(slug, regex, "merchant", re.IGNORECASE)


def rule_tables() -> dict[str, list[str]]:
    """Return the rule names of every table, keyed by family."""
    return {
        "store": [r.name for r in STORE_RULES],
        "date": [r.name for r in DATE_RULES],
        "line_amount": [r.name for r in LINE_AMOUNT_RULES],
        "fallback_amount": [DECIMAL_AMOUNT_RULE.name],
        "contact": [r.name for r in CONTACT_RULES],
        "address": [r.name for r in ADDRESS_RULES],
    }
