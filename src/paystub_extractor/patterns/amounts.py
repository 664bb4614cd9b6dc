"""
Monetary amount parsing and label-anchored money fields.

Supported formats:
- Amounts: 1,234.56 / 1234.56 / 1234
- Currency: $, USD, €, EUR, £, GBP (USD when no symbol is present)
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..schemas.paystub import DEFAULT_CURRENCY, ExtractedField, FieldSource, Money
from .base import PatternPass

LABELED_CONFIDENCE = 0.9

CURRENCY_SYMBOLS = {
    "$": "USD",
    "USD": "USD",
    "€": "EUR",
    "EUR": "EUR",
    "£": "GBP",
    "GBP": "GBP",
}

# Optional currency marker followed by an amount
CURRENCY_PATTERN = r"(?P<currency>[$€£]|USD|EUR|GBP)?"
AMOUNT_PATTERN = r"(?P<amount>\d[\d,]*(?:\.\d{1,2})?)"
MONEY_PATTERN = CURRENCY_PATTERN + r"\s*" + AMOUNT_PATTERN

_STRIP_CHARS = re.compile(r"[,\s$€£]|USD|EUR|GBP")


def _labeled(label: str, current: bool = False) -> re.Pattern:
    # Current-period labels must not be the tail of a year-to-date label
    prefix = r"(?<!ytd\s)" if current else ""
    return re.compile(prefix + label + r"[:\s]*" + MONEY_PATTERN, re.IGNORECASE)


# Label rules per field, tried in order. First positive amount wins.
MONEY_RULES: dict[str, list[re.Pattern]] = {
    "gross_pay": [
        _labeled(r"gross\s*pay", current=True),
        _labeled(r"gross\s*(?:earnings?|wages?|salary)", current=True),
        _labeled(r"total\s*gross", current=True),
    ],
    "net_pay": [
        _labeled(r"net\s*pay", current=True),
        _labeled(r"net\s*amount", current=True),
        _labeled(r"take[\s-]*home(?:\s*pay)?"),
    ],
    "ytd_gross_pay": [
        _labeled(r"ytd\s*gross(?:\s*pay)?"),
    ],
    "ytd_net_pay": [
        _labeled(r"ytd\s*net(?:\s*pay)?"),
    ],
}

# Fields that carry a confidence; the rest are plain Money
CONFIDENCE_FIELDS = {"gross_pay", "net_pay"}


def parse_amount(amount_str: str) -> Optional[Decimal]:
    """
    Parse a locale-formatted amount (1,234.56, $1,234.56) to Decimal.

    Returns None for text that is not a number.
    """
    if not amount_str:
        return None
    cleaned = _STRIP_CHARS.sub("", amount_str)
    if not cleaned:
        return None
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return amount


def detect_currency(marker: Optional[str]) -> str:
    """Map a currency symbol or code to an ISO code."""
    if not marker:
        return DEFAULT_CURRENCY
    return CURRENCY_SYMBOLS.get(marker.upper(), DEFAULT_CURRENCY)


def match_money(pattern: re.Pattern, text: str) -> Optional[Money]:
    """Return the first positive amount matched by pattern, if any."""
    match = pattern.search(text)
    if not match:
        return None
    amount = parse_amount(match.group("amount"))
    if amount is None or amount <= 0:
        return None
    return Money(amount=amount, currency=detect_currency(match.group("currency")))


class MonetaryFieldPass(PatternPass):
    """Gross, net and year-to-date amounts anchored on their labels."""

    @property
    def name(self) -> str:
        return "monetary"

    def apply(
        self,
        text: str,
        fields: dict[str, Any],
        source: FieldSource = FieldSource.PATTERN,
    ) -> dict[str, Any]:
        found: dict[str, Any] = {}

        for field_name, rules in MONEY_RULES.items():
            for rule in rules:
                money = match_money(rule, text)
                if money is None:
                    continue

                if field_name in CONFIDENCE_FIELDS:
                    found[field_name] = ExtractedField(
                        value=money,
                        confidence=LABELED_CONFIDENCE,
                        source=source,
                    )
                else:
                    found[field_name] = money
                break

        return found
