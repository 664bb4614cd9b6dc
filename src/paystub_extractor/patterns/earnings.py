"""
Earnings line-item extraction.

Recognizes lines such as:
- Regular 80.00 hrs $25.00/hr $2,000.00
- Overtime: 300.00
- Bonus 500.00 6,000.00   (current, then YTD)

Hours and rate are optional. The first amount left after removing them
is the current-period amount.
"""

import re
from decimal import Decimal
from typing import Any, Optional

from ..schemas.paystub import EarningItem, FieldSource, Money
from .amounts import MONEY_PATTERN, detect_currency, parse_amount
from .base import PatternPass
from .deductions import classify_deduction

EARNING_KEYWORD_RE = re.compile(
    r"\b(?:regular|overtime|bonus|commission|tips|holiday|vacation|sick|pto)\b",
    re.IGNORECASE,
)

# Section headers and totals, never line items
SECTION_WORDS_RE = re.compile(r"\b(?:earnings|wages|deductions|taxes)\b", re.IGNORECASE)

HOURS_RE = re.compile(r"(?P<hours>\d+(?:\.\d+)?)\s*h(?:ou)?rs?\b", re.IGNORECASE)
RATE_RE = re.compile(
    r"[$€£]?\s*(?P<rate>\d+(?:\.\d+)?)\s*/\s*h(?:ou)?r\b",
    re.IGNORECASE,
)
AMOUNT_RE = re.compile(MONEY_PATTERN + r"(?![\d/])", re.IGNORECASE)

_DESCRIPTION_END = re.compile(r"[\d$€£]")


def _decimal(match: Optional[re.Match], group: str) -> Optional[Decimal]:
    if not match:
        return None
    return parse_amount(match.group(group))


def parse_earning_line(line: str) -> Optional[EarningItem]:
    """Parse one text line into an earnings item, if it is one."""
    keyword = EARNING_KEYWORD_RE.search(line)
    if not keyword:
        return None
    if SECTION_WORDS_RE.search(line) or classify_deduction(line) is not None:
        return None

    hours_match = HOURS_RE.search(line)
    rate_match = RATE_RE.search(line)

    remainder = line
    for match in (rate_match, hours_match):
        if match:
            remainder = remainder.replace(match.group(0), " ", 1)

    # Amounts before the keyword belong to another column
    amount_match = AMOUNT_RE.search(remainder, EARNING_KEYWORD_RE.search(remainder).end())
    if not amount_match:
        return None
    amount = parse_amount(amount_match.group("amount"))
    if amount is None or amount <= 0:
        return None

    description = _DESCRIPTION_END.split(line, 1)[0].strip(" :\t-")

    return EarningItem(
        description=description or keyword.group(0).title(),
        amount=Money(amount=amount, currency=detect_currency(amount_match.group("currency"))),
        hours=_decimal(hours_match, "hours"),
        rate=_decimal(rate_match, "rate"),
    )


class EarningsPass(PatternPass):
    """Regular, overtime, bonus and paid-leave line items, in document order."""

    @property
    def name(self) -> str:
        return "earnings"

    def apply(
        self,
        text: str,
        fields: dict[str, Any],
        source: FieldSource = FieldSource.PATTERN,
    ) -> dict[str, Any]:
        items = []
        for line in text.split("\n"):
            item = parse_earning_line(line)
            if item is not None:
                items.append(item)

        if items:
            return {"earnings": tuple(items)}
        return {}
