"""
Deduction line-item extraction.

Scans line by line for a "name: amount" shape and classifies the name
against tax and benefit keyword sets. Names matching neither are skipped.
"""

import re
from typing import Any, Optional

from ..schemas.paystub import Deduction, DeductionCategory, FieldSource, Money
from .amounts import detect_currency, parse_amount
from .base import PatternPass

DEDUCTION_CONFIDENCE = 0.8

TAX_KEYWORDS = (
    "federal",
    "state",
    "local",
    "fica",
    "medicare",
    "social security",
    "sdi",
    "sui",
    "futa",
    "suta",
    "unemployment",
    "tax",
)

BENEFIT_KEYWORDS = (
    "health",
    "dental",
    "vision",
    "life",
    "401k",
    "403b",
    "457b",
    "retirement",
    "pension",
    "insurance",
    "hsa",
    "fsa",
)

# name, then ":" or whitespace, then an amount that ends the token
DEDUCTION_LINE_RE = re.compile(
    r"^(?P<name>[A-Za-z0-9][A-Za-z0-9 .&/()'-]*?)\s*[:\s]\s*"
    r"(?P<currency>[$€£]|USD|EUR|GBP)?\s*"
    r"(?P<amount>\d[\d,]*(?:\.\d{1,2})?)(?=\s|$)",
    re.IGNORECASE,
)

_PLAN_LETTER_RE = re.compile(r"\s*\((\w)\)")


def classify_deduction(name: str) -> Optional[DeductionCategory]:
    """
    Classify a deduction name. Tax keywords are checked first.

    Returns None when the name matches neither keyword set.
    """
    # "401(k)" and "401 (k)" read as "401k"
    name_lower = _PLAN_LETTER_RE.sub(r"\1", name.lower())
    if any(keyword in name_lower for keyword in TAX_KEYWORDS):
        return DeductionCategory.TAX
    if any(keyword in name_lower for keyword in BENEFIT_KEYWORDS):
        return DeductionCategory.BENEFIT
    return None


def parse_deduction_line(line: str) -> Optional[Deduction]:
    """Parse one text line into a classified deduction, if it is one."""
    match = DEDUCTION_LINE_RE.match(line.strip())
    if not match:
        return None

    name = match.group("name").strip()
    category = classify_deduction(name)
    if category is None:
        return None

    amount = parse_amount(match.group("amount"))
    if amount is None or amount <= 0:
        return None

    return Deduction(
        name=name,
        amount=Money(amount=amount, currency=detect_currency(match.group("currency"))),
        category=category,
        confidence=DEDUCTION_CONFIDENCE,
    )


class DeductionPass(PatternPass):
    """Tax and benefit deductions, in document order."""

    @property
    def name(self) -> str:
        return "deductions"

    def apply(
        self,
        text: str,
        fields: dict[str, Any],
        source: FieldSource = FieldSource.PATTERN,
    ) -> dict[str, Any]:
        taxes: list[Deduction] = []
        benefits: list[Deduction] = []

        for line in text.split("\n"):
            deduction = parse_deduction_line(line)
            if deduction is None:
                continue
            if deduction.category == DeductionCategory.TAX:
                taxes.append(deduction)
            else:
                benefits.append(deduction)

        found: dict[str, Any] = {}
        if taxes:
            found["tax_deductions"] = tuple(taxes)
        if benefits:
            found["benefit_deductions"] = tuple(benefits)
        return found
