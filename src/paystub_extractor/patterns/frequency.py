"""
Pay frequency inference.

Prefers the structural signal (day span of the pay period) and falls back
to explicit frequency words in the text.
"""

import re
from datetime import date
from typing import Any, Optional

from ..schemas.paystub import FieldSource, PayFrequency
from .base import PatternPass

# (frequency, min days, max days), checked in order.
# BIWEEKLY precedes SEMI_MONTHLY, so the 14-15 day overlap is BIWEEKLY.
FREQUENCY_BANDS: list[tuple[PayFrequency, int, int]] = [
    (PayFrequency.WEEKLY, 6, 8),
    (PayFrequency.BIWEEKLY, 13, 15),
    (PayFrequency.SEMI_MONTHLY, 14, 17),
    (PayFrequency.MONTHLY, 27, 32),
]

_BIWEEKLY_RE = re.compile(r"\bbi[-\s]?weekly\b")
_WEEKLY_RE = re.compile(r"\bweekly\b")
_SEMI_MONTHLY_RE = re.compile(r"\bsemi[-\s]?monthly\b")
_MONTHLY_RE = re.compile(r"\bmonthly\b")


def classify_span(days: int) -> Optional[PayFrequency]:
    """Map a pay-period day span onto a frequency band."""
    for frequency, low, high in FREQUENCY_BANDS:
        if low <= days <= high:
            return frequency
    return None


def frequency_from_period(start: Optional[date], end: Optional[date]) -> Optional[PayFrequency]:
    if start is None or end is None:
        return None
    return classify_span((end - start).days)


def frequency_from_text(text: str) -> Optional[PayFrequency]:
    """Explicit frequency words, in priority order."""
    text_lower = text.lower()
    has_biweekly = bool(_BIWEEKLY_RE.search(text_lower))

    if _WEEKLY_RE.search(text_lower) and not has_biweekly:
        return PayFrequency.WEEKLY
    if has_biweekly:
        return PayFrequency.BIWEEKLY
    if _SEMI_MONTHLY_RE.search(text_lower):
        return PayFrequency.SEMI_MONTHLY
    if _MONTHLY_RE.search(text_lower):
        return PayFrequency.MONTHLY
    return None


class PayFrequencyPass(PatternPass):
    """Pay frequency. Must run after the date pass."""

    @property
    def name(self) -> str:
        return "frequency"

    def apply(
        self,
        text: str,
        fields: dict[str, Any],
        source: FieldSource = FieldSource.PATTERN,
    ) -> dict[str, Any]:
        frequency = frequency_from_period(
            fields.get("pay_period_start"),
            fields.get("pay_period_end"),
        )
        if frequency is None:
            frequency = frequency_from_text(text)

        return {"pay_frequency": frequency or PayFrequency.UNKNOWN}
