"""
Payroll provider detection.

Ordered signature table; the first provider with a matching keyword wins.
"""

from typing import Any

from ..confidence.aggregator import GENERIC_PROVIDER
from ..schemas.paystub import FieldSource
from .base import PatternPass

PROVIDER_SIGNATURES: list[tuple[str, tuple[str, ...]]] = [
    ("ADP", ("adp.com", "automatic data processing", "adp workforce", "adp")),
    ("Paychex", ("paychex.com", "paychex flex", "paychex")),
    ("Workday", ("workday.com", "powered by workday", "workday")),
    ("Gusto", ("gusto.com", "gustohq", "gusto")),
    ("Paylocity", ("paylocity.com", "paylocity")),
    ("Paycor", ("paycor.com", "paycor")),
]


def detect_provider(text: str) -> str:
    """Return the payroll provider name, or "Generic" when none matches."""
    text_lower = text.lower()
    for provider, keywords in PROVIDER_SIGNATURES:
        if any(keyword in text_lower for keyword in keywords):
            return provider
    return GENERIC_PROVIDER


class ProviderPass(PatternPass):
    """Payroll system signature."""

    @property
    def name(self) -> str:
        return "provider"

    def apply(
        self,
        text: str,
        fields: dict[str, Any],
        source: FieldSource = FieldSource.PATTERN,
    ) -> dict[str, Any]:
        return {"provider": detect_provider(text)}
