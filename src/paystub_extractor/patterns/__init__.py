"""
Pay statement pattern matching.

Provides:
- PatternMatcher: Runs all passes over normalized text
- Passes: provider, monetary fields, gross/net consistency, dates,
  deductions, earnings, entities, frequency
- Base class for custom passes (new payroll layouts)

Each pass is independently testable and tolerant of absence.
"""

from .amounts import MonetaryFieldPass, parse_amount
from .base import PatternPass
from .consistency import PayConsistencyPass
from .dates import PayDatesPass, parse_date
from .deductions import DeductionPass, classify_deduction
from .earnings import EarningsPass, parse_earning_line
from .entities import EntityPass
from .frequency import PayFrequencyPass, classify_span
from .matcher import PatternMatcher, default_passes
from .provider import ProviderPass, detect_provider

__all__ = [
    "PatternMatcher",
    "PatternPass",
    "default_passes",
    "ProviderPass",
    "MonetaryFieldPass",
    "PayConsistencyPass",
    "PayDatesPass",
    "DeductionPass",
    "EarningsPass",
    "EntityPass",
    "PayFrequencyPass",
    "parse_amount",
    "parse_date",
    "classify_deduction",
    "parse_earning_line",
    "classify_span",
    "detect_provider",
]
