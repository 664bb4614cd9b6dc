"""
SSOT (Single Source of Truth) schemas for the pipeline.

These canonical schemas are the ONLY models used across all modules.
"""

from .paystub import (
    DEFAULT_CURRENCY,
    Deduction,
    DeductionCategory,
    EarningItem,
    ExtractedField,
    FieldSource,
    Money,
    PayFrequency,
    PaystubRecord,
)

__all__ = [
    "PaystubRecord",
    "ExtractedField",
    "Money",
    "Deduction",
    "DeductionCategory",
    "EarningItem",
    "FieldSource",
    "PayFrequency",
    "DEFAULT_CURRENCY",
]
