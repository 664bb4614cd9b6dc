"""
Pattern matcher - runs all pattern passes over the same text.
"""

import logging
from dataclasses import fields as dataclass_fields
from typing import Any, Optional

from ..schemas.paystub import FieldSource, PaystubRecord
from .amounts import MonetaryFieldPass
from .base import PatternPass
from .consistency import PayConsistencyPass
from .dates import PayDatesPass
from .deductions import DeductionPass
from .earnings import EarningsPass
from .entities import EntityPass
from .frequency import PayFrequencyPass
from .provider import ProviderPass

logger = logging.getLogger(__name__)

# Fields a pass may populate
RECORD_FIELDS = frozenset(f.name for f in dataclass_fields(PaystubRecord)) - {
    "raw_text",
    "acquisition_strategy",
}


def default_passes() -> list[PatternPass]:
    """Built-in passes. Frequency runs last because it reads the dates."""
    return [
        ProviderPass(),
        MonetaryFieldPass(),
        PayConsistencyPass(),
        PayDatesPass(),
        DeductionPass(),
        EarningsPass(),
        EntityPass(),
        PayFrequencyPass(),
    ]


class PatternMatcher:
    """
    Populates a PaystubRecord from normalized text.

    Passes are tried in order over the same text. A miss in one pass never
    blocks another; a pass that raises is logged and skipped.
    """

    def __init__(self, passes: Optional[list[PatternPass]] = None):
        self.passes: list[PatternPass] = passes if passes is not None else default_passes()

    def register(self, pattern_pass: PatternPass, before: Optional[str] = None) -> None:
        """
        Add a pass.

        Args:
            pattern_pass: Pass to add
            before: Name of an existing pass to insert in front of
                    (appended at the end when None or not found)
        """
        if before is not None:
            for i, existing in enumerate(self.passes):
                if existing.name == before:
                    self.passes.insert(i, pattern_pass)
                    return
        self.passes.append(pattern_pass)

    def match(
        self,
        text: str,
        source: FieldSource = FieldSource.PATTERN,
        acquisition_strategy: str = "",
    ) -> PaystubRecord:
        """
        Run every pass and build an immutable record.

        Args:
            text: Normalized document text
            source: Source tag for fields that carry one
            acquisition_strategy: Name of the strategy that produced text

        Returns:
            PaystubRecord (possibly with every optional field unset)
        """
        fields: dict[str, Any] = {}

        for pattern_pass in self.passes:
            try:
                found = pattern_pass.apply(text, dict(fields), source)
            except Exception:
                logger.warning("Pattern pass %s failed, skipping", pattern_pass.name, exc_info=True)
                continue

            unknown = set(found) - RECORD_FIELDS
            if unknown:
                logger.warning(
                    "Pattern pass %s returned unknown fields %s", pattern_pass.name, sorted(unknown)
                )

            logger.debug("Pattern pass %s found %s", pattern_pass.name, sorted(found))
            fields.update({k: v for k, v in found.items() if k in RECORD_FIELDS})

        return PaystubRecord(
            raw_text=text,
            acquisition_strategy=acquisition_strategy,
            **fields,
        )
