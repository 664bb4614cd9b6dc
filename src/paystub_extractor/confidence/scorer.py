"""
Review routing on top of the overall confidence.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..schemas.paystub import PaystubRecord


class ReviewState(str, Enum):
    """
    Review requirement based on overall confidence.

    AUTO: High confidence, can be accepted without review
    REVIEW: Medium confidence, a person should confirm
    MANUAL: Low confidence, a person must review and likely correct
    """

    AUTO = "AUTO"
    REVIEW = "REVIEW"
    MANUAL = "MANUAL"


@dataclass
class ConfidenceThresholds:
    """Configurable thresholds for review routing and caching."""

    auto_threshold: float = 0.85  # At or above: AUTO
    review_threshold: float = 0.60  # At or above: REVIEW, below: MANUAL

    # Records must score strictly above this to be cached
    min_cache_confidence: float = 0.7


class ConfidenceScorer:
    """Maps a record's overall confidence onto review and caching decisions."""

    def __init__(self, thresholds: Optional[ConfidenceThresholds] = None):
        self.thresholds = thresholds or ConfidenceThresholds()

    def review_state(self, record: PaystubRecord) -> ReviewState:
        """Route a record to AUTO, REVIEW or MANUAL."""
        return self.review_state_for(record.overall_confidence)

    def review_state_for(self, overall: float) -> ReviewState:
        if overall >= self.thresholds.auto_threshold:
            return ReviewState.AUTO
        elif overall >= self.thresholds.review_threshold:
            return ReviewState.REVIEW
        else:
            return ReviewState.MANUAL

    def is_cacheable(self, record: PaystubRecord) -> bool:
        """Low-confidence records are never cached."""
        return record.overall_confidence > self.thresholds.min_cache_confidence
