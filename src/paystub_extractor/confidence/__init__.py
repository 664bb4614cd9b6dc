"""
Confidence scoring module.

Aggregates per-field confidences into one overall score and routes
records to review states based on thresholds.
"""

from .aggregator import GENERIC_PROVIDER, collect_signals, compute_overall_confidence
from .scorer import ConfidenceScorer, ConfidenceThresholds, ReviewState

__all__ = [
    "GENERIC_PROVIDER",
    "collect_signals",
    "compute_overall_confidence",
    "ConfidenceScorer",
    "ConfidenceThresholds",
    "ReviewState",
]
