"""
Overall confidence aggregation.

Unweighted mean over the signals that are present on a record. Absent
signals do not drag the score down; a record with no signals scores 0.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..schemas.paystub import PaystubRecord

# Fixed proxies for signals that carry no confidence of their own
PAY_PERIOD_CONFIDENCE = 0.8
PROVIDER_CONFIDENCE = 0.9

GENERIC_PROVIDER = "Generic"


def collect_signals(record: PaystubRecord) -> list[float]:
    """Return the confidence of every signal present on the record."""
    signals: list[float] = []

    if record.gross_pay is not None:
        signals.append(record.gross_pay.confidence)

    if record.net_pay is not None:
        signals.append(record.net_pay.confidence)

    if record.pay_period_start is not None and record.pay_period_end is not None:
        signals.append(PAY_PERIOD_CONFIDENCE)

    if record.tax_deductions:
        tax_total = sum(d.confidence for d in record.tax_deductions)
        signals.append(tax_total / len(record.tax_deductions))

    if record.provider and record.provider != GENERIC_PROVIDER:
        signals.append(PROVIDER_CONFIDENCE)

    return signals


def compute_overall_confidence(record: PaystubRecord) -> float:
    """
    Reduce per-field confidences into one score in [0, 1].

    Returns exactly 0.0 when nothing was extracted.
    """
    signals = collect_signals(record)
    if not signals:
        return 0.0

    overall = sum(signals) / len(signals)

    # Clamp to [0, 1]
    return max(0.0, min(1.0, overall))
