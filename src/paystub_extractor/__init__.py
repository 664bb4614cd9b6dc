"""
Pay statement → Text acquisition → Pattern extraction → Confidence-scored record

A deterministic, testable pipeline that turns uploaded pay statements
(PDF or image) into structured records of earnings, deductions and
pay-period metadata, with per-field confidence and an overall trust score.
"""

__version__ = "0.1.0"
