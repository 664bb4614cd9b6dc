"""Test fixtures and utilities."""

import io
from typing import Optional

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from paystub_extractor.acquisition import OCRBackend
from paystub_extractor.config import ExtractionConfig

# Digital paystub as produced by a payroll provider
SAMPLE_PAYSTUB_TEXT = """
ACME Corporation
100 Industrial Way
Springfield, IL 62701

EARNINGS STATEMENT
Processed by ADP Workforce Now

Employee Name: Jane Doe
Employee ID: E12345

Pay Period: 01/01/2024 - 01/14/2024
Pay Date: 01/19/2024

Gross Pay: $5,432.10
Net Pay: $4,000.00
YTD Gross: $5,432.10
YTD Net Pay: $4,000.00

Federal Income Tax: $432.10
State Tax: $150.00
Social Security: $336.79
Medicare: $78.77
Health Insurance: $120.00
401k Contribution: $314.44
"""

# Monthly statement without provider branding, month-name dates
SAMPLE_MONTHLY_TEXT = """
Globex Industries
Statement of Earnings

Employee: John Q. Public
Emp #: 88412

Pay Period: March 1, 2024 to March 31, 2024
Check Date: Apr 5, 2024

Gross Earnings 7,250.00
Net Amount 5,118.42

FICA 449.50
Medicare 105.13
Dental 32.00
"""

# Typical OCR output of a scanned stub: ragged spacing, no provider
SAMPLE_OCR_TEXT = """
Initech LLC

Employee Name:   Peter   Gibbons
Pay Frequency: Bi-Weekly

Gross Pay   2,100.00
Net Pay   1,650.25
Federal Tax   250.00
"""


class FakeOCRBackend(OCRBackend):
    """OCR backend returning canned text, counting calls."""

    def __init__(self, text: str = "", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.calls = 0
        self.timeouts: list[Optional[float]] = []

    @property
    def name(self) -> str:
        return "fake"

    def _recognize(self, timeout: Optional[float]) -> str:
        self.calls += 1
        self.timeouts.append(timeout)
        if self.error is not None:
            raise self.error
        return self.text

    def recognize_image(self, data: bytes, timeout: Optional[float] = None) -> str:
        return self._recognize(timeout)

    def recognize_pdf(self, data: bytes, timeout: Optional[float] = None) -> str:
        return self._recognize(timeout)


def build_pdf(text: str = "") -> bytes:
    """Single-page PDF with one text line per input line (blank when empty)."""
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=letter)
    y = 750
    for line in text.strip().splitlines():
        if line.strip():
            pdf.drawString(72, y, line.strip())
        y -= 14
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


@pytest.fixture
def sample_paystub_text() -> str:
    """Digital ADP-style paystub text."""
    return SAMPLE_PAYSTUB_TEXT


@pytest.fixture
def sample_monthly_text() -> str:
    """Monthly paystub with month-name dates."""
    return SAMPLE_MONTHLY_TEXT


@pytest.fixture
def sample_ocr_text() -> str:
    """Text as recognized from a scanned paystub."""
    return SAMPLE_OCR_TEXT


@pytest.fixture
def fake_ocr():
    """Factory for fake OCR backends."""
    return FakeOCRBackend


@pytest.fixture
def make_pdf():
    """Factory for in-memory PDFs."""
    return build_pdf


@pytest.fixture
def paystub_pdf() -> bytes:
    """Digital paystub PDF with a full text layer."""
    return build_pdf(SAMPLE_PAYSTUB_TEXT)


@pytest.fixture
def blank_pdf() -> bytes:
    """PDF with no text layer, like a scan."""
    return build_pdf("")


@pytest.fixture
def no_ocr_config() -> ExtractionConfig:
    """Configuration that needs no Tesseract binary."""
    return ExtractionConfig(enable_ocr=False)
