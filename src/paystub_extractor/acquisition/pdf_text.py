"""
Native PDF text layer extraction using PyMuPDF.

Cheap and deterministic; works for digitally generated documents.
Scanned documents wrapped in a PDF yield little or no text here.
"""

import logging
from typing import Optional

import fitz  # PyMuPDF

from .base import AcquisitionResult, AcquisitionStatus, AcquisitionStrategy

logger = logging.getLogger(__name__)

# Below this many characters the PDF is assumed to be a scan
MIN_TEXT_LENGTH = 100


def extract_pdf_text(data: bytes) -> str:
    """
    Extract the text layer of every page.

    Raises:
        RuntimeError/ValueError: If the bytes are not a readable PDF
    """
    with fitz.open(stream=data, filetype="pdf") as doc:
        if doc.needs_pass:
            raise ValueError("PDF is encrypted")
        return "\n".join(page.get_text() for page in doc)


class PDFTextLayerStrategy(AcquisitionStrategy):
    """Read the PDF's embedded text layer."""

    def __init__(self, min_text_length: int = MIN_TEXT_LENGTH):
        self.min_text_length = min_text_length

    @property
    def name(self) -> str:
        return "pdf_text_layer"

    def acquire(self, data: bytes, timeout: Optional[float] = None) -> AcquisitionResult:
        try:
            text = extract_pdf_text(data)
        except (RuntimeError, ValueError) as e:
            logger.debug("PDF text layer unreadable: %s", e)
            return AcquisitionResult(
                status=AcquisitionStatus.FAILED,
                strategy=self.name,
                error=str(e),
            )

        if len(text.strip()) > self.min_text_length:
            return AcquisitionResult(
                status=AcquisitionStatus.SUCCESS,
                strategy=self.name,
                text=text,
            )

        return AcquisitionResult(
            status=AcquisitionStatus.INSUFFICIENT,
            strategy=self.name,
            text=text,
        )
