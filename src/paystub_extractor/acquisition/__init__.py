"""
Text acquisition: turn PDF and image bytes into normalized plain text.
"""

from .acquirer import AcquiredText, ContentKind, TextAcquirer, classify_content_type
from .base import AcquisitionResult, AcquisitionStatus, AcquisitionStrategy
from .normalize import normalize_text
from .ocr import (
    ImageOCRStrategy,
    OCRBackend,
    OCRBackendError,
    PDFOCRStrategy,
    TesseractBackend,
)
from .pdf_text import PDFTextLayerStrategy

__all__ = [
    "AcquiredText",
    "AcquisitionResult",
    "AcquisitionStatus",
    "AcquisitionStrategy",
    "ContentKind",
    "ImageOCRStrategy",
    "OCRBackend",
    "OCRBackendError",
    "PDFOCRStrategy",
    "PDFTextLayerStrategy",
    "TesseractBackend",
    "TextAcquirer",
    "classify_content_type",
    "normalize_text",
]
