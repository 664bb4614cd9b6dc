"""
Optical character recognition using Tesseract.

The OCR path is the pipeline's only long-running, blocking stage. Every
call takes the time left before the caller's deadline and stops when it
runs out.
"""

import io
import logging
import time
from abc import ABC, abstractmethod
from typing import Optional

import fitz  # PyMuPDF
import pytesseract
from PIL import Image, UnidentifiedImageError

from ..errors import ExtractionTimeoutError, OCRInitializationError
from .base import AcquisitionResult, AcquisitionStatus, AcquisitionStrategy

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "eng"
DEFAULT_PAGE_SEGMENTATION_MODE = 6  # Assume a single uniform block of text
DEFAULT_DPI = 300


class OCRBackendError(Exception):
    """Raised when the OCR backend cannot read a document."""

    pass


class OCRBackend(ABC):
    """Optical recognition capability."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def recognize_image(self, data: bytes, timeout: Optional[float] = None) -> str:
        """
        Recognize text in an image file.

        Raises:
            OCRBackendError: If the image cannot be read
            ExtractionTimeoutError: If the timeout expires
        """
        pass

    @abstractmethod
    def recognize_pdf(self, data: bytes, timeout: Optional[float] = None) -> str:
        """
        Recognize text in every page of a PDF.

        Raises:
            OCRBackendError: If the PDF cannot be rendered or read
            ExtractionTimeoutError: If the timeout expires
        """
        pass


def _remaining(deadline: Optional[float]) -> Optional[float]:
    """Seconds left before deadline. Raises once it has passed."""
    if deadline is None:
        return None
    remaining = deadline - time.monotonic()
    if remaining <= 0:
        raise ExtractionTimeoutError("OCR deadline expired")
    return remaining


class TesseractBackend(OCRBackend):
    """
    Tesseract via pytesseract.

    Construction fails fast when the tesseract binary is not available,
    so callers never discover a missing backend on first use.
    """

    def __init__(
        self,
        language: str = DEFAULT_LANGUAGE,
        page_segmentation_mode: int = DEFAULT_PAGE_SEGMENTATION_MODE,
        dpi: int = DEFAULT_DPI,
        tesseract_cmd: Optional[str] = None,
    ):
        """
        Initialize the backend.

        Args:
            language: Tesseract language code (e.g., 'eng')
            page_segmentation_mode: Tesseract --psm value
            dpi: Resolution for rendering PDF pages
            tesseract_cmd: Path to the tesseract binary (default: PATH lookup)

        Raises:
            OCRInitializationError: If tesseract cannot be found or run
        """
        self.language = language
        self.page_segmentation_mode = page_segmentation_mode
        self.dpi = dpi

        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

        try:
            self.version = str(pytesseract.get_tesseract_version())
        except (pytesseract.TesseractNotFoundError, OSError) as e:
            raise OCRInitializationError(
                f"Tesseract not available ({e}). Install tesseract-ocr or disable OCR."
            ) from e

        logger.info("Tesseract %s initialized (lang=%s)", self.version, self.language)

    @property
    def name(self) -> str:
        return "tesseract"

    @property
    def config(self) -> str:
        return f"--psm {self.page_segmentation_mode}"

    def _image_to_string(self, image: Image.Image, timeout: Optional[float]) -> str:
        try:
            return pytesseract.image_to_string(
                image,
                lang=self.language,
                config=self.config,
                timeout=timeout or 0,
            )
        except pytesseract.TesseractError as e:
            raise OCRBackendError(f"Tesseract failed: {e}") from e
        except RuntimeError as e:
            # pytesseract signals its own timeout with a bare RuntimeError
            raise ExtractionTimeoutError(f"OCR timed out: {e}") from e

    def recognize_image(self, data: bytes, timeout: Optional[float] = None) -> str:
        deadline = time.monotonic() + timeout if timeout else None

        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise OCRBackendError(f"Unreadable image: {e}") from e

        return self._image_to_string(image, _remaining(deadline))

    def recognize_pdf(self, data: bytes, timeout: Optional[float] = None) -> str:
        deadline = time.monotonic() + timeout if timeout else None
        page_texts: list[str] = []

        try:
            with fitz.open(stream=data, filetype="pdf") as doc:
                for page_number, page in enumerate(doc, start=1):
                    pix = page.get_pixmap(dpi=self.dpi)
                    image = Image.open(io.BytesIO(pix.tobytes("png")))
                    try:
                        text = self._image_to_string(image, _remaining(deadline))
                    except OCRBackendError as e:
                        # Continue even if one page fails
                        logger.warning("OCR failed on page %d: %s", page_number, e)
                        continue
                    page_texts.append(text)
        except (RuntimeError, ValueError) as e:
            raise OCRBackendError(f"Cannot render PDF for OCR: {e}") from e

        return "\n\n".join(page_texts)


class _OCRStrategy(AcquisitionStrategy):
    def __init__(self, backend: OCRBackend):
        self.backend = backend

    @property
    def uses_ocr(self) -> bool:
        return True

    def _recognize(self, data: bytes, timeout: Optional[float]) -> str:
        raise NotImplementedError

    def acquire(self, data: bytes, timeout: Optional[float] = None) -> AcquisitionResult:
        try:
            text = self._recognize(data, timeout)
        except OCRBackendError as e:
            logger.warning("%s failed: %s", self.name, e)
            return AcquisitionResult(
                status=AcquisitionStatus.FAILED,
                strategy=self.name,
                error=str(e),
            )

        status = AcquisitionStatus.SUCCESS if text.strip() else AcquisitionStatus.INSUFFICIENT
        return AcquisitionResult(status=status, strategy=self.name, text=text)


class ImageOCRStrategy(_OCRStrategy):
    """OCR an image file."""

    @property
    def name(self) -> str:
        return "image_ocr"

    def _recognize(self, data: bytes, timeout: Optional[float]) -> str:
        return self.backend.recognize_image(data, timeout)


class PDFOCRStrategy(_OCRStrategy):
    """Render PDF pages and OCR them (scanned PDFs)."""

    @property
    def name(self) -> str:
        return "pdf_ocr"

    def _recognize(self, data: bytes, timeout: Optional[float]) -> str:
        return self.backend.recognize_pdf(data, timeout)
