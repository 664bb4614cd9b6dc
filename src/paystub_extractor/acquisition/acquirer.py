"""
Text acquisition chain.

Turns file bytes into normalized plain text by trying strategies in a
fixed order, cheapest first:

    PDF:   text layer -> OCR of rendered pages (if OCR is configured)
    Image: OCR

The first strategy that returns SUCCESS wins. Partial text from an
INSUFFICIENT attempt is kept as a fallback in case nothing better turns up.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import (
    ExtractionTimeoutError,
    OCRUnavailableError,
    UnreadableDocumentError,
    UnsupportedContentTypeError,
)
from .base import AcquisitionStatus, AcquisitionStrategy
from .normalize import normalize_text
from .ocr import ImageOCRStrategy, OCRBackend, PDFOCRStrategy
from .pdf_text import MIN_TEXT_LENGTH, PDFTextLayerStrategy

logger = logging.getLogger(__name__)


class ContentKind(str, Enum):
    PDF = "pdf"
    IMAGE = "image"


def classify_content_type(content_type: str) -> Optional[ContentKind]:
    """
    Map a MIME type to the kind of document it denotes.

    Parameters ("; charset=...") are ignored. Returns None for anything
    that is neither a PDF nor an image.
    """
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if "pdf" in media_type:
        return ContentKind.PDF
    if media_type.startswith("image/"):
        return ContentKind.IMAGE
    return None


@dataclass
class AcquiredText:
    """Normalized text plus provenance."""

    text: str
    strategy: str
    uses_ocr: bool


class TextAcquirer:
    """
    Routes a document through the acquisition strategies for its type.
    """

    def __init__(
        self,
        ocr_backend: Optional[OCRBackend] = None,
        min_text_length: int = MIN_TEXT_LENGTH,
    ):
        self.ocr_backend = ocr_backend
        self.min_text_length = min_text_length

    @property
    def ocr_enabled(self) -> bool:
        return self.ocr_backend is not None

    def strategies_for(self, kind: ContentKind) -> list[AcquisitionStrategy]:
        """Ordered strategy chain for a document kind."""
        if kind == ContentKind.PDF:
            chain: list[AcquisitionStrategy] = [PDFTextLayerStrategy(self.min_text_length)]
            if self.ocr_backend is not None:
                chain.append(PDFOCRStrategy(self.ocr_backend))
            return chain

        if self.ocr_backend is None:
            return []
        return [ImageOCRStrategy(self.ocr_backend)]

    def acquire(
        self,
        data: bytes,
        content_type: str,
        timeout: Optional[float] = None,
    ) -> AcquiredText:
        """
        Acquire normalized text from file bytes.

        Args:
            data: Original file bytes
            content_type: MIME type of the bytes
            timeout: Overall deadline in seconds for the whole chain

        Raises:
            UnsupportedContentTypeError: Neither PDF nor image
            OCRUnavailableError: Image but no OCR backend
            UnreadableDocumentError: No strategy produced any text
            ExtractionTimeoutError: Deadline expired during OCR with no text in hand
        """
        kind = classify_content_type(content_type)
        if kind is None:
            raise UnsupportedContentTypeError(content_type)

        if kind == ContentKind.IMAGE and self.ocr_backend is None:
            raise OCRUnavailableError(
                f"Cannot read {content_type} without OCR. Enable OCR to process images."
            )

        deadline = time.monotonic() + timeout if timeout else None
        fallback: Optional[AcquiredText] = None

        for strategy in self.strategies_for(kind):
            remaining = None
            if deadline is not None:
                remaining = deadline - time.monotonic()

            logger.debug("Trying acquisition strategy %s", strategy.name)
            try:
                if remaining is not None and remaining <= 0 and strategy.uses_ocr:
                    raise ExtractionTimeoutError(
                        f"Deadline expired before {strategy.name} could run"
                    )
                result = strategy.acquire(data, timeout=remaining)
            except ExtractionTimeoutError as e:
                # Partial text already in hand beats a timeout
                if fallback is None:
                    raise
                logger.warning("%s hit the deadline: %s", strategy.name, e)
                break

            if result.status == AcquisitionStatus.SUCCESS:
                logger.debug("Acquired text via %s", strategy.name)
                return AcquiredText(
                    text=normalize_text(result.text),
                    strategy=strategy.name,
                    uses_ocr=strategy.uses_ocr,
                )

            if result.status == AcquisitionStatus.INSUFFICIENT:
                logger.debug("%s returned insufficient text", strategy.name)
                if fallback is None and result.text.strip():
                    fallback = AcquiredText(
                        text=result.text,
                        strategy=strategy.name,
                        uses_ocr=strategy.uses_ocr,
                    )
            else:
                logger.debug("%s failed: %s", strategy.name, result.error)

        if fallback is not None:
            logger.warning(
                "No strategy produced sufficient text, using partial text from %s",
                fallback.strategy,
            )
            fallback.text = normalize_text(fallback.text)
            return fallback

        if self.ocr_backend is None:
            raise UnreadableDocumentError(
                "PDF has no usable text layer and OCR is disabled"
            )
        raise UnreadableDocumentError("No text could be acquired from the document")
