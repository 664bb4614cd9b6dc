"""
Extraction orchestrator: the single public entry point of the pipeline.

    bytes + content type
      -> cache lookup (content hash)
      -> text acquisition (PDF text layer / OCR)
      -> pattern matching
      -> confidence aggregation (computed on the record)
      -> conditional cache store
      -> PaystubRecord

Extraction is synchronous on the calling thread. Concurrent calls are
safe; the cache is the only shared mutable state.
"""

import logging
from typing import Any, Optional

from .acquisition import TextAcquirer, TesseractBackend, classify_content_type
from .acquisition.ocr import OCRBackend
from .cache import ResultCache
from .confidence import ConfidenceScorer, ConfidenceThresholds
from .config import ExtractionConfig
from .errors import UnsupportedContentTypeError
from .patterns import PatternMatcher
from .schemas.paystub import FieldSource, PaystubRecord

logger = logging.getLogger(__name__)


class ExtractionService:
    """
    Wires acquisition, pattern matching, confidence and cache together.

    Use as a context manager (or call close()) so the cache's background
    sweep thread is stopped.
    """

    def __init__(
        self,
        config: Optional[ExtractionConfig] = None,
        ocr_backend: Optional[OCRBackend] = None,
        cache: Optional[ResultCache] = None,
        matcher: Optional[PatternMatcher] = None,
        scorer: Optional[ConfidenceScorer] = None,
    ):
        """
        Initialize the service.

        Args:
            config: Extraction configuration (defaults if None)
            ocr_backend: OCR backend to use; built from config.ocr when OCR
                is enabled and none is given
            cache: Result cache; built from config.cache when caching is
                enabled and none is given
            matcher: Pattern matcher (default passes if None)
            scorer: Confidence scorer (thresholds from config if None)

        Raises:
            OCRInitializationError: OCR is enabled but Tesseract is unavailable
        """
        self.config = config or ExtractionConfig()

        if self.config.enable_ocr:
            if ocr_backend is None:
                ocr_backend = TesseractBackend(
                    language=self.config.ocr.language,
                    page_segmentation_mode=self.config.ocr.page_segmentation_mode,
                    dpi=self.config.ocr.dpi,
                    tesseract_cmd=self.config.ocr.tesseract_cmd,
                )
        else:
            ocr_backend = None
        self.ocr_backend = ocr_backend

        self.acquirer = TextAcquirer(
            ocr_backend=ocr_backend,
            min_text_length=self.config.min_text_length,
        )
        self.matcher = matcher or PatternMatcher()
        self.scorer = scorer or ConfidenceScorer(
            ConfidenceThresholds(
                auto_threshold=self.config.auto_threshold,
                review_threshold=self.config.review_threshold,
                min_cache_confidence=self.config.cache.min_confidence,
            )
        )

        if not self.config.cache_enabled:
            cache = None
        elif cache is None:
            cache = ResultCache(
                max_entries=self.config.cache.max_entries,
                ttl_seconds=self.config.cache.ttl_seconds,
                sweep_interval_seconds=self.config.cache.sweep_interval_seconds,
            )
        self.cache = cache
        if self.cache is not None:
            self.cache.start()

    @property
    def is_ocr_enabled(self) -> bool:
        return self.ocr_backend is not None

    def extract(
        self,
        data: bytes,
        content_type: str,
        timeout: Optional[float] = None,
    ) -> PaystubRecord:
        """
        Extract a pay statement record from file bytes.

        Args:
            data: Original file bytes
            content_type: Declared MIME type (PDF or image/*)
            timeout: Deadline in seconds for OCR (default from config)

        Returns:
            PaystubRecord, possibly sparse with overall_confidence 0

        Raises:
            UnsupportedContentTypeError: Neither PDF nor image
            OCRUnavailableError: Image but OCR disabled
            UnreadableDocumentError: No text could be acquired
            ExtractionTimeoutError: Deadline expired during OCR
        """
        if classify_content_type(content_type) is None:
            raise UnsupportedContentTypeError(content_type)

        cached = self._cache_get(data)
        if cached is not None:
            logger.debug("Cache hit")
            return cached
        logger.debug("Cache miss")

        if timeout is None:
            timeout = self.config.processing_timeout_seconds

        acquired = self.acquirer.acquire(data, content_type, timeout=timeout)

        source = FieldSource.OCR_HEURISTIC if acquired.uses_ocr else FieldSource.PATTERN
        record = self.matcher.match(
            acquired.text,
            source=source,
            acquisition_strategy=acquired.strategy,
        )

        if self.scorer.is_cacheable(record):
            self._cache_set(data, record)

        logger.info(
            "Extracted paystub: provider=%s confidence=%.2f strategy=%s",
            record.provider,
            record.overall_confidence,
            record.acquisition_strategy,
        )
        return record

    def _cache_get(self, data: bytes) -> Optional[PaystubRecord]:
        if self.cache is None:
            return None
        try:
            return self.cache.get(data)
        except Exception as e:
            logger.warning("Cache lookup failed, extracting anyway: %s", e)
            return None

    def _cache_set(self, data: bytes, record: PaystubRecord) -> None:
        if self.cache is None:
            return
        try:
            self.cache.set(data, record)
        except Exception as e:
            logger.warning("Cache store failed: %s", e)

    def capabilities(self) -> dict[str, Any]:
        """Health summary of what this service can do."""
        return {
            "pdf_extraction": True,
            "ocr": self.is_ocr_enabled,
            "ocr_backend": self.ocr_backend.name if self.ocr_backend else None,
            "cache": self.cache is not None,
            "cached_entries": len(self.cache) if self.cache is not None else 0,
        }

    def close(self) -> None:
        if self.cache is not None:
            self.cache.close()

    def __enter__(self) -> "ExtractionService":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
