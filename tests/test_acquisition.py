"""Tests for text acquisition."""

import io
from unittest.mock import patch

import pytest
import pytesseract
from PIL import Image

from paystub_extractor.acquisition import (
    AcquisitionStatus,
    ContentKind,
    ImageOCRStrategy,
    OCRBackendError,
    PDFOCRStrategy,
    PDFTextLayerStrategy,
    TesseractBackend,
    TextAcquirer,
    classify_content_type,
    normalize_text,
)
from paystub_extractor.errors import (
    ExtractionTimeoutError,
    OCRInitializationError,
    OCRUnavailableError,
    UnreadableDocumentError,
    UnsupportedContentTypeError,
)


def _png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (20, 20), "white").save(buffer, format="PNG")
    return buffer.getvalue()


class TestNormalizeText:
    """Tests for text normalization."""

    def test_collapses_horizontal_whitespace(self):
        assert normalize_text("Gross   Pay:\t\t$100.00") == "Gross Pay: $100.00"

    def test_trims_lines(self):
        assert normalize_text("  a  \n  b  ") == "a\nb"

    def test_collapses_blank_lines(self):
        assert normalize_text("a\r\n\r\n\r\n\r\nb\n\nc") == "a\n\nb\n\nc"

    def test_non_breaking_space(self):
        assert normalize_text("Net\u00a0\u00a0Pay") == "Net Pay"

    def test_empty(self):
        assert normalize_text("") == ""
        assert normalize_text(" \n\n ") == ""


class TestClassifyContentType:
    """Tests for content type routing."""

    @pytest.mark.parametrize(
        "content_type,expected",
        [
            ("application/pdf", ContentKind.PDF),
            ("application/x-pdf", ContentKind.PDF),
            ("application/pdf; charset=binary", ContentKind.PDF),
            ("image/png", ContentKind.IMAGE),
            ("IMAGE/JPEG", ContentKind.IMAGE),
            ("text/plain", None),
            ("", None),
        ],
    )
    def test_classification(self, content_type, expected):
        assert classify_content_type(content_type) == expected


class TestPDFTextLayerStrategy:
    """Tests for native PDF text extraction."""

    def test_digital_pdf(self, paystub_pdf):
        result = PDFTextLayerStrategy().acquire(paystub_pdf)

        assert result.status == AcquisitionStatus.SUCCESS
        assert result.strategy == "pdf_text_layer"
        assert "Gross Pay: $5,432.10" in result.text

    def test_short_text_insufficient(self, make_pdf):
        """Short text layers are kept but marked insufficient."""
        result = PDFTextLayerStrategy().acquire(make_pdf("Gross Pay: $100.00"))

        assert result.status == AcquisitionStatus.INSUFFICIENT
        assert "Gross Pay" in result.text

    def test_blank_pdf(self, blank_pdf):
        result = PDFTextLayerStrategy().acquire(blank_pdf)

        assert result.status == AcquisitionStatus.INSUFFICIENT
        assert result.text.strip() == ""

    def test_corrupt_pdf(self):
        result = PDFTextLayerStrategy().acquire(b"this is not a pdf")

        assert result.status == AcquisitionStatus.FAILED
        assert result.error

    def test_custom_threshold(self, make_pdf):
        result = PDFTextLayerStrategy(min_text_length=5).acquire(make_pdf("Gross Pay: $100.00"))

        assert result.status == AcquisitionStatus.SUCCESS


class TestOCRStrategies:
    """Tests for OCR-backed strategies."""

    def test_image_success(self, fake_ocr):
        backend = fake_ocr(text="Net Pay 10.00")

        result = ImageOCRStrategy(backend).acquire(b"img", timeout=5)

        assert result.status == AcquisitionStatus.SUCCESS
        assert result.text == "Net Pay 10.00"
        assert backend.timeouts == [5]

    def test_empty_recognition_insufficient(self, fake_ocr):
        result = ImageOCRStrategy(fake_ocr(text="  ")).acquire(b"img")

        assert result.status == AcquisitionStatus.INSUFFICIENT

    def test_backend_error_fails(self, fake_ocr):
        backend = fake_ocr(error=OCRBackendError("bad image"))

        result = PDFOCRStrategy(backend).acquire(b"pdf")

        assert result.status == AcquisitionStatus.FAILED
        assert result.error == "bad image"

    def test_timeout_propagates(self, fake_ocr):
        backend = fake_ocr(error=ExtractionTimeoutError("too slow"))

        with pytest.raises(ExtractionTimeoutError):
            ImageOCRStrategy(backend).acquire(b"img", timeout=0.1)

    def test_uses_ocr(self, fake_ocr):
        assert ImageOCRStrategy(fake_ocr()).uses_ocr
        assert PDFOCRStrategy(fake_ocr()).uses_ocr
        assert not PDFTextLayerStrategy().uses_ocr


class TestTextAcquirer:
    """Tests for the acquisition chain."""

    def test_unsupported_content_type(self, fake_ocr):
        backend = fake_ocr(text="anything")

        with pytest.raises(UnsupportedContentTypeError) as exc_info:
            TextAcquirer(backend).acquire(b"data", "text/plain")

        assert exc_info.value.content_type == "text/plain"
        assert backend.calls == 0

    def test_image_without_ocr(self):
        with pytest.raises(OCRUnavailableError):
            TextAcquirer().acquire(_png_bytes(), "image/png")

    def test_digital_pdf_skips_ocr(self, fake_ocr, paystub_pdf):
        backend = fake_ocr(text="should not be used")

        acquired = TextAcquirer(backend).acquire(paystub_pdf, "application/pdf")

        assert acquired.strategy == "pdf_text_layer"
        assert not acquired.uses_ocr
        assert "Net Pay: $4,000.00" in acquired.text
        assert backend.calls == 0

    def test_scanned_pdf_falls_back_to_ocr(self, fake_ocr, blank_pdf, sample_ocr_text):
        backend = fake_ocr(text=sample_ocr_text)

        acquired = TextAcquirer(backend).acquire(blank_pdf, "application/pdf", timeout=30)

        assert acquired.strategy == "pdf_ocr"
        assert acquired.uses_ocr
        assert acquired.text == normalize_text(sample_ocr_text)
        assert backend.calls == 1
        assert backend.timeouts[0] is not None and 0 < backend.timeouts[0] <= 30

    def test_partial_text_returned_when_ocr_disabled(self, make_pdf):
        """Short text is better than nothing."""
        acquired = TextAcquirer().acquire(make_pdf("Gross   Pay: $100.00"), "application/pdf")

        assert acquired.strategy == "pdf_text_layer"
        assert acquired.text == "Gross Pay: $100.00"

    def test_partial_text_kept_when_ocr_finds_nothing(self, fake_ocr, make_pdf):
        backend = fake_ocr(text="")

        acquired = TextAcquirer(backend).acquire(make_pdf("Net Pay: 5.00"), "application/pdf")

        assert acquired.strategy == "pdf_text_layer"
        assert acquired.text == "Net Pay: 5.00"
        assert backend.calls == 1

    def test_partial_text_kept_when_ocr_times_out(self, fake_ocr, make_pdf):
        """A deadline during OCR falls back to the short text layer."""
        backend = fake_ocr(error=ExtractionTimeoutError("deadline"))
        pdf = make_pdf("Gross Pay: $2,000.00\nNet Pay: $1,500.00")

        acquired = TextAcquirer(backend).acquire(pdf, "application/pdf", timeout=5)

        assert acquired.strategy == "pdf_text_layer"
        assert acquired.text == "Gross Pay: $2,000.00\nNet Pay: $1,500.00"
        assert backend.calls == 1

    def test_timeout_without_partial_text(self, fake_ocr, blank_pdf):
        backend = fake_ocr(error=ExtractionTimeoutError("deadline"))

        with pytest.raises(ExtractionTimeoutError):
            TextAcquirer(backend).acquire(blank_pdf, "application/pdf", timeout=5)

    def test_blank_pdf_without_ocr(self, blank_pdf):
        with pytest.raises(UnreadableDocumentError, match="OCR is disabled"):
            TextAcquirer().acquire(blank_pdf, "application/pdf")

    def test_nothing_readable(self, fake_ocr):
        backend = fake_ocr(error=OCRBackendError("cannot render"))

        with pytest.raises(UnreadableDocumentError):
            TextAcquirer(backend).acquire(b"garbage", "application/pdf")

    def test_image_ocr(self, fake_ocr):
        backend = fake_ocr(text="Gross Pay 1.00")

        acquired = TextAcquirer(backend).acquire(b"img", "image/jpeg")

        assert acquired.strategy == "image_ocr"
        assert acquired.uses_ocr

    def test_image_ocr_timeout(self, fake_ocr):
        backend = fake_ocr(error=ExtractionTimeoutError("deadline"))

        with pytest.raises(ExtractionTimeoutError):
            TextAcquirer(backend).acquire(b"img", "image/png", timeout=1)


class TestTesseractBackend:
    """Tests for the Tesseract backend (binary mocked)."""

    @pytest.fixture
    def backend(self):
        with patch("pytesseract.get_tesseract_version", return_value="5.3.0"):
            yield TesseractBackend()

    def test_missing_binary_fails_fast(self):
        with patch(
            "pytesseract.get_tesseract_version",
            side_effect=pytesseract.TesseractNotFoundError(),
        ):
            with pytest.raises(OCRInitializationError):
                TesseractBackend()

    def test_custom_command(self):
        with patch("pytesseract.get_tesseract_version", return_value="5.3.0"):
            with patch.object(pytesseract.pytesseract, "tesseract_cmd", "tesseract"):
                TesseractBackend(tesseract_cmd="/opt/tesseract/bin/tesseract")

                assert pytesseract.pytesseract.tesseract_cmd == "/opt/tesseract/bin/tesseract"

    def test_recognize_image(self, backend):
        with patch("pytesseract.image_to_string", return_value="Gross Pay 1.00") as ocr:
            text = backend.recognize_image(_png_bytes())

        assert text == "Gross Pay 1.00"
        _, kwargs = ocr.call_args
        assert kwargs["lang"] == "eng"
        assert kwargs["config"] == "--psm 6"

    def test_unreadable_image(self, backend):
        with pytest.raises(OCRBackendError):
            backend.recognize_image(b"not an image")

    def test_tesseract_timeout(self, backend):
        with patch(
            "pytesseract.image_to_string",
            side_effect=RuntimeError("Tesseract process timeout"),
        ):
            with pytest.raises(ExtractionTimeoutError):
                backend.recognize_image(_png_bytes(), timeout=1)

    def test_recognize_pdf_pages(self, backend, make_pdf):
        with patch("pytesseract.image_to_string", return_value="page text") as ocr:
            text = backend.recognize_pdf(make_pdf("Anything"))

        assert text == "page text"
        assert ocr.call_count == 1

    def test_recognize_corrupt_pdf(self, backend):
        with pytest.raises(OCRBackendError):
            backend.recognize_pdf(b"not a pdf")
