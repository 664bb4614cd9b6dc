"""
Extraction error taxonomy.

Only failures to acquire any text at all are errors. Parsing misses are
not: they leave fields unset and lower the overall confidence instead.
"""


class ExtractionError(Exception):
    """Base class for all pipeline errors."""

    pass


class UnsupportedContentTypeError(ExtractionError):
    """Content type is neither PDF nor image. Caller error, never retried."""

    def __init__(self, content_type: str):
        self.content_type = content_type
        super().__init__(f"Unsupported content type: {content_type!r}")


class UnreadableDocumentError(ExtractionError):
    """No usable text could be acquired by any configured strategy."""

    pass


class OCRUnavailableError(ExtractionError):
    """An image arrived but no OCR backend is configured."""

    pass


class OCRInitializationError(ExtractionError):
    """OCR is enabled but the backend could not be initialized."""

    pass


class ExtractionTimeoutError(ExtractionError):
    """The caller's deadline expired while optical recognition was running."""

    pass
