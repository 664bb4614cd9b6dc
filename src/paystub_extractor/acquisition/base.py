"""
Base text acquisition interface and common types.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AcquisitionStatus(str, Enum):
    """
    Outcome of one acquisition strategy.

    SUCCESS: Usable text, stop trying further strategies
    INSUFFICIENT: Some text, but too little to trust; try the next strategy
    FAILED: No text; try the next strategy
    """

    SUCCESS = "success"
    INSUFFICIENT = "insufficient"
    FAILED = "failed"


@dataclass
class AcquisitionResult:
    """Result from an acquisition attempt."""

    status: AcquisitionStatus
    strategy: str
    text: str = ""
    error: Optional[str] = None  # Debug info for FAILED


class AcquisitionStrategy(ABC):
    """
    Base class for all text acquisition strategies.

    Each strategy implements one way of turning file bytes into text:
    - PDF text layer
    - OCR of an image
    - OCR of rendered PDF pages
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Strategy name for logging and provenance."""
        pass

    @property
    def uses_ocr(self) -> bool:
        """Whether the text comes from optical recognition."""
        return False

    @abstractmethod
    def acquire(self, data: bytes, timeout: Optional[float] = None) -> AcquisitionResult:
        """
        Acquire text from file bytes.

        Args:
            data: Original file bytes
            timeout: Seconds left before the caller's deadline (None = no limit)

        Returns:
            AcquisitionResult with status and text
        """
        pass
