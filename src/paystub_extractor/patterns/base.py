"""
Base pattern pass interface.
"""

from abc import ABC, abstractmethod
from typing import Any

from ..schemas.paystub import FieldSource


class PatternPass(ABC):
    """
    Base class for all pattern passes.

    Each pass detects one family of fields in normalized text and returns
    the fields it found. A miss returns an empty dict, never raises.
    Passes are independent of each other, except that a pass may read
    fields found by passes that ran before it.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Pass name for logging."""
        pass

    @abstractmethod
    def apply(
        self,
        text: str,
        fields: dict[str, Any],
        source: FieldSource = FieldSource.PATTERN,
    ) -> dict[str, Any]:
        """
        Detect fields in text.

        Args:
            text: Normalized document text
            fields: Fields found so far (read-only for the pass)
            source: Source tag for fields that carry one

        Returns:
            Mapping of PaystubRecord field name to value
        """
        pass
