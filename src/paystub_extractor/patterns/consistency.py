"""
Cross-field sanity checks on monetary fields.
"""

import logging
from typing import Any

from ..schemas.paystub import FieldSource
from .base import PatternPass

logger = logging.getLogger(__name__)


class PayConsistencyPass(PatternPass):
    """
    Net pay can never exceed gross pay.

    When it does, the two labels were almost certainly read from swapped
    columns, so the values are exchanged. Confidences travel with their
    values and the overall score is unaffected.
    """

    @property
    def name(self) -> str:
        return "consistency"

    def apply(
        self,
        text: str,
        fields: dict[str, Any],
        source: FieldSource = FieldSource.PATTERN,
    ) -> dict[str, Any]:
        gross = fields.get("gross_pay")
        net = fields.get("net_pay")
        if gross is None or net is None:
            return {}
        if gross.value.currency != net.value.currency:
            return {}

        if net.value.amount > gross.value.amount:
            logger.warning(
                "Net pay %s exceeds gross pay %s, swapping",
                net.value.amount,
                gross.value.amount,
            )
            return {"gross_pay": net, "net_pay": gross}
        return {}
