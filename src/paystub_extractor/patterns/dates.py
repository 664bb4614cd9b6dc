"""
Pay period and pay date extraction.

Supported formats (tried in order, first parse wins):
- Numeric, month first: 01/15/2024, 1-15-2024, 01/15/24
- ISO: 2024-01-15
- Numeric, day first (when month first cannot parse): 15/01/2024
- Month names: Jan 15, 2024 / January 15 2024 / 15 January 2024

Date extraction is best-effort: unparsable text leaves the field unset.
"""

import re
from datetime import date, datetime
from typing import Any, Optional

from ..schemas.paystub import FieldSource
from .base import PatternPass

DATE_FORMATS = [
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%Y-%m-%d",
    "%m/%d/%y",
    "%m-%d-%y",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
    "%B %d %Y",
    "%d %b %Y",
    "%d %B %Y",
]

_MONTH = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|"
    r"Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)\.?"
)

DATE_TOKEN = (
    r"(?:\d{4}-\d{1,2}-\d{1,2}"
    r"|\d{1,2}[/-]\d{1,2}[/-]\d{2,4}"
    r"|" + _MONTH + r"\s+\d{1,2}(?:st|nd|rd|th)?,?\s+\d{4}"
    r"|\d{1,2}(?:st|nd|rd|th)?\s+" + _MONTH + r",?\s+\d{4})"
)

DATE_TOKEN_RE = re.compile(r"\b" + DATE_TOKEN + r"\b", re.IGNORECASE)

RANGE_SEPARATOR = r"\s*(?:-|–|—|to|through|thru)\s*"

PERIOD_RANGE_RE = re.compile(
    r"pay\s*period(?:\s*dates?)?[:\s]*"
    r"(?P<start>" + DATE_TOKEN + r")" + RANGE_SEPARATOR + r"(?P<end>" + DATE_TOKEN + r")",
    re.IGNORECASE,
)

PERIOD_START_RE = re.compile(
    r"period\s*(?:begin(?:ning)?|start(?:ing)?)(?:\s*date)?[:\s]*(?P<date>" + DATE_TOKEN + r")",
    re.IGNORECASE,
)

PERIOD_END_RE = re.compile(
    r"period\s*(?:end(?:ing)?)(?:\s*date)?[:\s]*(?P<date>" + DATE_TOKEN + r")",
    re.IGNORECASE,
)

PAY_DATE_RE = re.compile(
    r"(?:pay|payment|check)\s*date[:\s]*(?P<date>" + DATE_TOKEN + r")",
    re.IGNORECASE,
)

_ORDINAL = re.compile(r"(\d)(?:st|nd|rd|th)\b", re.IGNORECASE)


def _clean_date_text(text: str) -> str:
    cleaned = _ORDINAL.sub(r"\1", text.strip())
    cleaned = cleaned.replace(".", "")
    cleaned = re.sub(r"\bsept\b", "Sep", cleaned, flags=re.IGNORECASE)
    return re.sub(r"\s+", " ", cleaned)


def parse_date(text: str) -> Optional[date]:
    """Parse a date string with the first matching format, or None."""
    if not text:
        return None

    cleaned = _clean_date_text(text)
    for date_format in DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, date_format).date()
        except ValueError:
            continue
    return None


def find_dates(text: str) -> list[date]:
    """All parsable dates in text, in order of appearance."""
    found = []
    for match in DATE_TOKEN_RE.finditer(text):
        parsed = parse_date(match.group(0))
        if parsed:
            found.append(parsed)
    return found


def _search_date(pattern: re.Pattern, text: str) -> Optional[date]:
    match = pattern.search(text)
    if not match:
        return None
    return parse_date(match.group("date"))


class PayDatesPass(PatternPass):
    """Pay period start/end and pay date."""

    @property
    def name(self) -> str:
        return "dates"

    def apply(
        self,
        text: str,
        fields: dict[str, Any],
        source: FieldSource = FieldSource.PATTERN,
    ) -> dict[str, Any]:
        found: dict[str, Any] = {}

        range_match = PERIOD_RANGE_RE.search(text)
        if range_match:
            start = parse_date(range_match.group("start"))
            end = parse_date(range_match.group("end"))
        else:
            # "Period Beginning: ... / Period Ending: ..." layouts
            start = _search_date(PERIOD_START_RE, text)
            end = _search_date(PERIOD_END_RE, text)

        if start:
            found["pay_period_start"] = start
        if end:
            found["pay_period_end"] = end

        pay_date = _search_date(PAY_DATE_RE, text)
        if pay_date:
            found["pay_date"] = pay_date

        return found
