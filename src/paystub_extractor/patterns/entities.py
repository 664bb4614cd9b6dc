"""
Employee and employer extraction.
"""

import re
from typing import Any, Optional

from ..schemas.paystub import FieldSource
from .base import PatternPass

# "Employee: Jane Doe" / "Employee Name: Jane Doe", never "Employee ID".
# The name stops at a following label on the same line (two-column layouts).
_NAME_WORD = r"[A-Za-z][A-Za-z.'\-]*"
_NEXT_LABEL = (
    r"(?!(?:emp(?:loyee)?|pay|check|period|social|ssn|dept|department)\b)"
    r"(?!" + _NAME_WORD + r"[ \t]*[:#])"
)

EMPLOYEE_NAME_RE = re.compile(
    r"\bemployee(?:[ \t]+name)?[ \t]*:[ \t]*"
    r"(?P<name>" + _NAME_WORD + r"(?:[ \t]+" + _NEXT_LABEL + _NAME_WORD + r")*)",
    re.IGNORECASE,
)

EMPLOYEE_ID_RE = re.compile(
    r"\bemp(?:loyee)?[ \t]*(?:id|#|no\.?|number)[ \t]*[:#]?[ \t]*(?P<id>[A-Za-z0-9]+)",
    re.IGNORECASE,
)

# Employer is assumed to be within the first lines of the document
EMPLOYER_SCAN_LINES = 5


def extract_employee_name(text: str) -> Optional[str]:
    match = EMPLOYEE_NAME_RE.search(text)
    if not match:
        return None
    name = match.group("name").strip()
    return name or None


def extract_employee_id(text: str) -> Optional[str]:
    match = EMPLOYEE_ID_RE.search(text)
    if not match:
        return None
    return match.group("id")


def extract_employer_name(text: str) -> Optional[str]:
    """
    First non-empty line among the first five that does not mention "pay".

    Known to be weak: logos, addresses and slogans often come first.
    """
    for line in text.split("\n")[:EMPLOYER_SCAN_LINES]:
        line = line.strip()
        if not line:
            continue
        if "pay" in line.lower():
            continue
        return line
    return None


class EntityPass(PatternPass):
    """Employee name, employee ID and employer name."""

    @property
    def name(self) -> str:
        return "entities"

    def apply(
        self,
        text: str,
        fields: dict[str, Any],
        source: FieldSource = FieldSource.PATTERN,
    ) -> dict[str, Any]:
        found: dict[str, Any] = {}

        employee_name = extract_employee_name(text)
        if employee_name:
            found["employee_name"] = employee_name

        employee_id = extract_employee_id(text)
        if employee_id:
            found["employee_id"] = employee_id

        employer_name = extract_employer_name(text)
        if employer_name:
            found["employer_name"] = employer_name

        return found
