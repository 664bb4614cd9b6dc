"""
Text normalization applied to every acquisition path.
"""

import re

_HORIZONTAL_WS = re.compile(r"[ \t\f\v\u00a0]+")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def normalize_text(text: str) -> str:
    """
    Normalize acquired text for pattern matching.

    - Runs of horizontal whitespace become a single space
    - Each line is trimmed
    - Three or more consecutive newlines become exactly two
    """
    if not text:
        return ""

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _HORIZONTAL_WS.sub(" ", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    text = _EXCESS_NEWLINES.sub("\n\n", text)
    return text.strip()
