from __future__ import annotations

import re
from typing import Optional

# Best effort: returns the literal "<word> <day>" token, never a parsed date.
DEADLINE_PATTERNS = (
    re.compile(r"by (\w+ \d{1,2})", re.IGNORECASE),
    re.compile(r"deadline[:\s]+(\w+ \d{1,2})", re.IGNORECASE),
    re.compile(r"due[:\s]+(\w+ \d{1,2})", re.IGNORECASE),
)


def extract_deadline(text: str) -> Optional[str]:
    lowered = (text or "").lower()
    for pattern in DEADLINE_PATTERNS:
        match = pattern.search(lowered)
        if match:
            return match.group(1)
    return None
