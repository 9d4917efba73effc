from __future__ import annotations

from typing import Sequence, Tuple

# Checked top to bottom; the first level with a hit wins.
URGENCY_KEYWORDS: Tuple[Tuple[str, Sequence[str]], ...] = (
    ("critical", ("urgent", "asap", "emergency")),
    ("high", ("important", "deadline", "tomorrow")),
    ("medium", ("soon", "this week")),
)


def detect_urgency(text: str) -> str:
    lowered = (text or "").lower()
    for level, keywords in URGENCY_KEYWORDS:
        if any(k in lowered for k in keywords):
            return level
    return "low"
