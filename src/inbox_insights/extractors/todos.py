from __future__ import annotations

from typing import List, Sequence, Tuple

MAX_ACTION_ITEMS = 3

# (trigger words, action item), in check order.
ACTION_TRIGGERS: Tuple[Tuple[Sequence[str], str], ...] = (
    (("respond", "reply"), "Respond to this email"),
    (("review", "check"), "Review the attached documents or links"),
    (("schedule", "meeting"), "Schedule a meeting or call"),
    (("payment", "invoice"), "Handle payment or invoicing"),
)


def extract_action_items(text: str) -> List[str]:
    """
    Heuristic action item extraction.
    At most one item per trigger group, in detection order, capped at three.
    """
    lowered = (text or "").lower()
    items: List[str] = []

    for triggers, item in ACTION_TRIGGERS:
        if any(t in lowered for t in triggers):
            items.append(item)

    return items[:MAX_ACTION_ITEMS]
