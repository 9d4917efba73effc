# Fixed advice per category. Only the four categories below have their own
# triple; everything else shares DEFAULT_TIPS.
from __future__ import annotations

from typing import Dict, List, Optional


TIPS_BY_CATEGORY: Dict[str, List[str]] = {
    "client_work": [
        "Respond within 24 hours to maintain good client relationships",
        "Keep detailed records of project communications",
        "Clarify project scope and deadlines upfront",
    ],
    "job_opportunity": [
        "Research the company before responding",
        "Tailor your response to highlight relevant experience",
        "Follow up if you don't hear back within a week",
    ],
    "payment": [
        "Track payment due dates in your calendar",
        "Send friendly reminders for overdue payments",
        "Keep detailed invoice records",
    ],
    "meeting": [
        "Prepare an agenda before the meeting",
        "Confirm meeting details 24 hours prior",
        "Follow up with meeting notes and action items",
    ],
}

DEFAULT_TIPS: List[str] = [
    "Process emails in batches to improve efficiency",
    "Set up filters to automatically organize similar emails",
    "Use templates for common responses",
]

RESPONSE_TEMPLATES: Dict[str, str] = {
    "client_work": "Thank you for your email. I'll review this and get back to you within [timeframe].",
    "job_opportunity": "Thank you for considering me for this opportunity. I'm interested and would like to learn more.",
    "meeting": "Thank you for the meeting invitation. I'm available and will prepare accordingly.",
}


def tips_for(category: str) -> List[str]:
    return list(TIPS_BY_CATEGORY.get(category, DEFAULT_TIPS))[:3]


def suggested_response_for(category: str) -> Optional[str]:
    return RESPONSE_TEMPLATES.get(category)
