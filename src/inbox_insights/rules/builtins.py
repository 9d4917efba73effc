from __future__ import annotations

from inbox_insights.rules.BaseRule import BaseRule, KeywordRule


class FreelancePlatformRule(KeywordRule):
    # Sender domain is checked before any keyword rule, so a payment mail from
    # a freelance platform still lands in client_work.
    name = "freelance_platform"
    category = "client_work"
    priority = 100
    domain_markers = ("upwork", "freelancer", "fiverr")


class JobOpportunityRule(KeywordRule):
    name = "job_opportunity"
    category = "job_opportunity"
    priority = 80
    keywords = ("job", "opportunity")
    domain_markers = ("linkedin",)


class PaymentRule(KeywordRule):
    name = "payment"
    category = "payment"
    priority = 60
    keywords = ("payment", "invoice", "paid")


class MeetingRule(KeywordRule):
    name = "meeting"
    category = "meeting"
    priority = 40
    keywords = ("meeting", "call", "zoom")


def default_category_rules() -> list[BaseRule]:
    rules: list[BaseRule] = [
        FreelancePlatformRule(),
        JobOpportunityRule(),
        PaymentRule(),
        MeetingRule(),
    ]
    return sorted(rules, key=lambda r: r.priority, reverse=True)
