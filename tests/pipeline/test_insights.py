from __future__ import annotations

from inbox_insights.models import EmailSummary
from inbox_insights.pipeline.filters import important_only, search_summaries, unread_count
from inbox_insights.pipeline.insights import aggregate_insights


def _summary(make_email, *, importance="low", tags=(), sender_email="a@example.org", unread=False, **kw):
    return EmailSummary(
        email=make_email(sender_email=sender_email, is_unread=unread, **kw),
        importance=importance,
        tags=tuple(tags),
        summary=kw.get("body", ""),
    )


def test_empty_batch_yields_zero_report() -> None:
    report = aggregate_insights([])

    assert report.insights == []
    assert report.recommendations == []
    assert report.to_dict()["stats"] == {
        "totalEmails": 0,
        "urgentEmails": 0,
        "clientEmails": 0,
        "jobOpportunities": 0,
        "responseRate": "85%",
        "averageResponseTime": "4.2 hours",
    }


def test_all_checks_fire_together(make_email) -> None:
    batch = [
        _summary(make_email, importance="high", sender_email="jobs@upwork.com"),
        _summary(make_email, importance="high", tags=("job offer",)),
        _summary(make_email, tags=("client",)),
    ] + [_summary(make_email, unread=True) for _ in range(11)]

    report = aggregate_insights(batch)

    assert report.stats.total_emails == 14
    assert report.stats.client_emails == 2
    assert report.stats.job_opportunities == 1
    assert report.insights == [
        "2 client-related emails detected this week",
        "1 new job opportunities found",
        "You have 11 unread emails",
    ]
    assert report.recommendations == [
        "Set up dedicated folders for each client to stay organized",
        "Respond to job opportunities within 24 hours for better chances",
        "Schedule daily email processing time to avoid overwhelm",
    ]


def test_urgent_share_above_threshold(make_email) -> None:
    batch = [_summary(make_email, importance="high"), _summary(make_email), _summary(make_email)]

    report = aggregate_insights(batch)

    assert report.insights == ["You have 1 urgent emails - consider setting up priority filters"]
    assert report.recommendations == ["Create email rules to automatically flag urgent messages"]


def test_ten_unread_is_not_enough(make_email) -> None:
    batch = [_summary(make_email, unread=True) for _ in range(10)]
    assert aggregate_insights(batch).insights == []


def test_filters(make_email) -> None:
    batch = [
        _summary(make_email, importance="high", unread=True, subject="Invoice overdue"),
        _summary(make_email, tags=("career",), sender_name="LinkedIn"),
        _summary(make_email, importance="medium", unread=True, body="Weekly update"),
    ]

    assert len(important_only(batch)) == 1
    assert unread_count(batch) == 2
    assert [s.email.subject for s in search_summaries(batch, "INVOICE")] == ["Invoice overdue"]
    assert len(search_summaries(batch, "career")) == 1
    assert len(search_summaries(batch, "linkedin")) == 1
    assert len(search_summaries(batch, "weekly")) == 1
