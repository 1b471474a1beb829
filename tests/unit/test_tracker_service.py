"""Unit tests for tracker statistics and the upcoming agenda."""

from datetime import datetime

import pytest

from jobtracker.models.application_models import Application
from jobtracker.models.tracker_models import UpcomingState
from jobtracker.services import tracker_service
from jobtracker.utils.date_utils import parse_date

NOW = datetime(2024, 3, 13, 12, 0)  # a Wednesday


def _app(status="applied", date="2024-03-01", **kwargs):
    return Application(status=status, application_date=date, **kwargs)


@pytest.fixture
def ten_apps():
    statuses = ["interview"] * 3 + ["offer"] * 2 + ["rejected"] + ["applied"] * 3 + ["draft"]
    return [_app(status=s) for s in statuses]


# ── Rates ────────────────────────────────────────────────────────────────────


@pytest.mark.unit
def test_response_rates_for_ten_applications(ten_apps):
    stats = tracker_service.response_stats(ten_apps)
    assert stats.total == 10
    assert stats.response_rate == 60
    assert stats.positive_rate == 50
    assert stats.interview_rate == 30
    assert stats.offer_rate == 20
    assert stats.status_rates["applied"] == 30
    assert stats.status_rates["withdrawn"] == 0


@pytest.mark.unit
def test_response_rates_empty():
    stats = tracker_service.response_stats([])
    assert (stats.response_rate, stats.positive_rate, stats.interview_rate, stats.offer_rate) == (0, 0, 0, 0)


@pytest.mark.unit
def test_rates_round_half_up():
    apps = [_app(status="offer")] + [_app(status="applied")] * 7
    # 1/8 = 12.5%
    assert tracker_service.response_stats(apps).offer_rate == 13


@pytest.mark.unit
def test_status_breakdown_first_seen_order():
    apps = [_app(status="offer"), _app(status="applied"), _app(status="offer")]
    breakdown = tracker_service.status_breakdown(apps)
    assert [(b.status, b.name, b.value) for b in breakdown] == [("offer", "Offer", 2), ("applied", "Applied", 1)]


# ── Timelines ────────────────────────────────────────────────────────────────


@pytest.mark.unit
def test_monthly_timeline_keeps_last_six_months():
    dates = ["2023-08-10", "2023-09-10", "2023-10-10", "2023-11-10", "2023-12-10", "2024-01-15", "2024-01-20", "2024-02-01"]
    points = tracker_service.monthly_timeline([_app(date=d) for d in dates])

    assert [p.month for p in points] == ["2023-09", "2023-10", "2023-11", "2023-12", "2024-01", "2024-02"]
    assert points[4].label == "Jan 24"
    assert points[4].applications == 2


@pytest.mark.unit
def test_monthly_timeline_skips_invalid_dates():
    points = tracker_service.monthly_timeline([_app(date="not a date"), _app(date="2024-01-15")])
    assert [p.month for p in points] == ["2024-01"]


@pytest.mark.unit
def test_weekly_activity_sunday_weeks_inclusive():
    apps = [
        _app(date="2024-03-10"),  # Sunday, first day of the current week
        _app(date="2024-03-16"),  # Saturday, last day of the current week
        _app(date="2024-03-09"),  # Saturday of Week 3
        _app(date="2024-02-18"),  # Sunday of Week 1
        _app(date="2024-02-17"),  # before the window
    ]
    weeks = tracker_service.weekly_activity(apps, now=NOW)

    assert [w.week for w in weeks] == ["Week 1", "Week 2", "Week 3", "Week 4"]
    assert [w.count for w in weeks] == [1, 0, 1, 2]
    assert (weeks[3].start, weeks[3].end) == ("2024-03-10", "2024-03-16")


# ── Agenda ───────────────────────────────────────────────────────────────────


@pytest.mark.unit
def test_upcoming_items_states_and_order():
    app = _app(
        company="Acme",
        role="Engineer",
        interviews=[
            {"id": "i-past", "date": "2024-03-12", "time": "10:00", "type": "phone"},
            {"id": "i-today", "date": "2024-03-13", "time": "09:00", "type": "video"},
            {"id": "i-done", "date": "2024-03-20", "time": "09:00", "completed": True},
            {"id": "i-future", "date": "2024-03-20", "time": "14:30", "type": "onsite"},
        ],
        reminders=[
            {"id": "r-overdue", "date": "2024-03-01", "type": "thank-you"},
            {"id": "r-later", "date": "2024-03-18", "type": "follow-up", "message": "Ping recruiter"},
            {"id": "r-bad", "date": "garbage", "type": "custom"},
        ],
    )

    items = tracker_service.upcoming_items([app], now=NOW)

    assert [i.item_id for i in items] == ["r-overdue", "i-today", "r-later", "i-future"]
    assert [i.state for i in items] == [
        UpcomingState.OVERDUE,
        UpcomingState.TODAY,
        UpcomingState.UPCOMING,
        UpcomingState.UPCOMING,
    ]
    assert items[0].details == "Thank You"
    assert items[1].details == "Video interview at 09:00"
    assert items[2].details == "Ping recruiter"


@pytest.mark.unit
def test_upcoming_items_limit():
    app = _app(reminders=[{"date": f"2024-03-{d:02d}"} for d in range(14, 24)])
    assert len(tracker_service.upcoming_items([app], now=NOW, limit=5)) == 5


# ── Listing & dashboard ──────────────────────────────────────────────────────


@pytest.mark.unit
def test_filter_applications_search_and_status():
    apps = [
        _app(company="Acme", role="Backend Engineer", status="applied", created_at="2024-01-01T00:00:00Z"),
        _app(company="Globex", role="Data Engineer", status="interview", created_at="2024-02-01T00:00:00Z"),
        _app(company="Initech", role="Designer", status="applied", created_at="2024-03-01T00:00:00Z"),
    ]

    assert [a.company for a in tracker_service.filter_applications(apps, "ENGINEER")] == ["Globex", "Acme"]
    assert [a.company for a in tracker_service.filter_applications(apps, "", "applied")] == ["Initech", "Acme"]
    assert tracker_service.filter_applications(apps, "acme", "interview") == []


@pytest.mark.unit
def test_dashboard_summary(ten_apps):
    summary = tracker_service.dashboard_summary(ten_apps, job_count=4, resume_complete=True, now=NOW)
    assert summary.total_applications == 10
    assert summary.active_applications == 6
    assert summary.job_descriptions == 4
    assert summary.resume_complete is True
    assert len(summary.recent_applications) == 5


# ── Dates ────────────────────────────────────────────────────────────────────


@pytest.mark.unit
def test_date_only_parses_to_local_midnight():
    parsed = parse_date("2024-01-15")
    assert (parsed.year, parsed.month, parsed.day, parsed.hour, parsed.minute) == (2024, 1, 15, 0, 0)
    assert parsed.tzinfo is None
