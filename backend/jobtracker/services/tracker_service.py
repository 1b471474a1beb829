"""
Tracker Service — statistics and agenda over stored applications.

All functions are pure: they take the application list (and an optional
`now` for testability) and never touch storage.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from jobtracker.models.application_models import Application, ApplicationStatus
from jobtracker.models.tracker_models import (
    DashboardSummary,
    ResponseStats,
    StatusCount,
    TimelinePoint,
    TrackerStats,
    UpcomingItem,
    UpcomingState,
    WeeklyPoint,
)
from jobtracker.utils.date_utils import parse_date, parse_datetime

logger = logging.getLogger(__name__)

RESPONDED = {ApplicationStatus.INTERVIEW, ApplicationStatus.OFFER, ApplicationStatus.REJECTED}
POSITIVE = {ApplicationStatus.INTERVIEW, ApplicationStatus.OFFER}
ACTIVE = {ApplicationStatus.APPLIED, ApplicationStatus.INTERVIEW}

TIMELINE_MONTHS = 6
WEEKS = 4
DASHBOARD_RECENT = 5
DASHBOARD_UPCOMING = 5


def _percent(part: int, total: int) -> int:
    """Integer percentage rounded half-up; 0 for an empty total."""
    if total <= 0:
        return 0
    return int(math.floor(part * 100 / total + 0.5))


def _safe_parse(value: str | None) -> Optional[datetime]:
    try:
        return parse_date(value)
    except (ValueError, TypeError):
        return None


# ── Breakdown & rates ────────────────────────────────────────────────────────


def status_breakdown(apps: Iterable[Application]) -> list[StatusCount]:
    """Count per status, in the order each status first appears."""
    counts: dict[str, int] = {}
    for app in apps:
        counts[app.status.value] = counts.get(app.status.value, 0) + 1
    return [
        StatusCount(status=status, name=status[:1].upper() + status[1:], value=value)
        for status, value in counts.items()
    ]


def response_stats(apps: list[Application]) -> ResponseStats:
    total = len(apps)
    responded = sum(1 for a in apps if a.status in RESPONDED)
    positive = sum(1 for a in apps if a.status in POSITIVE)
    interviews = sum(1 for a in apps if a.status == ApplicationStatus.INTERVIEW)
    offers = sum(1 for a in apps if a.status == ApplicationStatus.OFFER)

    status_rates = {
        status.value: _percent(sum(1 for a in apps if a.status == status), total)
        for status in ApplicationStatus
    }

    return ResponseStats(
        total=total,
        response_rate=_percent(responded, total),
        positive_rate=_percent(positive, total),
        interview_rate=_percent(interviews, total),
        offer_rate=_percent(offers, total),
        status_rates=status_rates,
    )


# ── Timelines ────────────────────────────────────────────────────────────────


def monthly_timeline(apps: Iterable[Application], months: int = TIMELINE_MONTHS) -> list[TimelinePoint]:
    """Applications per calendar month (local time), ascending, last `months` months with data."""
    grouped: dict[str, int] = {}
    for app in apps:
        applied = _safe_parse(app.application_date)
        if applied is None:
            logger.debug(f"Skipping application {app.id} with invalid date {app.application_date!r}")
            continue
        key = f"{applied.year:04d}-{applied.month:02d}"
        grouped[key] = grouped.get(key, 0) + 1

    points = []
    for key in sorted(grouped)[-months:]:
        month_start = datetime.strptime(f"{key}-01", "%Y-%m-%d")
        points.append(TimelinePoint(month=key, label=month_start.strftime("%b %y"), applications=grouped[key]))
    return points


def _week_start(day: date) -> date:
    """Sunday on or before `day`."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def weekly_activity(apps: list[Application], now: Optional[datetime] = None, weeks: int = WEEKS) -> list[WeeklyPoint]:
    """
    Applications per Sunday-start week for the last `weeks` weeks.
    The final bucket is the week containing `now`; day bounds are inclusive.
    """
    today = (now or datetime.now()).date()
    current_start = _week_start(today)

    applied_days = []
    for app in apps:
        applied = _safe_parse(app.application_date)
        if applied is not None:
            applied_days.append(applied.date())

    points = []
    for i in range(weeks - 1, -1, -1):
        start = current_start - timedelta(days=7 * i)
        end = start + timedelta(days=6)
        count = sum(1 for d in applied_days if start <= d <= end)
        points.append(WeeklyPoint(week=f"Week {weeks - i}", start=start.isoformat(), end=end.isoformat(), count=count))
    return points


# ── Agenda ───────────────────────────────────────────────────────────────────


def _state_for(moment: datetime, today: date) -> UpcomingState:
    if moment.date() < today:
        return UpcomingState.OVERDUE
    if moment.date() == today:
        return UpcomingState.TODAY
    return UpcomingState.UPCOMING


def _reminder_label(reminder_type: str) -> str:
    return reminder_type.replace("-", " ", 1).title()


def upcoming_items(
    apps: Iterable[Application],
    now: Optional[datetime] = None,
    limit: Optional[int] = None,
) -> list[UpcomingItem]:
    """
    Incomplete interviews scheduled today or later, plus every incomplete
    reminder (overdue ones included), sorted by date ascending.
    """
    now = now or datetime.now()
    today = now.date()
    items: list[tuple[datetime, UpcomingItem]] = []

    for app in apps:
        for interview in app.interviews:
            if interview.completed:
                continue
            try:
                moment = parse_datetime(interview.date, interview.time)
            except (ValueError, TypeError):
                logger.debug(f"Skipping interview {interview.id} with invalid date {interview.date!r}")
                continue
            if moment.date() < today:
                continue
            kind = interview.type.value
            items.append((moment, UpcomingItem(
                kind="interview",
                item_id=interview.id,
                application_id=app.id,
                company=app.company,
                role=app.role,
                date=moment.isoformat(),
                details=f"{kind[:1].upper() + kind[1:]} interview at {interview.time}",
                state=_state_for(moment, today),
            )))

        for reminder in app.reminders:
            if reminder.completed:
                continue
            moment = _safe_parse(reminder.date) if reminder.date else None
            if moment is None:
                logger.debug(f"Skipping reminder {reminder.id} with invalid date {reminder.date!r}")
                continue
            items.append((moment, UpcomingItem(
                kind="reminder",
                item_id=reminder.id,
                application_id=app.id,
                company=app.company,
                role=app.role,
                date=moment.isoformat(),
                details=reminder.message or _reminder_label(reminder.type.value),
                state=_state_for(moment, today),
            )))

    items.sort(key=lambda pair: pair[0])
    result = [item for _, item in items]
    return result[:limit] if limit is not None else result


# ── Listing & dashboard ──────────────────────────────────────────────────────


def filter_applications(
    apps: Iterable[Application],
    search: str = "",
    status: str = "all",
) -> list[Application]:
    """Case-insensitive company/role search plus exact status match, newest first."""
    needle = (search or "").strip().lower()
    status = (status or "all").strip().lower()

    matched = [
        app for app in apps
        if (not needle or needle in app.company.lower() or needle in app.role.lower())
        and (status == "all" or app.status.value == status)
    ]
    return sorted(matched, key=lambda a: a.created_at, reverse=True)


def tracker_stats(apps: list[Application], now: Optional[datetime] = None) -> TrackerStats:
    return TrackerStats(
        status_breakdown=status_breakdown(apps),
        response=response_stats(apps),
        timeline=monthly_timeline(apps),
        weekly=weekly_activity(apps, now=now),
    )


def dashboard_summary(
    apps: list[Application],
    job_count: int,
    resume_complete: bool,
    now: Optional[datetime] = None,
) -> DashboardSummary:
    recent = sorted(apps, key=lambda a: a.created_at, reverse=True)[:DASHBOARD_RECENT]
    return DashboardSummary(
        total_applications=len(apps),
        active_applications=sum(1 for a in apps if a.status in ACTIVE),
        job_descriptions=job_count,
        resume_complete=resume_complete,
        recent_applications=recent,
        pending_items={a.id: a.pending_items() for a in recent},
        upcoming=upcoming_items(apps, now=now, limit=DASHBOARD_UPCOMING),
    )
