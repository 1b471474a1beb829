from __future__ import annotations

from enum import Enum
from typing import Literal

from jobtracker.models.application_models import Application
from jobtracker.models.resume_models import CamelModel


class StatusCount(CamelModel):
    status: str
    name: str  # display label, e.g. "Interview"
    value: int


class ResponseStats(CamelModel):
    """Integer percentages; all 0 when there are no applications."""

    total: int
    response_rate: int
    positive_rate: int
    interview_rate: int
    offer_rate: int
    status_rates: dict[str, int]


class TimelinePoint(CamelModel):
    month: str  # YYYY-MM
    label: str  # e.g. "Jan 24"
    applications: int


class WeeklyPoint(CamelModel):
    week: str
    start: str
    end: str
    count: int


class UpcomingState(str, Enum):
    OVERDUE = "overdue"
    TODAY = "today"
    UPCOMING = "upcoming"


class UpcomingItem(CamelModel):
    kind: Literal["interview", "reminder"]
    item_id: str
    application_id: str
    company: str
    role: str
    date: str  # ISO local datetime
    details: str
    state: UpcomingState


class TrackerStats(CamelModel):
    status_breakdown: list[StatusCount]
    response: ResponseStats
    timeline: list[TimelinePoint]
    weekly: list[WeeklyPoint]


class DashboardSummary(CamelModel):
    total_applications: int
    active_applications: int
    job_descriptions: int
    resume_complete: bool
    recent_applications: list[Application]
    pending_items: dict[str, int] = {}
    upcoming: list[UpcomingItem]
