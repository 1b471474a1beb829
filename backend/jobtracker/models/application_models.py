from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import Field, field_validator

from jobtracker.models.resume_models import CamelModel, new_id, mapping_items
from jobtracker.utils.coercion import (
    LONG_TEXT,
    NOTES_TEXT,
    ensure_bool,
    ensure_mapping,
    ensure_optional_str,
    ensure_str,
    ensure_str_list,
    safe_enum,
)
from jobtracker.utils.date_utils import now_iso


class ApplicationStatus(str, Enum):
    DRAFT = "draft"
    APPLIED = "applied"
    INTERVIEW = "interview"
    OFFER = "offer"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class InterviewType(str, Enum):
    PHONE = "phone"
    VIDEO = "video"
    ONSITE = "onsite"
    TECHNICAL = "technical"
    BEHAVIORAL = "behavioral"


class ReminderType(str, Enum):
    THANK_YOU = "thank-you"
    FOLLOW_UP = "follow-up"
    CHECK_STATUS = "check-status"
    CUSTOM = "custom"


# ── Sub-Models ──────────────────────────────────────────────────────────────


class ConnectionInfo(CamelModel):
    """Someone at the company the candidate knows."""

    has_connection: bool = False
    name: Optional[str] = None
    contact_info: Optional[str] = None
    email: Optional[str] = None

    @field_validator("has_connection", mode="before")
    @classmethod
    def coerce_flag(cls, v: Any) -> bool:
        return ensure_bool(v, default=False)

    @field_validator("name", "contact_info", "email", mode="before")
    @classmethod
    def coerce_optional(cls, v: Any) -> Optional[str]:
        return ensure_optional_str(v)


class InterviewSchedule(CamelModel):
    id: str = Field(default_factory=new_id)
    date: str = ""
    time: str = ""
    type: InterviewType = InterviewType.PHONE
    notes: Optional[str] = None
    completed: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def ensure_id(cls, v: Any) -> str:
        return ensure_str(v) or new_id()

    @field_validator("date", "time", mode="before")
    @classmethod
    def coerce_str(cls, v: Any) -> str:
        return ensure_str(v)

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> InterviewType:
        return safe_enum(InterviewType, v, InterviewType.PHONE)

    @field_validator("notes", mode="before")
    @classmethod
    def coerce_notes(cls, v: Any) -> Optional[str]:
        return ensure_optional_str(v, LONG_TEXT)

    @field_validator("completed", mode="before")
    @classmethod
    def coerce_completed(cls, v: Any) -> bool:
        return ensure_bool(v, default=False)


class FollowUpReminder(CamelModel):
    id: str = Field(default_factory=new_id)
    date: str = ""
    type: ReminderType = ReminderType.FOLLOW_UP
    message: Optional[str] = None
    completed: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def ensure_id(cls, v: Any) -> str:
        return ensure_str(v) or new_id()

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> str:
        return ensure_str(v)

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> ReminderType:
        return safe_enum(ReminderType, v, ReminderType.CUSTOM)

    @field_validator("message", mode="before")
    @classmethod
    def coerce_message(cls, v: Any) -> Optional[str]:
        return ensure_optional_str(v, LONG_TEXT)

    @field_validator("completed", mode="before")
    @classmethod
    def coerce_completed(cls, v: Any) -> bool:
        return ensure_bool(v, default=False)


class InterviewUpdate(CamelModel):
    date: Optional[str] = None
    time: Optional[str] = None
    type: Optional[InterviewType] = None
    notes: Optional[str] = None
    completed: Optional[bool] = None


class ReminderUpdate(CamelModel):
    date: Optional[str] = None
    type: Optional[ReminderType] = None
    message: Optional[str] = None
    completed: Optional[bool] = None


# ── Application ─────────────────────────────────────────────────────────────


class Application(CamelModel):
    """
    A tracked job application.

    company/role/location/... are a snapshot of the job taken at creation so
    the history survives later job edits; jobDescriptionId is a weak reference
    that may point at a deleted job.
    """

    id: str = Field(default_factory=new_id)
    job_description_id: str = ""
    company: str = ""
    role: str = ""
    location: str = ""
    salary: Optional[str] = None
    job_type: str = ""
    industry: str = ""
    application_date: str = Field(default_factory=now_iso)
    deadline: Optional[str] = None
    resume_version: str = ""
    status: ApplicationStatus = ApplicationStatus.DRAFT
    notes: str = ""
    connections: list[str] = []
    connection_info: Optional[ConnectionInfo] = None
    application_link: Optional[str] = None
    saved_resume: Optional[str] = None
    saved_cover_letter: Optional[str] = None
    interviews: list[InterviewSchedule] = []
    reminders: list[FollowUpReminder] = []
    response_date: Optional[str] = None
    created_at: str = Field(default_factory=now_iso)
    updated_at: str = Field(default_factory=now_iso)

    @field_validator("id", mode="before")
    @classmethod
    def ensure_id(cls, v: Any) -> str:
        return ensure_str(v) or new_id()

    @field_validator(
        "job_description_id", "company", "role", "location", "job_type", "industry", "resume_version",
        mode="before",
    )
    @classmethod
    def coerce_str(cls, v: Any) -> str:
        return ensure_str(v)

    @field_validator("application_date", "created_at", "updated_at", mode="before")
    @classmethod
    def ensure_timestamp(cls, v: Any) -> str:
        return ensure_str(v) or now_iso()

    @field_validator("salary", "deadline", "application_link", "response_date", mode="before")
    @classmethod
    def coerce_optional(cls, v: Any) -> Optional[str]:
        return ensure_optional_str(v)

    @field_validator("saved_resume", "saved_cover_letter", mode="before")
    @classmethod
    def coerce_saved_text(cls, v: Any) -> Optional[str]:
        return ensure_optional_str(v, NOTES_TEXT * 5)

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, v: Any) -> ApplicationStatus:
        return safe_enum(ApplicationStatus, v, ApplicationStatus.DRAFT)

    @field_validator("notes", mode="before")
    @classmethod
    def coerce_notes(cls, v: Any) -> str:
        return ensure_str(v, NOTES_TEXT)

    @field_validator("connections", mode="before")
    @classmethod
    def coerce_connections(cls, v: Any) -> list[str]:
        return ensure_str_list(v)

    @field_validator("connection_info", mode="before")
    @classmethod
    def coerce_connection_info(cls, v: Any) -> Any:
        return ensure_mapping(v) if v is not None else None

    @field_validator("interviews", "reminders", mode="before")
    @classmethod
    def coerce_schedule(cls, v: Any) -> list:
        return mapping_items(v)

    def pending_items(self) -> int:
        """Incomplete interviews + reminders, shown as a badge in the tracker."""
        return sum(1 for i in self.interviews if not i.completed) + sum(
            1 for r in self.reminders if not r.completed
        )


class ApplicationUpdate(CamelModel):
    """Field-level merge into an existing application."""

    company: Optional[str] = None
    role: Optional[str] = None
    location: Optional[str] = None
    application_date: Optional[str] = None
    deadline: Optional[str] = None
    status: Optional[ApplicationStatus] = None
    notes: Optional[str] = Field(default=None, max_length=NOTES_TEXT)
    connections: Optional[list[str]] = None
    connection_info: Optional[ConnectionInfo] = None
    application_link: Optional[str] = None
    saved_resume: Optional[str] = None
    saved_cover_letter: Optional[str] = None
    interviews: Optional[list[InterviewSchedule]] = None
    reminders: Optional[list[FollowUpReminder]] = None
    response_date: Optional[str] = None
