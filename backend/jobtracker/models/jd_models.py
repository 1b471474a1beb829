from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import Field, field_validator

from jobtracker.models.resume_models import CamelModel, new_id
from jobtracker.utils.coercion import (
    RAW_JOB_TEXT,
    ensure_optional_str,
    ensure_str,
    ensure_str_list,
    safe_enum,
)
from jobtracker.utils.date_utils import now_iso


class JobType(str, Enum):
    """Employment type of a job posting."""

    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    INTERNSHIP = "internship"
    CONTRACT = "contract"


class _JobFields(CamelModel):
    """Fields shared by stored job descriptions and raw AI extraction output."""

    company: str = ""
    role: str = ""
    location: str = ""
    salary: Optional[str] = None
    job_type: JobType = JobType.FULL_TIME
    industry: str = ""
    required_skills: list[str] = []
    keywords: list[str] = []

    @field_validator("company", "role", "location", "industry", mode="before")
    @classmethod
    def coerce_str(cls, v: Any) -> str:
        return ensure_str(v)

    @field_validator("salary", mode="before")
    @classmethod
    def coerce_salary(cls, v: Any) -> Optional[str]:
        text = ensure_optional_str(v)
        if text and text.strip().lower() in ("null", "none", "n/a"):
            return None
        return text

    @field_validator("job_type", mode="before")
    @classmethod
    def coerce_job_type(cls, v: Any) -> JobType:
        return safe_enum(JobType, v, JobType.FULL_TIME)

    @field_validator("required_skills", "keywords", mode="before")
    @classmethod
    def coerce_lists(cls, v: Any) -> list[str]:
        return ensure_str_list(v)


class ParsedJobDescription(_JobFields):
    """Structured output from AI job-description parsing."""


class JobDescription(_JobFields):
    """A stored job posting."""

    id: str = Field(default_factory=new_id)
    raw_text: str = ""
    created_at: str = Field(default_factory=now_iso)

    @field_validator("id", mode="before")
    @classmethod
    def ensure_id(cls, v: Any) -> str:
        return ensure_str(v) or new_id()

    @field_validator("raw_text", mode="before")
    @classmethod
    def clip_raw_text(cls, v: Any) -> str:
        return ensure_str(v, RAW_JOB_TEXT)

    @field_validator("created_at", mode="before")
    @classmethod
    def ensure_created_at(cls, v: Any) -> str:
        return ensure_str(v) or now_iso()


class JobDescriptionUpdate(CamelModel):
    """Explicit user edit of a stored job description."""

    company: Optional[str] = None
    role: Optional[str] = None
    location: Optional[str] = None
    salary: Optional[str] = None
    job_type: Optional[JobType] = None
    industry: Optional[str] = None
    required_skills: Optional[list[str]] = None
    keywords: Optional[list[str]] = None
    raw_text: Optional[str] = Field(default=None, max_length=RAW_JOB_TEXT)


# ── Request / Response Models ──────────────────────────────────────────────


class ParseJobRequest(CamelModel):
    """Input for parsing pasted job text. Length rules are enforced by the service."""

    job_text: Any = None


class ParseJobResponse(CamelModel):
    success: bool
    data: Optional[ParsedJobDescription] = None
    error: Optional[str] = None
