from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field

from jobtracker.models.application_models import ConnectionInfo
from jobtracker.models.jd_models import JobDescription
from jobtracker.models.resume_models import CamelModel, MasterResume


class Emphasis(str, Enum):
    TECHNICAL = "technical"
    BALANCED = "balanced"
    LEADERSHIP = "leadership"
    BUSINESS = "business"


class AtsLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CoverLetterTone(str, Enum):
    PROFESSIONAL = "professional"
    CONVERSATIONAL = "conversational"
    ENTHUSIASTIC = "enthusiastic"


class GenerationSettings(CamelModel):
    """User-selected knobs for one tailoring run."""

    resume_length: int = Field(default=1, ge=1, le=2)  # pages
    emphasis: Emphasis = Emphasis.BALANCED
    ats_level: AtsLevel = AtsLevel.HIGH
    include_cover_letter: bool = True
    cover_letter_tone: CoverLetterTone = CoverLetterTone.PROFESSIONAL
    generate_why_questions: bool = True


class GeneratedContent(CamelModel):
    """Free-text fields returned by the generation service."""

    resume: str = ""
    cover_letter: str = ""
    why_role: str = ""
    why_company: str = ""


# ── Request / Response Models ──────────────────────────────────────────────


class GenerationRequest(CamelModel):
    master_resume: MasterResume
    job_description: JobDescription
    settings: GenerationSettings = Field(default_factory=GenerationSettings)


class GenerationResponse(CamelModel):
    success: bool
    data: Optional[GeneratedContent] = None
    error: Optional[str] = None


class SaveGenerationRequest(CamelModel):
    """Save a generated packet to the tracker as a draft application."""

    job_description_id: str
    generated: GeneratedContent
    settings: GenerationSettings = Field(default_factory=GenerationSettings)
    connection_info: Optional[ConnectionInfo] = None
    application_link: Optional[str] = None
