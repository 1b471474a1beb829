from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from jobtracker.models.resume_models import CamelModel, MasterResume


class ExportTarget(str, Enum):
    """Which documents go into the artifact."""

    RESUME = "resume"
    COVER_LETTER = "coverLetter"
    BOTH = "both"

    @property
    def includes_resume(self) -> bool:
        return self in (ExportTarget.RESUME, ExportTarget.BOTH)

    @property
    def includes_cover_letter(self) -> bool:
        return self in (ExportTarget.COVER_LETTER, ExportTarget.BOTH)


class ExportFormat(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    TXT = "txt"


class ExportContent(CamelModel):
    """
    Everything a renderer needs. When master_resume is absent the renderers
    fall back to dumping resume_text.
    """

    resume_text: str = ""
    cover_letter_text: str = ""
    company_name: str = ""
    role_name: str = ""
    master_resume: Optional[MasterResume] = None


class ExportArtifact(BaseModel):
    """A rendered, downloadable document."""

    filename: str
    content_type: str
    data: bytes
