from __future__ import annotations

import uuid
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from jobtracker.utils.coercion import (
    LONG_TEXT,
    ensure_bool,
    ensure_list,
    ensure_mapping,
    ensure_optional_str,
    ensure_str,
    ensure_str_list,
)


def new_id() -> str:
    return str(uuid.uuid4())


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys (isDefault, startDate, ...)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def bullet_items(val: Any) -> list:
    """Accept plain strings as enabled bullets; drop anything else that isn't a mapping."""
    items = []
    for item in ensure_list(val):
        if isinstance(item, str):
            items.append({"text": item})
        elif isinstance(item, (dict, BaseModel)):
            items.append(item)
    return items


def mapping_items(val: Any) -> list:
    return [item for item in ensure_list(val) if isinstance(item, (dict, BaseModel))]


# ── Sub-Models ──────────────────────────────────────────────────────────────


class Bullet(CamelModel):
    """One achievement line. Disabled bullets stay in the model but never render."""

    id: str = Field(default_factory=new_id)
    text: str = ""
    enabled: bool = True

    @field_validator("id", mode="before")
    @classmethod
    def ensure_id(cls, v: Any) -> str:
        return ensure_str(v) or new_id()

    @field_validator("text", mode="before")
    @classmethod
    def clip_text(cls, v: Any) -> str:
        return ensure_str(v, LONG_TEXT)

    @field_validator("enabled", mode="before")
    @classmethod
    def coerce_enabled(cls, v: Any) -> bool:
        return ensure_bool(v, default=True)


class Header(CamelModel):
    """Candidate name and contact details."""

    name: str = ""
    email: str = ""
    phone: str = ""
    linkedin: str = ""
    location: str = ""
    website: Optional[str] = None

    @field_validator("name", "email", "phone", "linkedin", "location", mode="before")
    @classmethod
    def coerce_str(cls, v: Any) -> str:
        return ensure_str(v)

    @field_validator("website", mode="before")
    @classmethod
    def coerce_optional(cls, v: Any) -> Optional[str]:
        return ensure_optional_str(v)


class Summary(CamelModel):
    id: str = Field(default_factory=new_id)
    name: str = ""
    text: str = ""
    is_default: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def ensure_id(cls, v: Any) -> str:
        return ensure_str(v) or new_id()

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str:
        return ensure_str(v)

    @field_validator("text", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return ensure_str(v, LONG_TEXT)

    @field_validator("is_default", mode="before")
    @classmethod
    def coerce_default(cls, v: Any) -> bool:
        return ensure_bool(v, default=False)


class _Entry(CamelModel):
    """Shared id + bullets handling for every resume entry type."""

    id: str = Field(default_factory=new_id)
    bullets: list[Bullet] = []

    @field_validator("id", mode="before")
    @classmethod
    def ensure_id(cls, v: Any) -> str:
        return ensure_str(v) or new_id()

    @field_validator("bullets", mode="before")
    @classmethod
    def coerce_bullets(cls, v: Any) -> list:
        return bullet_items(v)


class EducationEntry(_Entry):
    school: str = ""
    degree: str = ""
    field: str = ""
    location: str = ""
    graduation_date: str = ""
    gpa: Optional[str] = None

    @field_validator("school", "degree", "field", "location", "graduation_date", mode="before")
    @classmethod
    def coerce_str(cls, v: Any) -> str:
        return ensure_str(v)

    @field_validator("gpa", mode="before")
    @classmethod
    def coerce_gpa(cls, v: Any) -> Optional[str]:
        return ensure_optional_str(v)


class ExperienceEntry(_Entry):
    company: str = ""
    title: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""

    @field_validator("company", "title", "location", "start_date", "end_date", mode="before")
    @classmethod
    def coerce_str(cls, v: Any) -> str:
        return ensure_str(v)


class LeadershipEntry(_Entry):
    title: str = ""
    organization: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""

    @field_validator("title", "organization", "location", "start_date", "end_date", mode="before")
    @classmethod
    def coerce_str(cls, v: Any) -> str:
        return ensure_str(v)


class ProjectEntry(_Entry):
    name: str = ""
    description: Optional[str] = None
    technologies: list[str] = []
    start_date: str = ""
    end_date: str = ""
    link: Optional[str] = None

    @field_validator("name", "start_date", "end_date", mode="before")
    @classmethod
    def coerce_str(cls, v: Any) -> str:
        return ensure_str(v)

    @field_validator("description", mode="before")
    @classmethod
    def coerce_description(cls, v: Any) -> Optional[str]:
        return ensure_optional_str(v, LONG_TEXT)

    @field_validator("link", mode="before")
    @classmethod
    def coerce_link(cls, v: Any) -> Optional[str]:
        return ensure_optional_str(v)

    @field_validator("technologies", mode="before")
    @classmethod
    def coerce_technologies(cls, v: Any) -> list[str]:
        return ensure_str_list(v)


class Skills(CamelModel):
    """Four disjoint categorized skill lists."""

    technical: list[str] = []
    tools: list[str] = []
    languages: list[str] = []
    certifications: list[str] = []

    @field_validator("technical", "tools", "languages", "certifications", mode="before")
    @classmethod
    def coerce_lists(cls, v: Any) -> list[str]:
        return ensure_str_list(v)


# ── Main Resume Model ──────────────────────────────────────────────────────


def default_summaries() -> list[Summary]:
    return [Summary(id="1", name="Default", text="", is_default=True)]


class MasterResume(CamelModel):
    """The canonical resume every tailored application is derived from."""

    header: Header = Field(default_factory=Header)
    summaries: list[Summary] = Field(default_factory=default_summaries)
    education: list[EducationEntry] = []
    experience: list[ExperienceEntry] = []
    leadership: list[LeadershipEntry] = []
    projects: list[ProjectEntry] = []
    skills: Skills = Field(default_factory=Skills)

    @field_validator("header", "skills", mode="before")
    @classmethod
    def coerce_mapping(cls, v: Any) -> Any:
        return ensure_mapping(v)

    @field_validator("summaries", mode="before")
    @classmethod
    def coerce_summaries(cls, v: Any) -> list:
        if not isinstance(v, list):
            return default_summaries()
        return mapping_items(v)

    @field_validator("education", "experience", "leadership", "projects", mode="before")
    @classmethod
    def coerce_entries(cls, v: Any) -> list:
        return mapping_items(v)

    def is_complete(self) -> bool:
        """A resume is ready for generation once it has a name and some experience."""
        return bool(self.header.name.strip()) and len(self.experience) > 0


class MasterResumeUpdate(CamelModel):
    """Field-level partial update of the master resume. Unset fields are left alone."""

    header: Optional[Header] = None
    summaries: Optional[list[Summary]] = None
    education: Optional[list[EducationEntry]] = None
    experience: Optional[list[ExperienceEntry]] = None
    leadership: Optional[list[LeadershipEntry]] = None
    projects: Optional[list[ProjectEntry]] = None
    skills: Optional[Skills] = None


class BulletToggle(CamelModel):
    enabled: bool
