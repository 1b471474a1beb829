"""
Layout-neutral view of a MasterResume, shared by the PDF, DOCX and text renderers.

Every backend walks the same list of RenderSection objects, so section order,
conditional emission and disabled-bullet filtering are decided once here.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

from jobtracker.models.export_models import ExportTarget
from jobtracker.models.resume_models import Bullet, Header, MasterResume

PLACEHOLDER_NAME = "Your Name"

FILENAME_PREFIX = {
    ExportTarget.RESUME: "Resume",
    ExportTarget.COVER_LETTER: "CoverLetter",
    ExportTarget.BOTH: "Application",
}


@dataclass
class RenderEntry:
    """One education/experience/leadership/project block."""

    title: str
    dates: str = ""
    subtitle: str = ""
    link: str = ""
    bullets: list[str] = field(default_factory=list)


@dataclass
class RenderSection:
    """A titled section holding either entries or a single line of text."""

    heading: str
    entries: list[RenderEntry] = field(default_factory=list)
    text: str = ""


# ── Small helpers ────────────────────────────────────────────────────────────


def join_non_empty(parts: Iterable[str | None], sep: str) -> str:
    return sep.join(p.strip() for p in parts if p and p.strip())


def enabled_bullets(bullets: Iterable[Bullet]) -> list[str]:
    """Text of enabled, non-blank bullets in their stored order."""
    return [b.text.strip() for b in bullets if b.enabled and b.text.strip()]


def format_date_range(start: str | None, end: str | None) -> str:
    """'Jan 2022 to Present'; a missing side is dropped instead of leaving a dangling 'to'."""
    start = (start or "").strip()
    end = (end or "").strip()
    if start and end:
        return f"{start} to {end}"
    return start or end


def org_line(organization: str | None, location: str | None) -> str:
    return join_non_empty([organization, location], ", ")


def contact_line(header: Header) -> str:
    return join_non_empty(
        [header.location, header.phone, header.email, header.linkedin, header.website],
        " | ",
    )


def display_name(header: Header) -> str:
    return header.name.strip() or PLACEHOLDER_NAME


def export_filename(company_name: str, target: ExportTarget, ext: str) -> str:
    """Resume_Acme_Corp.pdf / CoverLetter_Acme_Corp.docx / Application_Acme_Corp.txt"""
    company = re.sub(r"\s+", "_", (company_name or "").strip())
    return f"{FILENAME_PREFIX[target]}_{company}.{ext}"


def split_paragraphs(text: str) -> list[str]:
    """Split on blank lines. Lines inside a paragraph are kept (stripped) and joined by newlines."""
    paragraphs = []
    for block in re.split(r"\n\s*\n", (text or "").replace("\r\n", "\n")):
        lines = [line.strip() for line in block.splitlines() if line.strip()]
        if lines:
            paragraphs.append("\n".join(lines))
    return paragraphs


# ── Section builder ──────────────────────────────────────────────────────────


def build_sections(resume: MasterResume) -> list[RenderSection]:
    """
    Sections in fixed order, each present only when its source list is non-empty:
    EDUCATION → WORK EXPERIENCE → LEADERSHIP EXPERIENCE → ACADEMIC PROJECTS → SKILLS → LANGUAGES.
    The header is not a section; renderers draw it first.
    """
    sections: list[RenderSection] = []

    if resume.education:
        sections.append(RenderSection(
            heading="EDUCATION",
            entries=[
                RenderEntry(
                    title=join_non_empty([edu.degree, edu.field], " in "),
                    dates=edu.graduation_date.strip(),
                    subtitle=org_line(edu.school, edu.location),
                    bullets=enabled_bullets(edu.bullets),
                )
                for edu in resume.education
            ],
        ))

    if resume.experience:
        sections.append(RenderSection(
            heading="WORK EXPERIENCE",
            entries=[
                RenderEntry(
                    title=exp.title.strip(),
                    dates=format_date_range(exp.start_date, exp.end_date),
                    subtitle=org_line(exp.company, exp.location),
                    bullets=enabled_bullets(exp.bullets),
                )
                for exp in resume.experience
            ],
        ))

    if resume.leadership:
        sections.append(RenderSection(
            heading="LEADERSHIP EXPERIENCE",
            entries=[
                RenderEntry(
                    title=lead.title.strip(),
                    dates=format_date_range(lead.start_date, lead.end_date),
                    subtitle=org_line(lead.organization, lead.location),
                    bullets=enabled_bullets(lead.bullets),
                )
                for lead in resume.leadership
            ],
        ))

    if resume.projects:
        sections.append(RenderSection(
            heading="ACADEMIC PROJECTS",
            entries=[
                RenderEntry(
                    title=proj.name.strip(),
                    dates=format_date_range(proj.start_date, proj.end_date),
                    link=(proj.link or "").strip(),
                    bullets=enabled_bullets(proj.bullets),
                )
                for proj in resume.projects
            ],
        ))

    skills = resume.skills
    all_skills = join_non_empty([*skills.technical, *skills.tools, *skills.certifications], ", ")
    if all_skills:
        sections.append(RenderSection(heading="SKILLS", text=all_skills))

    languages = join_non_empty(skills.languages, ", ")
    if languages:
        sections.append(RenderSection(heading="LANGUAGES", text=languages))

    return sections
