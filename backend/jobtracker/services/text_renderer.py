"""
Plain-text renderer — the simplest backend and the fallback for environments
that cannot open PDF/DOCX. Output is a single deterministic string.
"""

from __future__ import annotations

import logging

from jobtracker.models.export_models import ExportContent, ExportTarget
from jobtracker.utils.resume_format import build_sections, contact_line

logger = logging.getLogger(__name__)

RULE = "─" * 50
DOUBLE_RULE = "=" * 50


def render_text(content: ExportContent, target: ExportTarget) -> str:
    """Render the requested documents as plain text."""
    lines: list[str] = []
    resume_drawn = False

    if target.includes_resume:
        if content.master_resume is not None:
            lines.extend(_structured_resume(content))
        else:
            lines.extend(_fallback_resume(content))
        resume_drawn = True

    cover_letter = content.cover_letter_text.strip()
    if target.includes_cover_letter and cover_letter:
        if resume_drawn:
            lines.extend(["", DOUBLE_RULE, ""])
        lines.extend(["COVER LETTER", DOUBLE_RULE, "", cover_letter])

    text = "\n".join(lines)
    if text and not text.endswith("\n"):
        text += "\n"

    logger.info(f"Text export rendered: {len(text)} chars, target={target.value}")
    return text


def _structured_resume(content: ExportContent) -> list[str]:
    resume = content.master_resume
    lines = [resume.header.name.strip(), contact_line(resume.header), ""]

    for section in build_sections(resume):
        lines.extend([section.heading, RULE])
        if section.text:
            lines.extend([section.text, ""])
            continue
        for entry in section.entries:
            lines.append(f"{entry.title}\t{entry.dates}" if entry.dates else entry.title)
            if entry.subtitle:
                lines.append(entry.subtitle)
            if entry.link:
                lines.append(entry.link)
            lines.extend(f"• {bullet}" for bullet in entry.bullets)
            lines.append("")

    while lines and lines[-1] == "":
        lines.pop()
    return lines


def _fallback_resume(content: ExportContent) -> list[str]:
    role = content.role_name.strip()
    lines = [f"RESUME - {role}" if role else "RESUME", content.company_name.strip(), DOUBLE_RULE, ""]
    lines.append(content.resume_text.rstrip())
    return lines
