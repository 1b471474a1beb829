"""
DOCX Builder Service — generate a resume and/or cover letter with python-docx.

Produces a clean single-column document that mirrors the PDF layout:
  - Name + contact info header
  - Section headings with a bottom border
  - Entry title with dates pushed to a right tab stop
  - Native "List Bullet" paragraphs for bullets
  - Cover letter on its own page when both documents are requested
"""

from __future__ import annotations

import io
import logging

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_TAB_ALIGNMENT
from docx.opc.constants import RELATIONSHIP_TYPE
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Pt, RGBColor

from jobtracker.models.export_models import ExportContent, ExportTarget
from jobtracker.models.resume_models import MasterResume
from jobtracker.utils.resume_format import (
    RenderEntry,
    RenderSection,
    build_sections,
    contact_line,
    display_name,
    split_paragraphs,
)

logger = logging.getLogger(__name__)

LINK_COLOR = RGBColor(0x00, 0x00, 0xAA)
DATE_TAB_STOP = Inches(6.5)


def build_docx(content: ExportContent, target: ExportTarget) -> io.BytesIO:
    """
    Generate a DOCX document for the requested target.

    Returns a BytesIO buffer containing the DOCX file.
    """
    doc = Document()

    # ── Page margins ─────────────────────────────────────────────────────
    for section in doc.sections:
        section.top_margin = Inches(0.5)
        section.bottom_margin = Inches(0.5)
        section.left_margin = Inches(0.75)
        section.right_margin = Inches(0.75)

    # ── Default font ─────────────────────────────────────────────────────
    style = doc.styles["Normal"]
    font = style.font
    font.name = "Calibri"
    font.size = Pt(10)
    font.color.rgb = RGBColor(0x00, 0x00, 0x00)

    # Reduce paragraph spacing globally
    style.paragraph_format.space_before = Pt(0)
    style.paragraph_format.space_after = Pt(2)

    resume_drawn = False
    if target.includes_resume:
        if content.master_resume is not None:
            _add_structured_resume(doc, content.master_resume)
        else:
            _add_fallback_resume(doc, content)
        resume_drawn = True

    cover_letter = content.cover_letter_text.strip()
    if target.includes_cover_letter and cover_letter:
        _add_cover_letter(doc, cover_letter, page_break=resume_drawn)

    # ── Write to buffer ──────────────────────────────────────────────────
    buffer = io.BytesIO()
    doc.save(buffer)
    buffer.seek(0)

    logger.info(f"DOCX generated: target={target.value}, company={content.company_name!r}")
    return buffer


# ── Structured resume ────────────────────────────────────────────────────────


def _add_structured_resume(doc: Document, resume: MasterResume) -> None:
    name_para = doc.add_paragraph()
    name_para.alignment = WD_ALIGN_PARAGRAPH.CENTER
    name_run = name_para.add_run(display_name(resume.header))
    name_run.bold = True
    name_run.font.size = Pt(15)
    name_para.paragraph_format.space_after = Pt(2)

    contact = contact_line(resume.header)
    if contact:
        contact_para = doc.add_paragraph()
        contact_para.alignment = WD_ALIGN_PARAGRAPH.CENTER
        contact_run = contact_para.add_run(contact)
        contact_run.font.size = Pt(9.5)
        contact_para.paragraph_format.space_after = Pt(6)

    for section in build_sections(resume):
        _add_section(doc, section)


def _add_section(doc: Document, section: RenderSection) -> None:
    _add_section_heading(doc, section.heading)

    if section.text:
        para = doc.add_paragraph()
        run = para.add_run(section.text)
        run.font.size = Pt(9.5)
        para.paragraph_format.space_after = Pt(4)
        return

    for entry in section.entries:
        _add_entry(doc, entry)


def _add_entry(doc: Document, entry: RenderEntry) -> None:
    # Title + dates (right-aligned via tab)
    title_para = doc.add_paragraph()
    title_run = title_para.add_run(entry.title)
    title_run.bold = True
    title_run.font.size = Pt(10)
    if entry.dates:
        title_para.paragraph_format.tab_stops.add_tab_stop(DATE_TAB_STOP, alignment=WD_TAB_ALIGNMENT.RIGHT)
        date_run = title_para.add_run(f"\t{entry.dates}")
        date_run.font.size = Pt(10)
    title_para.paragraph_format.space_before = Pt(4)
    title_para.paragraph_format.space_after = Pt(1)

    if entry.subtitle:
        sub_para = doc.add_paragraph()
        sub_run = sub_para.add_run(entry.subtitle)
        sub_run.font.size = Pt(9.5)
        sub_para.paragraph_format.space_after = Pt(1)

    if entry.link:
        link_para = doc.add_paragraph()
        _add_hyperlink(link_para, entry.link)
        link_para.paragraph_format.space_after = Pt(1)

    for bullet in entry.bullets:
        bp = doc.add_paragraph(style="List Bullet")
        br = bp.add_run(bullet)
        br.font.size = Pt(9.5)
        bp.paragraph_format.space_before = Pt(0)
        bp.paragraph_format.space_after = Pt(1)


# ── Fallback resume ──────────────────────────────────────────────────────────


def _add_fallback_resume(doc: Document, content: ExportContent) -> None:
    role = content.role_name.strip()
    title_para = doc.add_paragraph()
    title_run = title_para.add_run(f"Resume - {role}" if role else "Resume")
    title_run.bold = True
    title_run.font.size = Pt(14)
    title_para.paragraph_format.space_after = Pt(4)

    company = content.company_name.strip()
    if company:
        company_para = doc.add_paragraph(company)
        company_para.paragraph_format.space_after = Pt(10)

    for line in content.resume_text.splitlines():
        if line.strip():
            doc.add_paragraph(line.strip())


# ── Cover letter ─────────────────────────────────────────────────────────────


def _add_cover_letter(doc: Document, text: str, page_break: bool) -> None:
    heading = doc.add_paragraph()
    heading_run = heading.add_run("Cover Letter")
    heading_run.bold = True
    heading_run.font.size = Pt(14)
    heading.paragraph_format.page_break_before = page_break
    heading.paragraph_format.space_after = Pt(12)

    for paragraph in split_paragraphs(text):
        para = doc.add_paragraph()
        lines = paragraph.split("\n")
        for i, line in enumerate(lines):
            run = para.add_run(line)
            run.font.size = Pt(10)
            if i < len(lines) - 1:
                run.add_break()
        para.paragraph_format.space_after = Pt(8)


# ── XML helpers ──────────────────────────────────────────────────────────────


def _add_section_heading(doc: Document, title: str) -> None:
    """Add a styled section heading with a bottom border."""
    para = doc.add_paragraph()
    run = para.add_run(title.upper())
    run.bold = True
    run.font.size = Pt(10.5)
    para.paragraph_format.space_before = Pt(8)
    para.paragraph_format.space_after = Pt(3)
    para.paragraph_format.keep_with_next = True

    # Add bottom border via XML
    pPr = para._element.get_or_add_pPr()
    pBdr = pPr.makeelement(qn("w:pBdr"), {})
    bottom = pBdr.makeelement(
        qn("w:bottom"),
        {
            qn("w:val"): "single",
            qn("w:sz"): "4",
            qn("w:space"): "1",
            qn("w:color"): "000000",
        },
    )
    pBdr.append(bottom)
    pPr.append(pBdr)


def _add_hyperlink(para, url: str) -> None:
    """Append a clickable, underlined, blue hyperlink run to `para`."""
    target = url if url.startswith(("http://", "https://", "mailto:")) else f"https://{url}"
    r_id = para.part.relate_to(target, RELATIONSHIP_TYPE.HYPERLINK, is_external=True)

    hyperlink = OxmlElement("w:hyperlink")
    hyperlink.set(qn("r:id"), r_id)

    run = para.add_run(url)
    run.font.size = Pt(9.5)
    run.font.underline = True
    run.font.color.rgb = LINK_COLOR

    # Move the styled run inside the hyperlink element
    hyperlink.append(run._r)
    para._p.append(hyperlink)
