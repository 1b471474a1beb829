"""
PDF Renderer — draw a resume and/or cover letter directly onto US-Letter pages.

Uses a reportlab canvas with absolute coordinates:
  - 612 x 792 pt page, 50 pt margins, 512 pt content width
  - Helvetica / Helvetica-Bold, black text, one accent color for links
  - A top-down cursor; every entry block and every bullet first checks that it
    fits above the bottom margin and starts a new page otherwise, so bullets
    are never split across pages
"""

from __future__ import annotations

import io
import logging

from reportlab.lib.pagesizes import LETTER
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from jobtracker.config import settings
from jobtracker.models.export_models import ExportContent, ExportTarget
from jobtracker.models.resume_models import MasterResume
from jobtracker.utils.resume_format import (
    FILENAME_PREFIX,
    RenderEntry,
    RenderSection,
    build_sections,
    contact_line,
    display_name,
    split_paragraphs,
)

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = LETTER
MARGIN_LEFT = 50
MARGIN_RIGHT = 50
MARGIN_TOP = 50
MARGIN_BOTTOM = 50
CONTENT_WIDTH = PAGE_WIDTH - MARGIN_LEFT - MARGIN_RIGHT

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

FONT_SIZE = {
    "name": 15,
    "contact": 9.5,
    "section_header": 10.5,
    "role_title": 10,
    "body": 9.5,
    "doc_heading": 14,
    "letter": 10,
}

SPACING = {
    "after_name": 14,
    "after_contact": 16,
    "rule_offset": 2,
    "after_section_header": 10,
    "after_role_line": 12,
    "after_org_line": 12,
    "bullet_line": 11,
    "text_line": 11,
    "between_entries": 6,
    "between_sections": 6,
    "after_doc_heading": 14,
    "after_company": 20,
    "fallback_line": 12,
    "letter_line": 13,
    "between_paragraphs": 8,
    "after_letter_heading": 24,
}

BULLET_INDENT = 20
DATE_GAP = 10
LINK_COLOR = (0, 0, 139 / 255)

# Minimum room needed before starting a block, so headings are not orphaned
SECTION_BLOCK = 50
ENTRY_BLOCK = 40


class PdfRenderer:
    """Stateful single-use renderer: one instance per document."""

    def __init__(self, compress: bool | None = None):
        self.compress = settings.pdf_compression if compress is None else compress
        self.page_count = 0
        self._canvas: canvas.Canvas | None = None
        self._y = MARGIN_TOP

    # ── Public API ───────────────────────────────────────────────────────

    def render(self, content: ExportContent, target: ExportTarget) -> bytes:
        buffer = io.BytesIO()
        self._canvas = canvas.Canvas(
            buffer,
            pagesize=LETTER,
            invariant=1,
            pageCompression=1 if self.compress else 0,
        )
        self._set_metadata(content, target)
        self._y = MARGIN_TOP
        self.page_count = 1

        resume_drawn = False
        if target.includes_resume:
            if content.master_resume is not None:
                self._draw_structured_resume(content.master_resume)
            else:
                self._draw_fallback_resume(content)
            resume_drawn = True

        cover_letter = content.cover_letter_text.strip()
        if target.includes_cover_letter and cover_letter:
            if resume_drawn:
                self._new_page()
            self._draw_cover_letter(cover_letter)

        self._canvas.showPage()
        self._canvas.save()

        data = buffer.getvalue()
        logger.info(f"PDF rendered: {self.page_count} page(s), {len(data)} bytes, target={target.value}")
        return data

    # ── Page / cursor helpers ────────────────────────────────────────────

    def _set_metadata(self, content: ExportContent, target: ExportTarget) -> None:
        company = content.company_name.strip()
        title = FILENAME_PREFIX[target] if not company else f"{FILENAME_PREFIX[target]} - {company}"
        self._canvas.setTitle(title)
        self._canvas.setCreator(settings.app_name)
        if content.master_resume is not None and content.master_resume.header.name.strip():
            self._canvas.setAuthor(content.master_resume.header.name.strip())
        if content.role_name.strip():
            self._canvas.setSubject(content.role_name.strip())

    def _new_page(self) -> None:
        self._canvas.showPage()
        self._y = MARGIN_TOP
        self.page_count += 1

    def _ensure_space(self, required: float) -> bool:
        """Start a new page when the next `required` points would cross the bottom margin."""
        if self._y + required > PAGE_HEIGHT - MARGIN_BOTTOM:
            self._new_page()
            return True
        return False

    def _draw(self, x: float, text: str, font: str, size: float, color=(0, 0, 0)) -> None:
        self._canvas.setFont(font, size)
        self._canvas.setFillColorRGB(*color)
        self._canvas.drawString(x, PAGE_HEIGHT - self._y, text)

    def _draw_centered(self, text: str, font: str, size: float) -> None:
        width = stringWidth(text, font, size)
        self._draw((PAGE_WIDTH - width) / 2, text, font, size)

    def _draw_right(self, text: str, font: str, size: float) -> None:
        width = stringWidth(text, font, size)
        self._draw(PAGE_WIDTH - MARGIN_RIGHT - width, text, font, size)

    def _draw_rule(self, thickness: float = 0.5) -> None:
        self._canvas.setStrokeColorRGB(0, 0, 0)
        self._canvas.setLineWidth(thickness)
        y = PAGE_HEIGHT - self._y
        self._canvas.line(MARGIN_LEFT, y, PAGE_WIDTH - MARGIN_RIGHT, y)

    def _draw_link(self, url: str) -> None:
        size = FONT_SIZE["body"]
        self._draw(MARGIN_LEFT, url, FONT, size, color=LINK_COLOR)
        width = stringWidth(url, FONT, size)
        baseline = PAGE_HEIGHT - self._y
        self._canvas.linkURL(
            _normalize_url(url),
            (MARGIN_LEFT, baseline - 2, MARGIN_LEFT + width, baseline + size),
            relative=0,
        )

    # ── Structured resume ────────────────────────────────────────────────

    def _draw_structured_resume(self, resume: MasterResume) -> None:
        self._draw_centered(display_name(resume.header), FONT_BOLD, FONT_SIZE["name"])
        self._y += SPACING["after_name"]

        contact = contact_line(resume.header)
        if contact:
            self._draw_centered(contact, FONT, FONT_SIZE["contact"])
        self._y += SPACING["after_contact"]

        for section in build_sections(resume):
            self._draw_section(section)

    def _draw_section(self, section: RenderSection) -> None:
        self._ensure_space(SECTION_BLOCK)
        self._draw(MARGIN_LEFT, section.heading.upper(), FONT_BOLD, FONT_SIZE["section_header"])
        self._y += SPACING["rule_offset"]
        self._draw_rule()
        self._y += SPACING["after_section_header"]

        if section.text:
            for line in simpleSplit(section.text, FONT, FONT_SIZE["body"], CONTENT_WIDTH):
                self._ensure_space(SPACING["text_line"])
                self._draw(MARGIN_LEFT, line, FONT, FONT_SIZE["body"])
                self._y += SPACING["text_line"]
        else:
            for entry in section.entries:
                self._draw_entry(entry)

        self._y += SPACING["between_sections"]

    def _draw_entry(self, entry: RenderEntry) -> None:
        # Title (bold, may wrap) with the date range right-aligned on its first line
        size = FONT_SIZE["role_title"]
        date_width = stringWidth(entry.dates, FONT, size) + DATE_GAP if entry.dates else 0
        title_lines = simpleSplit(entry.title, FONT_BOLD, size, CONTENT_WIDTH - date_width) or [""]
        self._ensure_space(max(ENTRY_BLOCK, self._entry_header_height(entry, len(title_lines))))

        for i, line in enumerate(title_lines):
            self._draw(MARGIN_LEFT, line, FONT_BOLD, size)
            if i == 0 and entry.dates:
                self._draw_right(entry.dates, FONT, size)
            self._y += SPACING["after_role_line"]

        if entry.subtitle:
            self._draw(MARGIN_LEFT, entry.subtitle, FONT, FONT_SIZE["body"])
            self._y += SPACING["after_org_line"]

        if entry.link:
            self._draw_link(entry.link)
            self._y += SPACING["after_org_line"]

        for bullet in entry.bullets:
            self._draw_bullet(bullet)

        self._y += SPACING["between_entries"]

    @staticmethod
    def _entry_header_height(entry: RenderEntry, title_line_count: int) -> float:
        """Title, subtitle and link lines plus the first bullet line, kept on one page."""
        height = title_line_count * SPACING["after_role_line"]
        if entry.subtitle:
            height += SPACING["after_org_line"]
        if entry.link:
            height += SPACING["after_org_line"]
        if entry.bullets:
            height += SPACING["bullet_line"]
        return height

    def _draw_bullet(self, text: str) -> None:
        """Hanging indent: first line at the margin, continuation lines indented."""
        size = FONT_SIZE["body"]
        line_height = SPACING["bullet_line"]
        lines = simpleSplit(f"• {text}", FONT, size, CONTENT_WIDTH - BULLET_INDENT)

        usable = PAGE_HEIGHT - MARGIN_TOP - MARGIN_BOTTOM
        self._ensure_space(min(len(lines) * line_height, usable))

        for i, line in enumerate(lines):
            if i:
                self._ensure_space(line_height)
            self._draw(MARGIN_LEFT + (BULLET_INDENT if i else 0), line, FONT, size)
            self._y += line_height

    # ── Fallback resume ──────────────────────────────────────────────────

    def _draw_fallback_resume(self, content: ExportContent) -> None:
        role = content.role_name.strip()
        self._draw(MARGIN_LEFT, f"Resume - {role}" if role else "Resume", FONT_BOLD, FONT_SIZE["doc_heading"])
        self._y += SPACING["after_doc_heading"]

        company = content.company_name.strip()
        if company:
            self._draw(MARGIN_LEFT, company, FONT, FONT_SIZE["letter"])
        self._y += SPACING["after_company"]

        for raw_line in content.resume_text.replace("\r\n", "\n").split("\n"):
            for line in simpleSplit(raw_line, FONT, FONT_SIZE["letter"], CONTENT_WIDTH) or [""]:
                self._ensure_space(SPACING["fallback_line"])
                self._draw(MARGIN_LEFT, line, FONT, FONT_SIZE["letter"])
                self._y += SPACING["fallback_line"]

    # ── Cover letter ─────────────────────────────────────────────────────

    def _draw_cover_letter(self, text: str) -> None:
        self._draw(MARGIN_LEFT, "Cover Letter", FONT_BOLD, FONT_SIZE["doc_heading"])
        self._y += SPACING["after_letter_heading"]

        size = FONT_SIZE["letter"]
        for paragraph in split_paragraphs(text):
            for source_line in paragraph.split("\n"):
                for line in simpleSplit(source_line, FONT, size, CONTENT_WIDTH):
                    self._ensure_space(SPACING["letter_line"])
                    self._draw(MARGIN_LEFT, line, FONT, size)
                    self._y += SPACING["letter_line"]
            self._y += SPACING["between_paragraphs"]


def render_pdf(content: ExportContent, target: ExportTarget, compress: bool | None = None) -> bytes:
    """Render the requested documents to PDF bytes."""
    return PdfRenderer(compress=compress).render(content, target)


def _normalize_url(url: str) -> str:
    if url.startswith("http://") or url.startswith("https://") or url.startswith("mailto:"):
        return url
    return f"https://{url}"
