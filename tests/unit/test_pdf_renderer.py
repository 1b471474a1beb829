"""Unit tests for the reportlab PDF backend.

Rendering uses compress=False so the page content streams can be searched
for the drawn strings.
"""

import re

import pytest

from jobtracker.models.export_models import ExportContent, ExportTarget
from jobtracker.models.resume_models import MasterResume
from jobtracker.services.pdf_renderer import PdfRenderer, render_pdf


def _render(content, target):
    renderer = PdfRenderer(compress=False)
    data = renderer.render(content, target)
    return renderer, data


@pytest.mark.unit
def test_empty_resume_renders_single_page_with_placeholder_name():
    renderer, data = _render(ExportContent(master_resume=MasterResume()), ExportTarget.RESUME)

    assert data.startswith(b"%PDF")
    assert renderer.page_count == 1
    assert re.search(rb"/Count 1\b", data)
    assert b"Your Name" in data


@pytest.mark.unit
def test_output_is_byte_deterministic(export_content):
    first = render_pdf(export_content, ExportTarget.BOTH, compress=False)
    second = render_pdf(export_content, ExportTarget.BOTH, compress=False)
    assert first == second


@pytest.mark.unit
def test_disabled_bullets_are_not_drawn(export_content):
    _, data = _render(export_content, ExportTarget.RESUME)
    assert b"Shipped the billing service" in data
    assert b"Secret disabled bullet" not in data


@pytest.mark.unit
def test_sections_drawn_only_when_present(export_content):
    _, data = _render(export_content, ExportTarget.RESUME)
    assert b"WORK EXPERIENCE" in data
    assert b"ACADEMIC PROJECTS" in data
    assert b"LEADERSHIP EXPERIENCE" not in data


@pytest.mark.unit
def test_project_link_is_clickable(export_content):
    _, data = _render(export_content, ExportTarget.RESUME)
    assert b"https://github.com/jane/tracker" in data


@pytest.mark.unit
def test_cover_letter_starts_on_fresh_page(export_content):
    renderer, data = _render(export_content, ExportTarget.BOTH)
    assert renderer.page_count == 2
    assert b"Cover Letter" in data
    assert b"I am excited to apply." in data


@pytest.mark.unit
def test_cover_letter_only_is_single_page(export_content):
    renderer, data = _render(export_content, ExportTarget.COVER_LETTER)
    assert renderer.page_count == 1
    assert b"WORK EXPERIENCE" not in data


@pytest.mark.unit
def test_long_resume_paginates(resume_data):
    resume_data["experience"] = [
        {
            "title": f"Engineer {i}",
            "company": "Initech",
            "startDate": "2020",
            "endDate": "2021",
            "bullets": [f"Delivered project number {i}-{j}" for j in range(6)],
        }
        for i in range(20)
    ]
    content = ExportContent(company_name="Acme", master_resume=MasterResume.model_validate(resume_data))
    renderer, data = _render(content, ExportTarget.RESUME)

    assert renderer.page_count > 1
    assert re.search(rb"/Count %d\b" % renderer.page_count, data)
    assert b"Delivered project number 19-5" in data


@pytest.mark.unit
def test_fallback_resume_uses_generic_heading():
    content = ExportContent(resume_text="Line one\nLine two", company_name="Acme Corp", role_name="Engineer")
    _, data = _render(content, ExportTarget.RESUME)
    assert b"Resume - Engineer" in data
    assert b"Line two" in data


@pytest.mark.unit
def test_wrapped_entry_header_stays_with_its_first_bullet(resume_data):
    resume_data["projects"] = [
        {
            "name": f"Project {i:02d} " + "with a deliberately long descriptive name " * 4,
            "link": f"github.com/jane/project-{i:02d}",
            "bullets": [f"Result {i:02d}"],
        }
        for i in range(30)
    ]
    content = ExportContent(master_resume=MasterResume.model_validate(resume_data))
    renderer = PdfRenderer(compress=False)
    drawn = []
    draw = renderer._draw

    def recording_draw(x, text, *args, **kwargs):
        drawn.append((renderer.page_count, text))
        draw(x, text, *args, **kwargs)

    renderer._draw = recording_draw
    renderer.render(content, ExportTarget.RESUME)

    assert renderer.page_count > 1
    for i in range(30):
        title_page = next(page for page, text in drawn if text.startswith(f"Project {i:02d}"))
        bullet_page = next(page for page, text in drawn if text == f"• Result {i:02d}")
        assert title_page == bullet_page
