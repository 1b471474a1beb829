"""
Export Service — pick a backend by format and wrap its output as a named artifact.
"""

from __future__ import annotations

import logging

from jobtracker.models.export_models import ExportArtifact, ExportContent, ExportFormat, ExportTarget
from jobtracker.services.docx_builder import build_docx
from jobtracker.services.pdf_renderer import render_pdf
from jobtracker.services.text_renderer import render_text
from jobtracker.utils.resume_format import export_filename

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    ExportFormat.PDF: "application/pdf",
    ExportFormat.DOCX: "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ExportFormat.TXT: "text/plain; charset=utf-8",
}


def render_export(content: ExportContent, target: ExportTarget, fmt: ExportFormat) -> ExportArtifact:
    """Render `content` for `target` in the requested format."""
    if fmt == ExportFormat.PDF:
        data = render_pdf(content, target)
    elif fmt == ExportFormat.DOCX:
        data = build_docx(content, target).getvalue()
    else:
        data = render_text(content, target).encode("utf-8")

    artifact = ExportArtifact(
        filename=export_filename(content.company_name, target, fmt.value),
        content_type=CONTENT_TYPES[fmt],
        data=data,
    )
    logger.info(f"Export ready: {artifact.filename} ({len(data)} bytes)")
    return artifact
