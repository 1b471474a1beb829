import io
import logging
import re
import unicodedata
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse

from jobtracker.models.export_models import ExportContent, ExportFormat, ExportTarget
from jobtracker.services.export_service import render_export
from jobtracker.utils.dependencies import Caller, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/{fmt}")
async def export_document(
    fmt: ExportFormat,
    content: ExportContent,
    target: ExportTarget = Query(ExportTarget.RESUME),
    caller: Caller = Depends(get_current_user),
):
    """Render the resume and/or cover letter and return it as a file download."""
    try:
        artifact = render_export(content, target, fmt)
    except Exception as e:
        logger.exception(f"Export failed ({fmt.value}, {target.value}) for {caller.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate document")

    return StreamingResponse(
        io.BytesIO(artifact.data),
        media_type=artifact.content_type,
        headers={"Content-Disposition": _content_disposition(artifact.filename)},
    )


def _content_disposition(filename: str) -> str:
    """ASCII filename for old clients plus an RFC 5987 UTF-8 variant."""
    stripped = "".join(c for c in unicodedata.normalize("NFKD", filename) if not unicodedata.combining(c))
    ascii_name = re.sub(r"[?\"\\]", "_", stripped.encode("ascii", "replace").decode("ascii"))
    return f'attachment; filename="{ascii_name}"; filename*=UTF-8\'\'{quote(filename, safe="")}'
