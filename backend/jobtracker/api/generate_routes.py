import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from jobtracker.exceptions import GenerationError, GenerationInProgressError, InvalidInputError
from jobtracker.models.generation_models import GenerationRequest, GenerationResponse
from jobtracker.models.jd_models import ParseJobRequest, ParseJobResponse
from jobtracker.services import generation_service, jd_service
from jobtracker.utils.dependencies import Caller, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def generation_error_status(e: GenerationError) -> int:
    """503 when the AI service is unconfigured, 429 on rate/quota limits, 502 otherwise."""
    if e.status_code == 503:
        return 503
    if e.rate_limited:
        return 429
    return 502


@router.post("/generate-application", response_model=GenerationResponse)
async def generate_application(req: GenerationRequest, caller: Caller = Depends(get_current_user)):
    """Tailor the resume and draft the cover letter / why answers for one job."""
    try:
        content = await generation_service.generate_application(
            user_id=caller.user_id,
            master_resume=req.master_resume,
            job=req.job_description,
            settings=req.settings,
        )
    except InvalidInputError as e:
        return _error(400, e.message)
    except GenerationInProgressError as e:
        return _error(409, e.message)
    except GenerationError as e:
        logger.error(f"Generation failed for {caller.user_id}: {e.detail or e.message}")
        return _error(generation_error_status(e), e.message)
    return GenerationResponse(success=True, data=content)


@router.post("/parse-job-description", response_model=ParseJobResponse)
async def parse_job_description(req: ParseJobRequest, caller: Caller = Depends(get_current_user)):
    """Extract structured job fields from pasted posting text."""
    try:
        parsed = await jd_service.parse_job_text(req.job_text)
    except InvalidInputError as e:
        return _error(400, e.message)
    except GenerationError as e:
        logger.error(f"Job parsing failed for {caller.user_id}: {e.detail or e.message}")
        return _error(generation_error_status(e), e.message)
    return ParseJobResponse(success=True, data=parsed)
