import logging
from typing import Callable, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query

from jobtracker.exceptions import NotFoundError, PersistenceError
from jobtracker.models.application_models import (
    Application,
    ApplicationUpdate,
    FollowUpReminder,
    InterviewSchedule,
    InterviewUpdate,
    ReminderUpdate,
)
from jobtracker.models.generation_models import SaveGenerationRequest
from jobtracker.services import tracker_service
from jobtracker.services.generation_service import create_application_from_generation
from jobtracker.utils.dependencies import Caller, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()

T = TypeVar("T")


def _run(action: Callable[[], T]) -> T:
    """Run a store command, translating store errors to HTTP errors."""
    try:
        return action()
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=e.message)


# ── Applications ─────────────────────────────────────────────────────────────


@router.get("", response_model=list[Application])
async def list_applications(
    search: str = Query(""),
    status: str = Query("all"),
    caller: Caller = Depends(get_current_user),
):
    """Applications matching the search/status filter, newest first."""
    return tracker_service.filter_applications(caller.store.applications, search, status)


@router.post("", response_model=Application, status_code=201)
async def create_application(app: Application, caller: Caller = Depends(get_current_user)):
    return _run(lambda: caller.store.add_application(app))


@router.post("/from-generation", response_model=Application, status_code=201)
async def create_from_generation(req: SaveGenerationRequest, caller: Caller = Depends(get_current_user)):
    """Save a generated packet to the tracker as a draft application."""
    store = caller.store
    job = _run(lambda: store.get_job(req.job_description_id))
    app = create_application_from_generation(
        job,
        req.generated,
        req.settings,
        connection_info=req.connection_info,
        application_link=req.application_link,
    )
    logger.info(f"Saving generated application for {job.company!r} ({caller.user_id})")
    return _run(lambda: store.add_application(app))


@router.get("/{app_id}", response_model=Application)
async def get_application(app_id: str, caller: Caller = Depends(get_current_user)):
    return _run(lambda: caller.store.get_application(app_id))


@router.patch("/{app_id}", response_model=Application)
async def update_application(app_id: str, update: ApplicationUpdate, caller: Caller = Depends(get_current_user)):
    return _run(lambda: caller.store.update_application(app_id, update))


@router.delete("/{app_id}")
async def delete_application(app_id: str, caller: Caller = Depends(get_current_user)):
    _run(lambda: caller.store.delete_application(app_id))
    return {"deleted": app_id}


# ── Interviews ───────────────────────────────────────────────────────────────


@router.post("/{app_id}/interviews", response_model=Application, status_code=201)
async def add_interview(app_id: str, interview: InterviewSchedule, caller: Caller = Depends(get_current_user)):
    return _run(lambda: caller.store.add_interview(app_id, interview))


@router.patch("/{app_id}/interviews/{interview_id}", response_model=Application)
async def update_interview(
    app_id: str,
    interview_id: str,
    update: InterviewUpdate,
    caller: Caller = Depends(get_current_user),
):
    return _run(lambda: caller.store.update_interview(app_id, interview_id, update))


@router.delete("/{app_id}/interviews/{interview_id}", response_model=Application)
async def delete_interview(app_id: str, interview_id: str, caller: Caller = Depends(get_current_user)):
    return _run(lambda: caller.store.delete_interview(app_id, interview_id))


# ── Reminders ────────────────────────────────────────────────────────────────


@router.post("/{app_id}/reminders", response_model=Application, status_code=201)
async def add_reminder(app_id: str, reminder: FollowUpReminder, caller: Caller = Depends(get_current_user)):
    return _run(lambda: caller.store.add_reminder(app_id, reminder))


@router.patch("/{app_id}/reminders/{reminder_id}", response_model=Application)
async def update_reminder(
    app_id: str,
    reminder_id: str,
    update: ReminderUpdate,
    caller: Caller = Depends(get_current_user),
):
    return _run(lambda: caller.store.update_reminder(app_id, reminder_id, update))


@router.delete("/{app_id}/reminders/{reminder_id}", response_model=Application)
async def delete_reminder(app_id: str, reminder_id: str, caller: Caller = Depends(get_current_user)):
    return _run(lambda: caller.store.delete_reminder(app_id, reminder_id))
