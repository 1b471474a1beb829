import logging

from fastapi import APIRouter, Depends, HTTPException

from jobtracker.exceptions import NotFoundError, PersistenceError
from jobtracker.models.resume_models import BulletToggle, MasterResume, MasterResumeUpdate
from jobtracker.services.autosave import resume_saver
from jobtracker.utils.dependencies import Caller, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


def _schedule_save(caller: Caller) -> None:
    resume_saver.schedule(caller.user_id, caller.store.save_master_resume)


@router.get("", response_model=MasterResume)
async def get_master_resume(caller: Caller = Depends(get_current_user)):
    """Return the caller's master resume (empty defaults on first use)."""
    return caller.store.master_resume


@router.patch("", response_model=MasterResume)
async def update_master_resume(update: MasterResumeUpdate, caller: Caller = Depends(get_current_user)):
    """Merge the provided top-level fields; the save is debounced."""
    resume = caller.store.update_master_resume(update)
    if caller.store.has_unsaved_changes:
        _schedule_save(caller)
    return resume


@router.put("", response_model=MasterResume)
async def replace_master_resume(resume: MasterResume, caller: Caller = Depends(get_current_user)):
    """Replace the whole master resume and save immediately."""
    resume_saver.cancel(caller.user_id)
    store = caller.store
    store.set_master_resume(resume)
    try:
        store.save_master_resume()
    except PersistenceError as e:
        store.has_unsaved_changes = True
        raise HTTPException(status_code=500, detail=e.message)
    return store.master_resume


@router.patch("/{section}/{entry_id}/bullets/{bullet_id}", response_model=MasterResume)
async def toggle_bullet(
    section: str,
    entry_id: str,
    bullet_id: str,
    toggle: BulletToggle,
    caller: Caller = Depends(get_current_user),
):
    """Enable or disable one bullet without deleting it."""
    try:
        resume = caller.store.set_bullet_enabled(section, entry_id, bullet_id, toggle.enabled)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    _schedule_save(caller)
    return resume


@router.post("/save")
async def save_now(caller: Caller = Depends(get_current_user)):
    """Flush any pending auto-save for the caller."""
    store = caller.store
    if resume_saver.is_pending(caller.user_id) or store.has_unsaved_changes:
        resume_saver.cancel(caller.user_id)
        try:
            store.save_master_resume()
        except PersistenceError as e:
            resume_saver.last_error[caller.user_id] = e.message
            raise HTTPException(status_code=500, detail=e.message)
        resume_saver.record_success(caller.user_id)
    return {"saved": True, **resume_saver.status(caller.user_id)}


@router.get("/save-status")
async def save_status(caller: Caller = Depends(get_current_user)):
    """Pending / last saved / last error for the caller's master resume."""
    return {
        "hasUnsavedChanges": caller.store.has_unsaved_changes,
        **resume_saver.status(caller.user_id),
    }
