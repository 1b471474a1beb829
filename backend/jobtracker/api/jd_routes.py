from fastapi import APIRouter, Depends, HTTPException

from jobtracker.exceptions import NotFoundError, PersistenceError
from jobtracker.models.jd_models import JobDescription, JobDescriptionUpdate
from jobtracker.utils.dependencies import Caller, get_current_user

router = APIRouter()


@router.get("", response_model=list[JobDescription])
async def list_jobs(caller: Caller = Depends(get_current_user)):
    """All saved job descriptions, newest first."""
    return sorted(caller.store.jobs, key=lambda j: j.created_at, reverse=True)


@router.post("", response_model=JobDescription, status_code=201)
async def create_job(job: JobDescription, caller: Caller = Depends(get_current_user)):
    """Save a job description (typically the reviewed output of /parse-job-description)."""
    try:
        return caller.store.add_job(job)
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=e.message)


@router.get("/{job_id}", response_model=JobDescription)
async def get_job(job_id: str, caller: Caller = Depends(get_current_user)):
    try:
        return caller.store.get_job(job_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.put("/{job_id}", response_model=JobDescription)
async def update_job(job_id: str, update: JobDescriptionUpdate, caller: Caller = Depends(get_current_user)):
    try:
        return caller.store.update_job(job_id, update)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=e.message)


@router.delete("/{job_id}")
async def delete_job(job_id: str, caller: Caller = Depends(get_current_user)):
    """Delete a job. Applications created from it keep their snapshot."""
    try:
        caller.store.delete_job(job_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=e.message)
    return {"deleted": job_id}
