from typing import Optional

from fastapi import APIRouter, Depends, Query

from jobtracker.models.tracker_models import DashboardSummary, TrackerStats, UpcomingItem
from jobtracker.services import tracker_service
from jobtracker.utils.dependencies import Caller, get_current_user

router = APIRouter()


@router.get("/stats", response_model=TrackerStats)
async def get_stats(caller: Caller = Depends(get_current_user)):
    """Status breakdown, response rates, monthly timeline and weekly activity."""
    return tracker_service.tracker_stats(caller.store.applications)


@router.get("/upcoming", response_model=list[UpcomingItem])
async def get_upcoming(
    limit: Optional[int] = Query(None, ge=1),
    caller: Caller = Depends(get_current_user),
):
    """Incomplete interviews and reminders, soonest first."""
    return tracker_service.upcoming_items(caller.store.applications, limit=limit)


@router.get("/dashboard", response_model=DashboardSummary)
async def get_dashboard(caller: Caller = Depends(get_current_user)):
    store = caller.store
    return tracker_service.dashboard_summary(
        store.applications,
        job_count=len(store.jobs),
        resume_complete=store.master_resume.is_complete(),
    )
