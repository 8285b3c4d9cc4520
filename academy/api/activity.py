"""
Daily activity tracking API endpoints
"""
from fastapi import APIRouter, Depends
import logging

from academy.deps import get_current_profile, get_store
from academy.models import Profile
from academy.schemas.activity import ActivityCounts, DayActivity, SaveActivityResponse, WeekActivity
from academy.schemas.progress import BadgeInfo
from academy.services.activity_service import activity_service
from academy.store import Store

router = APIRouter(prefix="/api/activity", tags=["activity"])
logger = logging.getLogger(__name__)


@router.get("/today", response_model=DayActivity)
async def get_today(
    profile: Profile = Depends(get_current_profile),
    store: Store = Depends(get_store)
):
    return activity_service.today(store, profile)


@router.put("/today", response_model=SaveActivityResponse)
async def save_today(
    counts: ActivityCounts,
    profile: Profile = Depends(get_current_profile),
    store: Store = Depends(get_store)
):
    """Save today's calls, emails and LinkedIn touches"""
    new_badges = activity_service.save(store, profile, counts.model_dump())
    return SaveActivityResponse(
        today=activity_service.today(store, profile),
        new_badges=[BadgeInfo(**vars(badge)) for badge in new_badges],
    )


@router.get("/week", response_model=WeekActivity)
async def get_week(
    profile: Profile = Depends(get_current_profile),
    store: Store = Depends(get_store)
):
    """Today and the previous six days, oldest first, with totals"""
    return activity_service.week(store, profile)
