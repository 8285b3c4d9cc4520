"""
Profile and leaderboard API endpoints
"""
from fastapi import APIRouter, Depends, Query
from typing import List
import logging

from academy.deps import get_current_profile, get_store
from academy.models import Profile
from academy.schemas.profile import LeaderboardEntry, ProfileResponse
from academy.services.profile_service import profile_service
from academy.store import Store

router = APIRouter(prefix="/api", tags=["profile"])
logger = logging.getLogger(__name__)


@router.get("/profile/me", response_model=ProfileResponse)
async def get_my_profile(
    profile: Profile = Depends(get_current_profile),
    store: Store = Depends(get_store)
):
    """
    Current learner's profile

    Includes level icon, XP needed to complete the tier and
    progress through it as a percentage.
    """
    return ProfileResponse(**profile_service.profile_view(store, profile.id))


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
async def get_leaderboard(
    limit: int = Query(None, ge=1, le=100),
    profile: Profile = Depends(get_current_profile),
    store: Store = Depends(get_store)
):
    """Top learners by total XP"""
    return [LeaderboardEntry(**entry) for entry in profile_service.leaderboard(store, limit)]
