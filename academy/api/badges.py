"""
Badge API endpoints
"""
from fastapi import APIRouter, Depends
import logging

from academy.deps import get_current_profile, get_store
from academy.models import Profile
from academy.schemas.badge import BadgeBoard
from academy.services.badge_service import badge_board
from academy.store import Store
from academy.utils.cache import cache_service

router = APIRouter(prefix="/api/badges", tags=["badges"])
logger = logging.getLogger(__name__)


@router.get("", response_model=BadgeBoard)
async def get_badges(
    profile: Profile = Depends(get_current_profile),
    store: Store = Depends(get_store)
):
    """Badge catalog with the learner's earned badges marked"""
    held = cache_service.read_through(
        cache_service.key("badges", profile.id),
        lambda: {
            badge.badge_type: badge.earned_at.isoformat() if badge.earned_at else None
            for badge in store.list_user_badges(profile.id)
        },
    )
    return badge_board(held or {})
