"""
Profile reads: cached profile view, level progress and leaderboard
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from academy.config import settings
from academy.models import Profile
from academy.services.auth_service import SIGNED_IN, AuthSession
from academy.services.exceptions import NotFoundError, ValidationError
from academy.services.leveling_service import is_valid_level, level_icon, level_progress, next_level_xp
from academy.store import Store
from academy.utils.cache import cache_service

logger = logging.getLogger(__name__)


def serialize_profile(profile: Profile) -> Dict[str, Any]:
    return {
        "id": str(profile.id),
        "email": profile.email,
        "full_name": profile.full_name,
        "role": profile.role,
        "level": profile.level,
        "level_icon": level_icon(profile.level),
        "total_xp": profile.total_xp,
        "next_level_xp": next_level_xp(profile.level),
        "level_progress": round(level_progress(profile.total_xp, profile.level), 2),
    }


class ProfileService:
    """Profile lookups through the read-through cache"""

    def on_session_change(self, event: str, session: Optional[AuthSession], db: Session):
        """Create the learner's profile on their first sign in"""
        if event == SIGNED_IN and session is not None:
            Store(db).ensure_profile(session.user_id, session.email)

    def profile_view(self, store: Store, user_id) -> Dict[str, Any]:
        def load():
            profile = store.get_profile(user_id)
            return serialize_profile(profile) if profile else None

        view = cache_service.read_through(cache_service.key("profile", user_id), load)
        if view is None:
            raise NotFoundError("Profile", user_id)
        return view

    def leaderboard(self, store: Store, limit: int = None) -> List[Dict[str, Any]]:
        limit = limit or settings.LEADERBOARD_LIMIT
        return [
            {
                "rank": rank,
                "user_id": str(profile.id),
                "email": profile.email,
                "full_name": profile.full_name,
                "level": profile.level,
                "level_icon": level_icon(profile.level),
                "total_xp": profile.total_xp,
            }
            for rank, profile in enumerate(store.list_leaderboard(limit), start=1)
        ]

    def set_level(self, store: Store, user_id, level: str) -> Profile:
        """
        Assign a level tier to a learner

        Tier promotion is an administrative action; level badges are
        evaluated by the caller afterwards.
        """
        if not is_valid_level(level):
            raise ValidationError(f"Unknown level '{level}'", field="level")
        if store.get_profile(user_id) is None:
            raise NotFoundError("Profile", user_id)

        profile = store.set_profile_level(user_id, level)
        cache_service.invalidate(user_id, "profile")
        logger.info(f"Level set: user={user_id} level={level}")
        return profile


# Global instance
profile_service = ProfileService()
