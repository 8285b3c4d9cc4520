"""
Daily outbound activity tracking
"""
import logging
from datetime import date, timedelta
from typing import Any, Dict, List

from academy.models import DailyActivity, Profile
from academy.services.badge_service import BadgeDefinition, badge_service, weekly_totals
from academy.services.exceptions import ValidationError
from academy.store import Store

logger = logging.getLogger(__name__)

ACTIVITY_FIELDS = ("calls", "emails", "linkedin_touches")
WEEK_DAYS = 7
MAX_DAILY_COUNT = 10_000


def serialize_activity(activity: DailyActivity) -> Dict[str, Any]:
    return {
        "activity_date": activity.activity_date.isoformat(),
        "calls": activity.calls,
        "emails": activity.emails,
        "linkedin_touches": activity.linkedin_touches,
    }


class ActivityService:
    """Per-day call, email and LinkedIn counts with a rolling week view"""

    def today(self, store: Store, profile: Profile, today: date = None) -> Dict[str, Any]:
        today = today or date.today()
        activity = store.get_daily_activity(profile.id, today)
        if activity is None:
            return {"activity_date": today.isoformat(), "calls": 0, "emails": 0, "linkedin_touches": 0}
        return serialize_activity(activity)

    def save(
        self,
        store: Store,
        profile: Profile,
        counts: Dict[str, int],
        today: date = None
    ) -> List[BadgeDefinition]:
        """
        Upsert today's counts and evaluate activity badges

        Returns:
            Badges newly earned by this save
        """
        today = today or date.today()
        for name in ACTIVITY_FIELDS:
            value = counts.get(name, 0)
            if not isinstance(value, int) or not 0 <= value <= MAX_DAILY_COUNT:
                raise ValidationError(f"{name} must be a whole number from 0 to {MAX_DAILY_COUNT}", field=name)

        store.upsert_daily_activity(profile.id, profile.email, today, counts)
        logger.info(f"Activity saved: user={profile.id} date={today} counts={counts}")

        return badge_service.award_new_badges(store, profile, today)

    def week(self, store: Store, profile: Profile, today: date = None) -> Dict[str, Any]:
        """Rows for today and the six days before it, oldest first, with totals"""
        today = today or date.today()
        rows = store.list_daily_activity(profile.id, today - timedelta(days=WEEK_DAYS - 1), today)
        return {
            "start": (today - timedelta(days=WEEK_DAYS - 1)).isoformat(),
            "end": today.isoformat(),
            "days": [serialize_activity(row) for row in rows],
            "totals": weekly_totals(rows),
        }


# Global instance
activity_service = ActivityService()
