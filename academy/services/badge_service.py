"""
Badge award rules
Static badge catalog plus a rule table evaluated against a learner's stats
"""
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from types import MappingProxyType
from typing import Any, Callable, Collection, Dict, Iterable, List, Mapping, Tuple

from academy.config import settings
from academy.utils.cache import cache_service

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BadgeDefinition:
    type: str
    name: str
    icon: str
    description: str


@dataclass(frozen=True)
class DailyTargets:
    calls: int
    emails: int
    linkedin_touches: int


@dataclass(frozen=True)
class BadgeStats:
    """Everything the badge rules look at"""
    completed_task_count: int = 0
    level: str = "rookie"
    weekly_calls: int = 0
    weekly_emails: int = 0
    weekly_linkedin: int = 0
    target_streak_days: int = 0


WEEKLY_ACTIVITY_GOAL = 50
PERFECT_WEEK_DAYS = 7

BADGE_CATALOG: Mapping[str, BadgeDefinition] = MappingProxyType({
    badge.type: badge for badge in (
        BadgeDefinition("first_task", "First Steps", "🎯", "Complete your first task"),
        BadgeDefinition("task_5", "Getting Started", "⭐", "Complete 5 tasks"),
        BadgeDefinition("task_10", "Committed", "🌟", "Complete 10 tasks"),
        BadgeDefinition("prospector", "Prospector", "🥈", "Reach Prospector level"),
        BadgeDefinition("closer", "Closer", "🥇", "Reach Closer level"),
        BadgeDefinition("elite", "Elite", "💎", "Reach Elite level"),
        BadgeDefinition("call_50", "Phone Warrior", "📞", "Make 50 calls in a week"),
        BadgeDefinition("email_50", "Email Champion", "✉️", "Send 50 emails in a week"),
        BadgeDefinition("linkedin_50", "Social Seller", "💼", "50 LinkedIn touches in a week"),
        BadgeDefinition("perfect_week", "Perfect Week", "🔥", "Hit all targets for 7 days straight"),
    )
})

# Rule table in catalog order: (badge type, qualifying predicate)
BADGE_RULES: Tuple[Tuple[str, Callable[[BadgeStats], bool]], ...] = (
    ("first_task", lambda s: s.completed_task_count >= 1),
    ("task_5", lambda s: s.completed_task_count >= 5),
    ("task_10", lambda s: s.completed_task_count >= 10),
    ("prospector", lambda s: s.level == "prospector"),
    ("closer", lambda s: s.level == "closer"),
    ("elite", lambda s: s.level == "elite"),
    ("call_50", lambda s: s.weekly_calls >= WEEKLY_ACTIVITY_GOAL),
    ("email_50", lambda s: s.weekly_emails >= WEEKLY_ACTIVITY_GOAL),
    ("linkedin_50", lambda s: s.weekly_linkedin >= WEEKLY_ACTIVITY_GOAL),
    ("perfect_week", lambda s: s.target_streak_days >= PERFECT_WEEK_DAYS),
)


def evaluate_badges(current_badges: Collection[str], stats: BadgeStats) -> List[str]:
    """
    Badges the stats qualify for that are not held yet

    A held badge is skipped without evaluating its predicate, so the
    result never repeats anything in current_badges.
    """
    held = set(current_badges)
    return [
        badge_type for badge_type, predicate in BADGE_RULES
        if badge_type not in held and predicate(stats)
    ]


def meets_targets(day: Any, targets: DailyTargets) -> bool:
    return (
        (day.calls or 0) >= targets.calls
        and (day.emails or 0) >= targets.emails
        and (day.linkedin_touches or 0) >= targets.linkedin_touches
    )


def longest_target_streak(days: Iterable[Any], targets: DailyTargets) -> int:
    """
    Longest run of consecutive calendar days meeting every daily target

    Args:
        days: Rows with activity_date, calls, emails and linkedin_touches

    A missing date breaks the run.
    """
    qualifying = sorted({day.activity_date for day in days if meets_targets(day, targets)})

    longest = 0
    current = 0
    previous: date = None
    for activity_date in qualifying:
        if previous is not None and activity_date - previous == timedelta(days=1):
            current += 1
        else:
            current = 1
        longest = max(longest, current)
        previous = activity_date
    return longest


def weekly_totals(days: Iterable[Any]) -> Dict[str, int]:
    totals = {"calls": 0, "emails": 0, "linkedin_touches": 0}
    for day in days:
        totals["calls"] += day.calls or 0
        totals["emails"] += day.emails or 0
        totals["linkedin_touches"] += day.linkedin_touches or 0
    return totals


def badge_board(held: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Catalog with earned flags for display

    Args:
        held: {badge_type: earned_at}
    """
    badges = []
    for badge in BADGE_CATALOG.values():
        earned = badge.type in held
        badges.append({
            "type": badge.type,
            "name": badge.name,
            "icon": badge.icon,
            "description": badge.description,
            "earned": earned,
            "earned_at": held.get(badge.type) if earned else None,
        })
    return {
        "earned_count": sum(1 for badge in badges if badge["earned"]),
        "total": len(BADGE_CATALOG),
        "badges": badges,
    }


class BadgeService:
    """Gathers a learner's stats from the store and records new badges"""

    def __init__(self, targets_factory: Callable[[], DailyTargets]):
        self._targets_factory = targets_factory

    def collect_stats(self, store, profile, today: date = None) -> BadgeStats:
        today = today or date.today()
        user_tasks = store.list_user_tasks(profile.email)
        completed = sum(1 for user_task in user_tasks if user_task.status == "completed")

        week = store.list_daily_activity(profile.id, today - timedelta(days=6), today)
        totals = weekly_totals(week)

        return BadgeStats(
            completed_task_count=completed,
            level=profile.level,
            weekly_calls=totals["calls"],
            weekly_emails=totals["emails"],
            weekly_linkedin=totals["linkedin_touches"],
            target_streak_days=longest_target_streak(week, self._targets_factory()),
        )

    def award_new_badges(self, store, profile, today: date = None) -> List[BadgeDefinition]:
        """
        Evaluate the rule table for a learner and insert each newly earned badge

        Drops the learner's cached badge list when anything was inserted.

        Returns:
            Definitions of badges actually inserted by this call
        """
        held = [badge.badge_type for badge in store.list_user_badges(profile.id)]
        stats = self.collect_stats(store, profile, today)

        awarded = []
        for badge_type in evaluate_badges(held, stats):
            if store.insert_user_badge(profile.id, badge_type):
                logger.info(f"Badge earned: user={profile.id} badge={badge_type}")
                awarded.append(BADGE_CATALOG[badge_type])
        if awarded:
            cache_service.invalidate(profile.id, "badges")
        return awarded


def _default_targets() -> DailyTargets:
    return DailyTargets(
        calls=settings.DAILY_TARGET_CALLS,
        emails=settings.DAILY_TARGET_EMAILS,
        linkedin_touches=settings.DAILY_TARGET_LINKEDIN,
    )


# Global instance
badge_service = BadgeService(_default_targets)
