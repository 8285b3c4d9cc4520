"""
Task submission and manager review flow
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from academy.models import Profile, UserTask
from academy.services.badge_service import badge_service
from academy.services.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from academy.store import Store
from academy.utils.cache import cache_service

logger = logging.getLogger(__name__)

# completed is terminal
ALLOWED_TRANSITIONS: Dict[str, frozenset] = {
    "available": frozenset({"submitted"}),
    "submitted": frozenset({"completed", "needs_revision"}),
    "needs_revision": frozenset({"submitted"}),
    "completed": frozenset(),
}

# Manager dashboard filters
SUBMISSION_FILTERS = {
    "all": None,
    "pending": "submitted",
    "completed": "completed",
}


def check_transition(current: str, target: str) -> None:
    """Raise InvalidTransitionError unless current -> target is allowed"""
    if target not in ALLOWED_TRANSITIONS.get(current, frozenset()):
        raise InvalidTransitionError(current, target)


class TaskService:
    """Learner submissions and manager approvals for tasks"""

    def list_for_user(self, store: Store, profile: Profile) -> List[Dict[str, Any]]:
        """Task catalog with the learner's status; tasks never started are available"""
        mine = {user_task.task_id: user_task for user_task in store.list_user_tasks(profile.email)}
        rows = []
        for task in store.list_tasks():
            user_task = mine.get(task.id)
            rows.append({
                "task_id": str(task.id),
                "title": task.title,
                "description": task.description,
                "xp_value": task.xp_value,
                "user_task_id": str(user_task.id) if user_task else None,
                "status": user_task.status if user_task else "available",
                "submission": user_task.submission if user_task else None,
                "reviewer_feedback": user_task.reviewer_feedback if user_task else None,
            })
        return rows

    def submit(self, store: Store, profile: Profile, task_id: Any, submission: str) -> UserTask:
        """
        Submit work for a task

        available -> submitted creates the user task row;
        needs_revision -> submitted replaces the submission text.
        """
        text = (submission or "").strip()
        if not text:
            raise ValidationError("Submission text is required", field="submission")

        task = store.get_task(task_id)
        if task is None:
            raise NotFoundError("Task", task_id)

        user_task = store.find_user_task(profile.id, task.id)
        current = user_task.status if user_task else "available"
        check_transition(current, "submitted")

        if user_task is None:
            user_task = store.insert_user_task(
                task_id=task.id,
                user_id=profile.id,
                user_email=profile.email,
                status="submitted",
                submission=text,
            )
            if user_task is None:
                # A concurrent submit created the row first
                raise InvalidTransitionError("submitted", "submitted")
        else:
            user_task = store.update_user_task(user_task.id, status="submitted", submission=text)

        logger.info(f"Task submitted: user={profile.id} task={task.id} from={current}")
        return user_task

    def approve(self, store: Store, reviewer: Profile, user_task_id: Any, feedback: str = None) -> UserTask:
        """
        Mark a submission completed, award the task XP and evaluate badges

        XP is keyed on the task, so a learner earns each task's XP once.
        """
        user_task = self._review(store, reviewer, user_task_id, "completed", feedback)

        xp_value = user_task.task.xp_value if user_task.task else 0
        if xp_value and xp_value > 0:
            store.increment_xp(user_task.user_id, xp_value, f"task:{user_task.task_id}")

        learner = store.refresh_profile(user_task.user_id)
        cache_service.invalidate(user_task.user_id, "profile")
        if learner is not None:
            badge_service.award_new_badges(store, learner)
        return user_task

    def request_revision(self, store: Store, reviewer: Profile, user_task_id: Any, feedback: str = None) -> UserTask:
        return self._review(store, reviewer, user_task_id, "needs_revision", feedback)

    def _review(
        self,
        store: Store,
        reviewer: Profile,
        user_task_id: Any,
        target: str,
        feedback: Optional[str]
    ) -> UserTask:
        user_task = store.get_user_task(user_task_id)
        if user_task is None:
            raise NotFoundError("Submission", user_task_id)

        current = user_task.status
        check_transition(current, target)

        user_task = store.update_user_task(
            user_task.id,
            status=target,
            reviewer_id=reviewer.id,
            reviewer_feedback=feedback or "",
            reviewed_at=datetime.now(timezone.utc),
        )
        logger.info(f"Submission reviewed: id={user_task.id} {current} -> {target} by {reviewer.id}")
        return user_task

    def submissions(self, store: Store, filter_name: str = "all") -> List[UserTask]:
        if filter_name not in SUBMISSION_FILTERS:
            raise ValidationError(f"Unknown filter '{filter_name}'", field="filter")
        return store.list_submissions(SUBMISSION_FILTERS[filter_name])


# Global instance
task_service = TaskService()
