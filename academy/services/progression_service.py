"""
Lesson progression orchestrator
Sequences lesson completion: progress, XP, profile refresh and badges
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from academy.models import Lesson, Profile
from academy.services.badge_service import BadgeDefinition, badge_service
from academy.services.exceptions import LessonLockedError, NotFoundError, ValidationError
from academy.services.gating_service import is_lesson_locked
from academy.services.grading_service import QuizScore, grading_service, normalize_answers
from academy.services.leveling_service import level_progress
from academy.store import Store
from academy.utils.cache import cache_service

logger = logging.getLogger(__name__)

DIRECT_COMPLETION_TYPES = ("video", "document", "walkthrough")


@dataclass
class CompletionResult:
    """What the presentation layer needs after a completion attempt"""
    lesson_id: Any
    lesson_type: str
    completed: bool
    already_completed: bool = False
    xp_awarded: int = 0
    total_xp: int = 0
    level: str = "rookie"
    level_progress: float = 0.0
    quiz: Optional[QuizScore] = None
    feedback: Optional[str] = None
    new_badges: List[BadgeDefinition] = field(default_factory=list)

    @property
    def celebrate(self) -> bool:
        return self.completed and not self.already_completed


class ProgressionService:
    """
    Completion flow for one lesson

    Order of steps:
    (a) upsert lesson progress to completed
    (b) add the lesson's XP under the idempotency key lesson:<id>
    (c) invalidate cached state and re-read the profile
    (d) award any newly earned badges
    (e) hand a CompletionResult back to the caller

    Step (b) awards at most once per learner and lesson, so retrying a
    completion that failed after (a) fills in the missing XP instead of
    doubling it.
    """

    def completion_key(self, lesson: Lesson) -> str:
        return f"lesson:{lesson.id}"

    def complete_lesson(
        self,
        store: Store,
        profile: Profile,
        lesson_id: Any,
        answers: Dict[Any, Any] = None,
        response: str = None
    ) -> CompletionResult:
        """
        Complete a lesson according to its type

        - video / document / walkthrough: complete directly
        - quiz: grade answers, log the attempt, complete only on a pass
        - roleplay: require a written response, then complete

        Raises:
            NotFoundError: Unknown lesson
            LessonLockedError: Prerequisite lesson not completed
            ValidationError: Missing answers or empty response
        """
        lesson = store.get_lesson(lesson_id)
        if lesson is None:
            raise NotFoundError("Lesson", lesson_id)

        self._check_unlocked(store, profile, lesson)

        if lesson.type in DIRECT_COMPLETION_TYPES:
            return self._finish(store, profile, lesson)
        elif lesson.type == "quiz":
            return self._submit_quiz(store, profile, lesson, answers)
        elif lesson.type == "roleplay":
            return self._submit_roleplay(store, profile, lesson, response)
        else:
            raise ValidationError(f"Unsupported lesson type '{lesson.type}'", field="type")

    def _check_unlocked(self, store: Store, profile: Profile, lesson: Lesson):
        completed = store.completed_lesson_ids(profile.id)
        if lesson.id in completed:
            return
        outline = store.course_outline(lesson.module.course_id)
        if is_lesson_locked(outline, lesson.id, completed):
            logger.info(f"Locked lesson rejected: user={profile.id} lesson={lesson.id}")
            raise LessonLockedError(lesson.id)

    def _submit_quiz(self, store: Store, profile: Profile, lesson: Lesson, answers) -> CompletionResult:
        quiz = store.get_quiz(lesson.id)
        if quiz is None or not quiz.questions:
            raise ValidationError("This quiz has no questions yet")

        missing = grading_service.missing_answers(quiz.questions, answers or {})
        if missing:
            raise ValidationError(
                "Answer every question before submitting",
                field="answers",
                details={"missing": missing},
            )

        score = grading_service.score_quiz(quiz.questions, answers, quiz.passing_score)
        store.insert_quiz_attempt(
            user_id=profile.id,
            quiz_id=quiz.id,
            answers={str(index): option for index, option in normalize_answers(answers).items()},
            score=score.percent,
            passed=score.passed,
        )

        if score.passed:
            result = self._finish(store, profile, lesson)
        else:
            result = self._snapshot(store, profile, lesson, completed=False)

        result.quiz = score
        result.feedback = grading_service.feedback(score, quiz.passing_score, result.xp_awarded)
        return result

    def _submit_roleplay(self, store: Store, profile: Profile, lesson: Lesson, response: str) -> CompletionResult:
        text = (response or "").strip()
        if not text:
            raise ValidationError("Write a response before submitting", field="response")
        return self._finish(store, profile, lesson, response=text)

    def _finish(self, store: Store, profile: Profile, lesson: Lesson, response: str = None) -> CompletionResult:
        existing = store.get_lesson_progress(profile.id, lesson.id)
        already_completed = existing is not None and existing.status == "completed"

        # (a)
        store.upsert_lesson_progress(
            profile.id,
            lesson.id,
            "completed",
            timestamp=datetime.now(timezone.utc),
            response=response,
        )
        cache_service.invalidate(profile.id, "progress")

        # (b)
        xp_awarded = 0
        if lesson.xp_value and lesson.xp_value > 0:
            if store.increment_xp(profile.id, lesson.xp_value, self.completion_key(lesson)):
                xp_awarded = lesson.xp_value

        # (c) and (d)
        result = self._snapshot(store, profile, lesson, completed=True)
        result.already_completed = already_completed
        result.xp_awarded = xp_awarded

        logger.info(
            f"Lesson completed: user={profile.id} lesson={lesson.id} type={lesson.type} "
            f"xp_awarded={xp_awarded} already_completed={already_completed} "
            f"new_badges={[badge.type for badge in result.new_badges]}"
        )
        return result

    def _snapshot(self, store: Store, profile: Profile, lesson: Lesson, completed: bool) -> CompletionResult:
        cache_service.invalidate(profile.id, "profile")
        refreshed = store.refresh_profile(profile.id)

        new_badges = badge_service.award_new_badges(store, refreshed)

        return CompletionResult(
            lesson_id=lesson.id,
            lesson_type=lesson.type,
            completed=completed,
            total_xp=refreshed.total_xp,
            level=refreshed.level,
            level_progress=round(level_progress(refreshed.total_xp, refreshed.level), 2),
            new_badges=new_badges,
        )


# Global instance
progression_service = ProgressionService()
