"""
Store facade over the relational database

Every read and write the services need goes through here, one method per
external operation: profiles and XP, course content, lesson progress, quiz
attempts, badges, daily activity and tasks.
"""
import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from academy.models import (
    Course,
    DailyActivity,
    Lesson,
    LessonProgress,
    Module,
    Profile,
    Quiz,
    QuizAttempt,
    Task,
    UserBadge,
    UserTask,
    XpAward,
)
from academy.services.exceptions import NotFoundError
from academy.services.gating_service import CourseOutline, ModuleOutline

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Store:
    """Data access for one request, bound to a SQLAlchemy session"""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Profiles and XP
    # ------------------------------------------------------------------

    def get_profile(self, user_id: UUID) -> Optional[Profile]:
        return self.db.get(Profile, user_id)

    def create_profile(self, user_id: UUID, email: str) -> Profile:
        profile = Profile(id=user_id, email=email or "", level="rookie", total_xp=0, role="learner")
        self.db.add(profile)
        self.db.commit()
        self.db.refresh(profile)
        logger.info(f"Profile created: {user_id}")
        return profile

    def ensure_profile(self, user_id: UUID, email: str) -> Profile:
        """Fetch the profile, creating it when absent"""
        profile = self.get_profile(user_id)
        if profile is None:
            try:
                profile = self.create_profile(user_id, email)
            except IntegrityError:
                # Another request created it first
                self.db.rollback()
                profile = self.get_profile(user_id)
        return profile

    def refresh_profile(self, user_id: UUID) -> Optional[Profile]:
        """Re-read a profile, bypassing the session's identity map"""
        profile = self.get_profile(user_id)
        if profile is not None:
            self.db.refresh(profile)
        return profile

    def set_profile_level(self, user_id: UUID, level: str) -> Profile:
        self.db.execute(update(Profile).where(Profile.id == user_id).values(level=level))
        self.db.commit()
        return self.refresh_profile(user_id)

    def list_leaderboard(self, limit: int) -> List[Profile]:
        stmt = select(Profile).order_by(Profile.total_xp.desc(), Profile.created_at.asc()).limit(limit)
        return list(self.db.scalars(stmt))

    def increment_xp(self, user_id: UUID, amount: int, idempotency_key: str = None) -> bool:
        """
        Atomically add XP to a profile

        The increment is a single UPDATE ... SET total_xp = total_xp + amount,
        so concurrent callers cannot lose each other's updates. When an
        idempotency key is given, the ledger row and the increment commit
        together and a second call with the same key is a no-op.

        Returns:
            True if XP was added, False if the key had already been used
        """
        if amount <= 0:
            raise ValueError("XP amount must be positive")
        if self.get_profile(user_id) is None:
            raise NotFoundError("Profile", user_id)

        try:
            if idempotency_key:
                self.db.add(XpAward(user_id=user_id, idempotency_key=idempotency_key, amount=amount))
                self.db.flush()
            result = self.db.execute(
                update(Profile)
                .where(Profile.id == user_id)
                .values(total_xp=Profile.total_xp + amount)
            )
            if result.rowcount != 1:
                raise NotFoundError("Profile", user_id)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info(f"XP award skipped, key already used: user={user_id} key={idempotency_key}")
            return False
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"XP awarded: user={user_id} amount={amount} key={idempotency_key}")
        return True

    # ------------------------------------------------------------------
    # Course content
    # ------------------------------------------------------------------

    def list_courses(self) -> List[Course]:
        return list(self.db.scalars(select(Course).order_by(Course.order_index, Course.created_at)))

    def get_course(self, course_id: UUID) -> Optional[Course]:
        return self.db.get(Course, course_id)

    def list_modules(self, course_id: UUID) -> List[Module]:
        stmt = select(Module).where(Module.course_id == course_id).order_by(Module.order_index)
        return list(self.db.scalars(stmt))

    def get_module(self, module_id: UUID) -> Optional[Module]:
        return self.db.get(Module, module_id)

    def list_lessons(self, module_id: UUID) -> List[Lesson]:
        stmt = select(Lesson).where(Lesson.module_id == module_id).order_by(Lesson.order_index)
        return list(self.db.scalars(stmt))

    def get_lesson(self, lesson_id: UUID) -> Optional[Lesson]:
        return self.db.get(Lesson, lesson_id)

    def get_quiz(self, lesson_id: UUID) -> Optional[Quiz]:
        return self.db.scalars(select(Quiz).where(Quiz.lesson_id == lesson_id)).first()

    def course_outline(self, course_id: UUID) -> CourseOutline:
        """Ordered module and lesson ids of a course, as the gating rules expect"""
        modules = tuple(
            ModuleOutline(id=module.id, lesson_ids=tuple(lesson.id for lesson in self.list_lessons(module.id)))
            for module in self.list_modules(course_id)
        )
        return CourseOutline(id=course_id, modules=modules)

    def _next_order_index(self, column, *criteria) -> int:
        stmt = select(func.max(column))
        if criteria:
            stmt = stmt.where(*criteria)
        current = self.db.execute(stmt).scalar()
        return (current or 0) + 1

    def create_course(self, title: str, description: str = "", thumbnail_emoji: str = "📚") -> Course:
        course = Course(
            title=title,
            description=description,
            thumbnail_emoji=thumbnail_emoji,
            order_index=self._next_order_index(Course.order_index),
        )
        self.db.add(course)
        self.db.commit()
        self.db.refresh(course)
        return course

    def create_module(self, course_id: UUID, title: str) -> Module:
        module = Module(
            course_id=course_id,
            title=title,
            order_index=self._next_order_index(Module.order_index, Module.course_id == course_id),
        )
        self.db.add(module)
        self.db.commit()
        self.db.refresh(module)
        return module

    def create_lesson(self, module_id: UUID, **fields: Any) -> Lesson:
        """Append a lesson to the end of a module, optionally with its quiz"""
        quiz_fields = fields.pop("quiz", None)
        lesson = Lesson(
            module_id=module_id,
            order_index=self._next_order_index(Lesson.order_index, Lesson.module_id == module_id),
            **fields,
        )
        self.db.add(lesson)
        self.db.flush()
        if quiz_fields is not None:
            self.db.add(Quiz(lesson_id=lesson.id, **quiz_fields))
        self.db.commit()
        self.db.refresh(lesson)
        return lesson

    def create_quiz(self, lesson_id: UUID, questions: List[Dict[str, Any]], passing_score: int) -> Quiz:
        """Attach a quiz to an existing lesson, replacing any previous one"""
        quiz = self.get_quiz(lesson_id)
        if quiz is None:
            quiz = Quiz(lesson_id=lesson_id)
            self.db.add(quiz)
        quiz.questions = questions
        quiz.passing_score = passing_score
        self.db.commit()
        self.db.refresh(quiz)
        return quiz

    def delete_lesson(self, lesson_id: UUID) -> bool:
        lesson = self.get_lesson(lesson_id)
        if lesson is None:
            return False
        self.db.delete(lesson)
        self.db.commit()
        return True

    def delete_module(self, module_id: UUID) -> bool:
        module = self.get_module(module_id)
        if module is None:
            return False
        self.db.delete(module)
        self.db.commit()
        return True

    # ------------------------------------------------------------------
    # Lesson progress and quiz attempts
    # ------------------------------------------------------------------

    def get_lesson_progress(self, user_id: UUID, lesson_id: UUID) -> Optional[LessonProgress]:
        stmt = select(LessonProgress).where(
            LessonProgress.user_id == user_id,
            LessonProgress.lesson_id == lesson_id,
        )
        return self.db.scalars(stmt).first()

    def list_lesson_progress(self, user_id: UUID) -> List[LessonProgress]:
        return list(self.db.scalars(select(LessonProgress).where(LessonProgress.user_id == user_id)))

    def completed_lesson_ids(self, user_id: UUID) -> set:
        return {
            progress.lesson_id for progress in self.list_lesson_progress(user_id)
            if progress.status == "completed"
        }

    def upsert_lesson_progress(
        self,
        user_id: UUID,
        lesson_id: UUID,
        status: str,
        timestamp: datetime = None,
        response: str = None
    ) -> LessonProgress:
        """
        Insert or update the single progress row for (user, lesson)

        Re-completing keeps the first completion timestamp.
        """
        progress = self.get_lesson_progress(user_id, lesson_id)
        if progress is None:
            progress = LessonProgress(user_id=user_id, lesson_id=lesson_id)
            self.db.add(progress)

        if status == "completed" and progress.status != "completed":
            progress.completed_at = timestamp or utcnow()
        progress.status = status
        if response is not None:
            progress.response = response

        try:
            self.db.commit()
        except IntegrityError:
            # Lost an insert race on the unique key; the other row wins
            self.db.rollback()
            progress = self.get_lesson_progress(user_id, lesson_id)
        self.db.refresh(progress)
        return progress

    def insert_quiz_attempt(
        self,
        user_id: UUID,
        quiz_id: UUID,
        answers: Dict[str, int],
        score: int,
        passed: bool
    ) -> QuizAttempt:
        attempt = QuizAttempt(user_id=user_id, quiz_id=quiz_id, answers=answers, score=score, passed=passed)
        self.db.add(attempt)
        self.db.commit()
        self.db.refresh(attempt)
        return attempt

    def list_quiz_attempts(self, user_id: UUID, quiz_id: UUID = None) -> List[QuizAttempt]:
        stmt = select(QuizAttempt).where(QuizAttempt.user_id == user_id)
        if quiz_id is not None:
            stmt = stmt.where(QuizAttempt.quiz_id == quiz_id)
        return list(self.db.scalars(stmt.order_by(QuizAttempt.created_at)))

    # ------------------------------------------------------------------
    # Badges
    # ------------------------------------------------------------------

    def list_user_badges(self, user_id: UUID) -> List[UserBadge]:
        stmt = select(UserBadge).where(UserBadge.user_id == user_id).order_by(UserBadge.earned_at)
        return list(self.db.scalars(stmt))

    def insert_user_badge(self, user_id: UUID, badge_type: str) -> bool:
        """Insert if absent; returns False when the badge was already held"""
        self.db.add(UserBadge(user_id=user_id, badge_type=badge_type))
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return False
        return True

    # ------------------------------------------------------------------
    # Daily activity
    # ------------------------------------------------------------------

    def get_daily_activity(self, user_id: UUID, activity_date: date) -> Optional[DailyActivity]:
        stmt = select(DailyActivity).where(
            DailyActivity.user_id == user_id,
            DailyActivity.activity_date == activity_date,
        )
        return self.db.scalars(stmt).first()

    def list_daily_activity(self, user_id: UUID, start: date, end: date) -> List[DailyActivity]:
        stmt = (
            select(DailyActivity)
            .where(
                DailyActivity.user_id == user_id,
                DailyActivity.activity_date >= start,
                DailyActivity.activity_date <= end,
            )
            .order_by(DailyActivity.activity_date)
        )
        return list(self.db.scalars(stmt))

    def upsert_daily_activity(
        self,
        user_id: UUID,
        user_email: str,
        activity_date: date,
        counts: Dict[str, int]
    ) -> DailyActivity:
        activity = self.get_daily_activity(user_id, activity_date)
        if activity is None:
            activity = DailyActivity(user_id=user_id, user_email=user_email, activity_date=activity_date)
            self.db.add(activity)

        activity.calls = counts.get("calls", 0)
        activity.emails = counts.get("emails", 0)
        activity.linkedin_touches = counts.get("linkedin_touches", 0)

        self.db.commit()
        self.db.refresh(activity)
        return activity

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def list_tasks(self) -> List[Task]:
        return list(self.db.scalars(select(Task).order_by(Task.created_at)))

    def get_task(self, task_id: UUID) -> Optional[Task]:
        return self.db.get(Task, task_id)

    def create_task(self, title: str, description: str, xp_value: int) -> Task:
        task = Task(title=title, description=description, xp_value=xp_value)
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        return task

    def list_user_tasks(self, user_email: str) -> List[UserTask]:
        stmt = select(UserTask).where(UserTask.user_email == user_email).order_by(UserTask.created_at)
        return list(self.db.scalars(stmt))

    def get_user_task(self, user_task_id: UUID) -> Optional[UserTask]:
        return self.db.get(UserTask, user_task_id)

    def find_user_task(self, user_id: UUID, task_id: UUID) -> Optional[UserTask]:
        stmt = select(UserTask).where(UserTask.user_id == user_id, UserTask.task_id == task_id)
        return self.db.scalars(stmt).first()

    def insert_user_task(self, **fields: Any) -> Optional[UserTask]:
        """Insert a learner's task row; None when one already exists for (user, task)"""
        user_task = UserTask(**fields)
        self.db.add(user_task)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return None
        self.db.refresh(user_task)
        return user_task

    def update_user_task(self, user_task_id: UUID, **fields: Any) -> UserTask:
        user_task = self.get_user_task(user_task_id)
        for name, value in fields.items():
            setattr(user_task, name, value)
        self.db.commit()
        self.db.refresh(user_task)
        return user_task

    def list_submissions(self, status: str = None) -> List[UserTask]:
        """Submissions newest first, with task and learner profile loaded"""
        stmt = (
            select(UserTask)
            .options(joinedload(UserTask.task), joinedload(UserTask.profile))
            .order_by(UserTask.created_at.desc())
        )
        if status is not None:
            stmt = stmt.where(UserTask.status == status)
        return list(self.db.scalars(stmt))
