"""
Course catalog and course builder service
"""
import logging
from typing import Any, Dict, List, Optional, Set

from academy.config import settings
from academy.models import Course, Lesson, Module, Profile, Quiz
from academy.models.course import LESSON_TYPES
from academy.services.exceptions import NotFoundError, ValidationError
from academy.services.gating_service import course_progress, is_course_complete, is_lesson_locked, lesson_states
from academy.services.grading_service import grading_service
from academy.store import Store
from academy.utils.cache import cache_service

logger = logging.getLogger(__name__)

LESSON_ICONS = {
    "video": "🎬",
    "document": "📄",
    "quiz": "✏️",
    "roleplay": "🎭",
    "walkthrough": "🔍",
}


class CourseService:
    """Learner-facing catalog with gating, plus manager authoring"""

    def completed_ids(self, store: Store, user_id) -> Set[str]:
        """Completed lesson ids as strings, read through the progress cache"""
        cached = cache_service.read_through(
            cache_service.key("progress", user_id),
            lambda: sorted(str(lesson_id) for lesson_id in store.completed_lesson_ids(user_id)),
        )
        return set(cached or [])

    def catalog(self, store: Store, profile: Profile) -> List[Dict[str, Any]]:
        """
        Every course with its modules and lessons, each lesson flagged
        locked / completed, plus per-course progress
        """
        completed = self.completed_ids(store, profile.id)
        courses = []

        for course in store.list_courses():
            modules = store.list_modules(course.id)
            lessons_by_module = {module.id: store.list_lessons(module.id) for module in modules}
            outline = store.course_outline(course.id)

            # Gating works on ids as stored; compare as strings
            completed_uuids = {lesson_id for lesson_id in outline.all_lesson_ids() if str(lesson_id) in completed}
            states = lesson_states(outline, completed_uuids)

            courses.append({
                "id": str(course.id),
                "title": course.title,
                "description": course.description,
                "thumbnail_emoji": course.thumbnail_emoji,
                "order_index": course.order_index,
                "progress": course_progress(outline, completed_uuids),
                "completed_lessons": len(completed_uuids),
                "total_lessons": len(outline.all_lesson_ids()),
                "is_complete": is_course_complete(outline, completed_uuids),
                "modules": [
                    {
                        "id": str(module.id),
                        "title": module.title,
                        "order_index": module.order_index,
                        "lessons": [
                            self._lesson_summary(lesson, states[lesson.id])
                            for lesson in lessons_by_module[module.id]
                        ],
                    }
                    for module in modules
                ],
            })
        return courses

    def _lesson_summary(self, lesson: Lesson, state: Dict[str, bool]) -> Dict[str, Any]:
        return {
            "id": str(lesson.id),
            "title": lesson.title,
            "type": lesson.type,
            "icon": LESSON_ICONS.get(lesson.type, "📝"),
            "xp_value": lesson.xp_value,
            "order_index": lesson.order_index,
            "locked": state["locked"],
            "completed": state["completed"],
        }

    def lesson_detail(self, store: Store, profile: Profile, lesson_id) -> Dict[str, Any]:
        """A lesson as opened by a learner; quiz answers are not included.

        A locked lesson comes back without its content or quiz.
        """
        lesson = store.get_lesson(lesson_id)
        if lesson is None:
            raise NotFoundError("Lesson", lesson_id)

        module = lesson.module
        course = module.course
        completed = store.completed_lesson_ids(profile.id)
        outline = store.course_outline(course.id)
        locked = lesson.id not in completed and is_lesson_locked(outline, lesson.id, completed)

        detail = {
            "id": str(lesson.id),
            "title": lesson.title,
            "type": lesson.type,
            "icon": LESSON_ICONS.get(lesson.type, "📝"),
            "xp_value": lesson.xp_value,
            "content_url": None if locked else lesson.content_url,
            "content_body": None if locked else lesson.content_body,
            "course": {"id": str(course.id), "title": course.title},
            "module": {"id": str(module.id), "title": module.title},
            "already_completed": lesson.id in completed,
            "locked": locked,
            "quiz": None,
        }

        if lesson.type == "quiz" and not locked:
            quiz = store.get_quiz(lesson.id)
            if quiz is not None:
                detail["quiz"] = {
                    "id": str(quiz.id),
                    "passing_score": quiz.passing_score,
                    "questions": grading_service.public_questions(quiz.questions or []),
                }
        return detail

    # ------------------------------------------------------------------
    # Course builder
    # ------------------------------------------------------------------

    def create_course(self, store: Store, title: str, description: str = "", thumbnail_emoji: str = None) -> Course:
        if not (title or "").strip():
            raise ValidationError("Course title is required", field="title")
        course = store.create_course(title.strip(), description or "", thumbnail_emoji or "📚")
        logger.info(f"Course created: {course.id} '{course.title}'")
        return course

    def create_module(self, store: Store, course_id, title: str) -> Module:
        if not (title or "").strip():
            raise ValidationError("Module title is required", field="title")
        if store.get_course(course_id) is None:
            raise NotFoundError("Course", course_id)
        module = store.create_module(course_id, title.strip())
        logger.info(f"Module created: {module.id} in course {course_id}")
        return module

    def create_lesson(
        self,
        store: Store,
        module_id,
        title: str,
        lesson_type: str,
        content_url: str = None,
        content_body: str = None,
        xp_value: int = None,
        questions: Optional[List[Dict[str, Any]]] = None,
        passing_score: int = None
    ) -> Lesson:
        """
        Append a lesson to a module; quiz lessons may carry their questions
        """
        if not (title or "").strip():
            raise ValidationError("Lesson title is required", field="title")
        if lesson_type not in LESSON_TYPES:
            raise ValidationError(f"Lesson type must be one of {', '.join(LESSON_TYPES)}", field="type")
        xp_value = settings.DEFAULT_LESSON_XP if xp_value is None else xp_value
        if xp_value <= 0:
            raise ValidationError("XP value must be positive", field="xp_value")
        if store.get_module(module_id) is None:
            raise NotFoundError("Module", module_id)

        quiz = None
        if lesson_type == "quiz" and questions:
            quiz = self._quiz_fields(questions, passing_score)

        lesson = store.create_lesson(
            module_id,
            title=title.strip(),
            type=lesson_type,
            content_url=content_url,
            content_body=content_body,
            xp_value=xp_value,
            quiz=quiz,
        )
        logger.info(f"Lesson created: {lesson.id} type={lesson_type} in module {module_id}")
        return lesson

    def set_quiz(self, store: Store, lesson_id, questions: List[Dict[str, Any]], passing_score: int = None) -> Quiz:
        """Replace the questions and pass mark of a quiz lesson"""
        lesson = store.get_lesson(lesson_id)
        if lesson is None:
            raise NotFoundError("Lesson", lesson_id)
        if lesson.type != "quiz":
            raise ValidationError("Only quiz lessons have questions", field="type")
        if not questions:
            raise ValidationError("A quiz needs at least one question", field="questions")

        fields = self._quiz_fields(questions, passing_score)
        quiz = store.create_quiz(lesson.id, fields["questions"], fields["passing_score"])
        logger.info(f"Quiz saved: lesson={lesson.id} questions={len(questions)} pass={quiz.passing_score}%")
        return quiz

    def _quiz_fields(self, questions: List[Dict[str, Any]], passing_score: Optional[int]) -> Dict[str, Any]:
        problems = grading_service.validate_questions(questions)
        if problems:
            raise ValidationError("Quiz is not valid", field="questions", details={"problems": problems})
        passing_score = settings.DEFAULT_PASSING_SCORE if passing_score is None else passing_score
        if not 0 <= passing_score <= 100:
            raise ValidationError("Passing score must be between 0 and 100", field="passing_score")
        return {"questions": questions, "passing_score": passing_score}

    def delete_lesson(self, store: Store, lesson_id) -> None:
        if not store.delete_lesson(lesson_id):
            raise NotFoundError("Lesson", lesson_id)
        logger.info(f"Lesson deleted: {lesson_id}")

    def delete_module(self, store: Store, module_id) -> None:
        if not store.delete_module(module_id):
            raise NotFoundError("Module", module_id)
        logger.info(f"Module deleted: {module_id}")


# Global instance
course_service = CourseService()
