"""
Manager API endpoints: submission review, course builder and level tiers
"""
from fastapi import APIRouter, Depends, Query
from typing import List
from uuid import UUID
import logging

from academy.deps import get_manager, get_store
from academy.models import Profile
from academy.schemas.course import CourseCreate, CreatedResponse, LessonCreate, ModuleCreate, QuizResponse, QuizUpdate
from academy.schemas.profile import LevelUpdate, ProfileResponse
from academy.schemas.task import ReviewRequest, SubmissionView, TaskCreate, TaskResponse, UserTaskResponse
from academy.services.badge_service import badge_service
from academy.services.course_service import course_service
from academy.services.profile_service import profile_service, serialize_profile
from academy.services.task_service import task_service
from academy.store import Store

router = APIRouter(prefix="/api/manager", tags=["manager"])
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------
# Submissions
# ---------------------------------------------------------------

@router.get("/submissions", response_model=List[SubmissionView])
async def list_submissions(
    status_filter: str = Query("all", alias="filter", pattern="^(all|pending|completed)$"),
    manager: Profile = Depends(get_manager),
    store: Store = Depends(get_store)
):
    """Task submissions, newest first, filtered by all / pending / completed"""
    views = []
    for user_task in task_service.submissions(store, status_filter):
        view = SubmissionView.model_validate(user_task)
        if user_task.profile is not None:
            view.learner_level = user_task.profile.level
            view.learner_total_xp = user_task.profile.total_xp
        views.append(view)
    return views


@router.post("/submissions/{user_task_id}/approve", response_model=UserTaskResponse)
async def approve_submission(
    user_task_id: UUID,
    review: ReviewRequest,
    manager: Profile = Depends(get_manager),
    store: Store = Depends(get_store)
):
    """Approve a submission; the learner earns the task's XP"""
    return task_service.approve(store, manager, user_task_id, review.feedback)


@router.post("/submissions/{user_task_id}/revise", response_model=UserTaskResponse)
async def request_revision(
    user_task_id: UUID,
    review: ReviewRequest,
    manager: Profile = Depends(get_manager),
    store: Store = Depends(get_store)
):
    return task_service.request_revision(store, manager, user_task_id, review.feedback)


@router.post("/tasks", response_model=TaskResponse, status_code=201)
async def create_task(
    task: TaskCreate,
    manager: Profile = Depends(get_manager),
    store: Store = Depends(get_store)
):
    return store.create_task(task.title, task.description, task.xp_value)


# ---------------------------------------------------------------
# Course builder
# ---------------------------------------------------------------

@router.post("/courses", response_model=CreatedResponse, status_code=201)
async def create_course(
    course: CourseCreate,
    manager: Profile = Depends(get_manager),
    store: Store = Depends(get_store)
):
    return course_service.create_course(store, course.title, course.description, course.thumbnail_emoji)


@router.post("/courses/{course_id}/modules", response_model=CreatedResponse, status_code=201)
async def create_module(
    course_id: UUID,
    module: ModuleCreate,
    manager: Profile = Depends(get_manager),
    store: Store = Depends(get_store)
):
    return course_service.create_module(store, course_id, module.title)


@router.post("/modules/{module_id}/lessons", response_model=CreatedResponse, status_code=201)
async def create_lesson(
    module_id: UUID,
    lesson: LessonCreate,
    manager: Profile = Depends(get_manager),
    store: Store = Depends(get_store)
):
    """
    Add a lesson at the end of a module

    Quiz lessons may include questions (four options each) and a
    passing score, default 80%.
    """
    questions = [question.model_dump() for question in lesson.questions] if lesson.questions else None
    return course_service.create_lesson(
        store,
        module_id,
        title=lesson.title,
        lesson_type=lesson.type,
        content_url=lesson.content_url,
        content_body=lesson.content_body,
        xp_value=lesson.xp_value,
        questions=questions,
        passing_score=lesson.passing_score,
    )


@router.put("/lessons/{lesson_id}/quiz", response_model=QuizResponse)
async def set_quiz(
    lesson_id: UUID,
    update: QuizUpdate,
    manager: Profile = Depends(get_manager),
    store: Store = Depends(get_store)
):
    """Replace a quiz lesson's questions and passing score"""
    questions = [question.model_dump() for question in update.questions]
    return course_service.set_quiz(store, lesson_id, questions, update.passing_score)


@router.delete("/lessons/{lesson_id}", status_code=204)
async def delete_lesson(
    lesson_id: UUID,
    manager: Profile = Depends(get_manager),
    store: Store = Depends(get_store)
):
    course_service.delete_lesson(store, lesson_id)


@router.delete("/modules/{module_id}", status_code=204)
async def delete_module(
    module_id: UUID,
    manager: Profile = Depends(get_manager),
    store: Store = Depends(get_store)
):
    """Delete a module together with its lessons"""
    course_service.delete_module(store, module_id)


# ---------------------------------------------------------------
# Level tiers
# ---------------------------------------------------------------

@router.patch("/profiles/{user_id}/level", response_model=ProfileResponse)
async def set_level(
    user_id: UUID,
    update: LevelUpdate,
    manager: Profile = Depends(get_manager),
    store: Store = Depends(get_store)
):
    """Assign a learner's level tier and award any level badge it unlocks"""
    profile = profile_service.set_level(store, user_id, update.level)
    badge_service.award_new_badges(store, profile)
    return ProfileResponse(**serialize_profile(profile))
