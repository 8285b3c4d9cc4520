"""
Course catalog and lesson completion API endpoints
"""
from fastapi import APIRouter, Depends
from typing import List
from uuid import UUID
import logging

from academy.deps import get_current_profile, get_store
from academy.models import Profile
from academy.schemas.course import CourseView, LessonDetail
from academy.schemas.progress import BadgeInfo, CompletionResponse, QuizResult, QuizSubmission, RoleplaySubmission
from academy.services.course_service import course_service
from academy.services.progression_service import CompletionResult, progression_service
from academy.store import Store

router = APIRouter(prefix="/api", tags=["courses"])
logger = logging.getLogger(__name__)


def completion_response(result: CompletionResult) -> CompletionResponse:
    return CompletionResponse(
        lesson_id=str(result.lesson_id),
        lesson_type=result.lesson_type,
        completed=result.completed,
        already_completed=result.already_completed,
        celebrate=result.celebrate,
        xp_awarded=result.xp_awarded,
        total_xp=result.total_xp,
        level=result.level,
        level_progress=result.level_progress,
        quiz=QuizResult(**vars(result.quiz)) if result.quiz else None,
        feedback=result.feedback,
        new_badges=[BadgeInfo(**vars(badge)) for badge in result.new_badges],
    )


@router.get("/courses", response_model=List[CourseView])
async def list_courses(
    profile: Profile = Depends(get_current_profile),
    store: Store = Depends(get_store)
):
    """
    All courses in order, with modules, lessons and the learner's progress

    Each lesson is flagged locked until the lesson before it (or, for a
    module's first lesson, the whole previous module) is completed.
    """
    return course_service.catalog(store, profile)


@router.get("/lessons/{lesson_id}", response_model=LessonDetail)
async def get_lesson(
    lesson_id: UUID,
    profile: Profile = Depends(get_current_profile),
    store: Store = Depends(get_store)
):
    return course_service.lesson_detail(store, profile, lesson_id)


@router.post("/lessons/{lesson_id}/complete", response_model=CompletionResponse)
async def complete_lesson(
    lesson_id: UUID,
    profile: Profile = Depends(get_current_profile),
    store: Store = Depends(get_store)
):
    """Mark a video, document or walkthrough lesson complete and earn its XP"""
    result = progression_service.complete_lesson(store, profile, lesson_id)
    return completion_response(result)


@router.post("/lessons/{lesson_id}/quiz", response_model=CompletionResponse)
async def submit_quiz(
    lesson_id: UUID,
    submission: QuizSubmission,
    profile: Profile = Depends(get_current_profile),
    store: Store = Depends(get_store)
):
    """
    Submit quiz answers

    Every question must be answered. The attempt is logged whatever the
    outcome; only a passing score completes the lesson.
    """
    result = progression_service.complete_lesson(store, profile, lesson_id, answers=submission.answers)
    return completion_response(result)


@router.post("/lessons/{lesson_id}/roleplay", response_model=CompletionResponse)
async def submit_roleplay(
    lesson_id: UUID,
    submission: RoleplaySubmission,
    profile: Profile = Depends(get_current_profile),
    store: Store = Depends(get_store)
):
    """Submit a written role-play response"""
    result = progression_service.complete_lesson(store, profile, lesson_id, response=submission.response)
    return completion_response(result)
