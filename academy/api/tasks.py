"""
Learner task API endpoints
"""
from fastapi import APIRouter, Depends
from typing import List
from uuid import UUID
import logging

from academy.deps import get_current_profile, get_store
from academy.models import Profile
from academy.schemas.task import MyTask, TaskSubmission, UserTaskResponse
from academy.services.task_service import task_service
from academy.store import Store

router = APIRouter(prefix="/api/tasks", tags=["tasks"])
logger = logging.getLogger(__name__)


@router.get("", response_model=List[MyTask])
async def list_my_tasks(
    profile: Profile = Depends(get_current_profile),
    store: Store = Depends(get_store)
):
    return task_service.list_for_user(store, profile)


@router.post("/{task_id}/submit", response_model=UserTaskResponse)
async def submit_task(
    task_id: UUID,
    submission: TaskSubmission,
    profile: Profile = Depends(get_current_profile),
    store: Store = Depends(get_store)
):
    """
    Submit work for manager review

    Allowed for tasks not yet started and for tasks sent back for revision.
    """
    return task_service.submit(store, profile, task_id, submission.submission)
