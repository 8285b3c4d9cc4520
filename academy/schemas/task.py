"""
Pydantic schemas for tasks and manager review
"""
from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
from datetime import datetime


class TaskCreate(BaseModel):
    title: str = Field(..., max_length=255)
    description: str = ""
    xp_value: int = Field(100, gt=0)


class TaskResponse(BaseModel):
    id: UUID
    title: str
    description: Optional[str] = None
    xp_value: int

    class Config:
        from_attributes = True


class MyTask(BaseModel):
    """A task with the learner's current status"""
    task_id: str
    title: str
    description: Optional[str] = None
    xp_value: int
    user_task_id: Optional[str] = None
    status: str
    submission: Optional[str] = None
    reviewer_feedback: Optional[str] = None


class TaskSubmission(BaseModel):
    submission: str = Field(..., max_length=20000)


class ReviewRequest(BaseModel):
    feedback: str = ""


class UserTaskResponse(BaseModel):
    id: UUID
    task_id: UUID
    user_id: UUID
    user_email: str
    status: str
    submission: Optional[str] = None
    reviewer_id: Optional[UUID] = None
    reviewer_feedback: Optional[str] = None
    reviewed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubmissionView(UserTaskResponse):
    """Submission joined with its task and learner for the manager dashboard"""
    task: Optional[TaskResponse] = None
    learner_level: Optional[str] = None
    learner_total_xp: Optional[int] = None
