"""
Pydantic schemas for lesson completion
"""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional


class QuizSubmission(BaseModel):
    """Answers keyed by question index"""
    answers: Dict[int, int]


class RoleplaySubmission(BaseModel):
    response: str = Field(..., max_length=20000)


class BadgeInfo(BaseModel):
    type: str
    name: str
    icon: str
    description: str


class QuizResult(BaseModel):
    correct: int
    total: int
    percent: int
    passed: bool


class CompletionResponse(BaseModel):
    """Result of a completion attempt"""
    lesson_id: str
    lesson_type: str
    completed: bool
    already_completed: bool
    celebrate: bool
    xp_awarded: int
    total_xp: int
    level: str
    level_progress: float
    quiz: Optional[QuizResult] = None
    feedback: Optional[str] = None
    new_badges: List[BadgeInfo] = []
