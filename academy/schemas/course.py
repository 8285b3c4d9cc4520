"""
Pydantic schemas for courses, lessons and the course builder
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from uuid import UUID


class LessonSummary(BaseModel):
    id: str
    title: str
    type: str
    icon: str
    xp_value: int
    order_index: int
    locked: bool
    completed: bool


class ModuleView(BaseModel):
    id: str
    title: str
    order_index: int
    lessons: List[LessonSummary]


class CourseView(BaseModel):
    """Course as seen by a learner, with gating applied"""
    id: str
    title: str
    description: Optional[str] = None
    thumbnail_emoji: Optional[str] = None
    order_index: int
    progress: int
    completed_lessons: int
    total_lessons: int
    is_complete: bool
    modules: List[ModuleView]


class QuizQuestion(BaseModel):
    """Multiple-choice question as authored by a manager"""
    question: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=4, max_length=4)
    correct_index: int = Field(..., ge=0, le=3)


class PublicQuestion(BaseModel):
    question: str
    options: List[str]


class PublicQuiz(BaseModel):
    id: str
    passing_score: int
    questions: List[PublicQuestion]


class Reference(BaseModel):
    id: str
    title: str


class LessonDetail(BaseModel):
    """Lesson as opened by a learner"""
    id: str
    title: str
    type: str
    icon: str
    xp_value: int
    content_url: Optional[str] = None
    content_body: Optional[str] = None
    course: Reference
    module: Reference
    already_completed: bool
    locked: bool
    quiz: Optional[PublicQuiz] = None


class CourseCreate(BaseModel):
    title: str = Field(..., max_length=255)
    description: str = ""
    thumbnail_emoji: str = Field("📚", max_length=16)


class ModuleCreate(BaseModel):
    title: str = Field(..., max_length=255)


class LessonCreate(BaseModel):
    """New lesson; quiz lessons may include their questions"""
    title: str = Field(..., max_length=255)
    type: str = Field("video", pattern="^(video|document|quiz|roleplay|walkthrough)$")
    content_url: Optional[str] = None
    content_body: Optional[str] = None
    xp_value: Optional[int] = Field(None, gt=0)
    questions: Optional[List[QuizQuestion]] = None
    passing_score: Optional[int] = Field(None, ge=0, le=100)


class CreatedResponse(BaseModel):
    id: UUID
    title: str
    order_index: int

    class Config:
        from_attributes = True


class QuizUpdate(BaseModel):
    """Replacement questions for a quiz lesson"""
    questions: List[QuizQuestion] = Field(..., min_length=1)
    passing_score: Optional[int] = Field(None, ge=0, le=100)


class QuizResponse(BaseModel):
    """Quiz as seen by a manager, answer key included"""
    id: UUID
    lesson_id: UUID
    passing_score: int
    questions: List[QuizQuestion]

    class Config:
        from_attributes = True
