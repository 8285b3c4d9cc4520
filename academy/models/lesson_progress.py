"""
LessonProgress model - per user and lesson completion state
"""
from sqlalchemy import Column, String, Text, TIMESTAMP, ForeignKey, UniqueConstraint, Uuid, func
from academy.database import Base
import uuid


class LessonProgress(Base):
    """
    Lesson progress table - unique per (user, lesson), written with upsert semantics
    """
    __tablename__ = "lesson_progress"
    __table_args__ = (UniqueConstraint("user_id", "lesson_id", name="uq_lesson_progress"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    lesson_id = Column(Uuid(as_uuid=True), ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False)
    status = Column(String(20), nullable=False, default="not_started")  # not_started | completed
    completed_at = Column(TIMESTAMP(timezone=True))
    response = Column(Text)  # Role-play answer text
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<LessonProgress(user_id={self.user_id}, lesson_id={self.lesson_id}, status={self.status})>"
