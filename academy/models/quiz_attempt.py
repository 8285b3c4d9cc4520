"""
QuizAttempt model - append-only log of quiz submissions
"""
from sqlalchemy import Column, Integer, Boolean, TIMESTAMP, ForeignKey, JSON, Uuid, func
from academy.database import Base
import uuid


class QuizAttempt(Base):
    """
    Quiz attempts table - rows are inserted once and never updated
    """
    __tablename__ = "quiz_attempts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    quiz_id = Column(Uuid(as_uuid=True), ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False)
    answers = Column(JSON)  # {question_index: option_index}
    score = Column(Integer, nullable=False)  # percentage 0-100
    passed = Column(Boolean, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<QuizAttempt(user_id={self.user_id}, quiz_id={self.quiz_id}, score={self.score})>"
