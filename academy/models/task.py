"""
Task models - manager-reviewed assignments
"""
from sqlalchemy import Column, String, Integer, Text, TIMESTAMP, ForeignKey, UniqueConstraint, Uuid, func
from sqlalchemy.orm import relationship
from academy.database import Base
import uuid


class Task(Base):
    """
    Tasks table - assignment definitions with an XP reward
    """
    __tablename__ = "tasks"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    description = Column(Text, default="")
    xp_value = Column(Integer, nullable=False, default=100)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Task(id={self.id}, title={self.title})>"


class UserTask(Base):
    """
    User tasks table - one learner's submission for a task.
    status: available | submitted | needs_revision | completed
    """
    __tablename__ = "user_tasks"
    __table_args__ = (UniqueConstraint("user_id", "task_id", name="uq_user_task"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    task_id = Column(Uuid(as_uuid=True), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    user_email = Column(String(255), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="available")
    submission = Column(Text)
    reviewer_id = Column(Uuid(as_uuid=True))
    reviewer_feedback = Column(Text)
    reviewed_at = Column(TIMESTAMP(timezone=True))
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    task = relationship("Task")
    profile = relationship("Profile")

    def __repr__(self):
        return f"<UserTask(id={self.id}, task_id={self.task_id}, status={self.status})>"
