"""
UserBadge model - append-only earned badges
"""
from sqlalchemy import Column, String, TIMESTAMP, UniqueConstraint, Uuid, func
from academy.database import Base
import uuid


class UserBadge(Base):
    """
    User badges table - at most one row per (user, badge type), never deleted
    """
    __tablename__ = "user_badges"
    __table_args__ = (UniqueConstraint("user_id", "badge_type", name="uq_user_badge"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    badge_type = Column(String(40), nullable=False)
    earned_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<UserBadge(user_id={self.user_id}, badge_type={self.badge_type})>"
