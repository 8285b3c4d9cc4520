"""
DailyActivity model - outbound activity counts per user and day
"""
from sqlalchemy import Column, String, Integer, Date, TIMESTAMP, UniqueConstraint, Uuid, func
from academy.database import Base
import uuid


class DailyActivity(Base):
    """
    Daily activities table - one row per (user, activity_date)
    """
    __tablename__ = "daily_activities"
    __table_args__ = (UniqueConstraint("user_id", "activity_date", name="uq_daily_activity"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    user_email = Column(String(255), default="")
    activity_date = Column(Date, nullable=False)
    calls = Column(Integer, nullable=False, default=0)
    emails = Column(Integer, nullable=False, default=0)
    linkedin_touches = Column(Integer, nullable=False, default=0)
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<DailyActivity(user_id={self.user_id}, date={self.activity_date}, calls={self.calls})>"
