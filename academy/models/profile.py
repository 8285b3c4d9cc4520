"""
Profile model - level tier and accumulated XP per learner
"""
from sqlalchemy import Column, String, Integer, TIMESTAMP, ForeignKey, UniqueConstraint, Uuid, func
from academy.database import Base
import uuid


class Profile(Base):
    """
    Profiles table - id matches the authenticated account id.
    total_xp is only ever changed through Store.increment_xp.
    """
    __tablename__ = "profiles"

    id = Column(Uuid(as_uuid=True), primary_key=True)
    email = Column(String(255), nullable=False, default="", index=True)
    full_name = Column(String(255))
    role = Column(String(20), nullable=False, default="learner")  # learner | manager
    level = Column(String(20), nullable=False, default="rookie")
    total_xp = Column(Integer, nullable=False, default=0)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Profile(id={self.id}, level={self.level}, xp={self.total_xp})>"


class XpAward(Base):
    """
    XP award ledger - one row per idempotency key so a retried
    completion cannot award the same XP twice
    """
    __tablename__ = "xp_awards"
    __table_args__ = (UniqueConstraint("user_id", "idempotency_key", name="uq_xp_award_key"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    idempotency_key = Column(String(100), nullable=False)
    amount = Column(Integer, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<XpAward(user_id={self.user_id}, key={self.idempotency_key}, amount={self.amount})>"
