"""
Authentication models - credentials and revocable sessions
"""
from sqlalchemy import Column, String, TIMESTAMP, ForeignKey, Uuid, func
from academy.database import Base
import uuid


class UserAccount(Base):
    """
    Accounts table - one row per signed-up email
    """
    __tablename__ = "user_accounts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<UserAccount(id={self.id}, email={self.email})>"


class AuthSession(Base):
    """
    Sessions table - a token is only valid while its session row exists
    """
    __tablename__ = "auth_sessions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("user_accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(TIMESTAMP(timezone=True), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<AuthSession(id={self.id}, user_id={self.user_id})>"
