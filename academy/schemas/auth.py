"""
Pydantic schemas for authentication requests and responses
"""
from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime


class Credentials(BaseModel):
    """Email and password for sign up and sign in"""
    email: str = Field(..., max_length=255, description="Account email")
    password: str = Field(..., min_length=1, max_length=128, description="Account password")


class SignUpResponse(BaseModel):
    user_id: UUID
    email: str
    message: str = "Account created! You can now sign in."


class SessionResponse(BaseModel):
    """An active session"""
    access_token: str
    token_type: str = "bearer"
    user_id: UUID
    email: str
    expires_at: datetime
