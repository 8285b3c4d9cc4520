"""
Pydantic schemas for badges
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


class BadgeStatus(BaseModel):
    type: str
    name: str
    icon: str
    description: str
    earned: bool
    earned_at: Optional[datetime] = None


class BadgeBoard(BaseModel):
    """Full catalog with earned flags"""
    earned_count: int
    total: int
    badges: List[BadgeStatus]
