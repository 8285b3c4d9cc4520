"""
Pydantic schemas for profiles and the leaderboard
"""
from pydantic import BaseModel, Field
from typing import Optional


class ProfileResponse(BaseModel):
    """Profile with derived level progress"""
    id: str
    email: str
    full_name: Optional[str] = None
    role: str
    level: str
    level_icon: str
    total_xp: int
    next_level_xp: int
    level_progress: float


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: str
    email: str
    full_name: Optional[str] = None
    level: str
    level_icon: str
    total_xp: int


class LevelUpdate(BaseModel):
    """Manager assigns a level tier"""
    level: str = Field(..., pattern="^(rookie|prospector|closer|elite)$", description="Level tier")
