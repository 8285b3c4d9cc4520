"""
Pydantic schemas for daily activity tracking
"""
from pydantic import BaseModel, Field
from typing import Dict, List

from academy.schemas.progress import BadgeInfo
from academy.services.activity_service import MAX_DAILY_COUNT


class ActivityCounts(BaseModel):
    """Today's outbound counts"""
    calls: int = Field(0, ge=0, le=MAX_DAILY_COUNT)
    emails: int = Field(0, ge=0, le=MAX_DAILY_COUNT)
    linkedin_touches: int = Field(0, ge=0, le=MAX_DAILY_COUNT)


class DayActivity(ActivityCounts):
    activity_date: str


class SaveActivityResponse(BaseModel):
    today: DayActivity
    new_badges: List[BadgeInfo] = []


class WeekActivity(BaseModel):
    start: str
    end: str
    days: List[DayActivity]
    totals: Dict[str, int]
