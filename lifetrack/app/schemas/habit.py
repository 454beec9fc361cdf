# lifetrack/app/schemas/habit.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from lifetrack.app.schemas.badge import BadgeResponse

Frequency = Literal["daily", "weekly"]


class HabitCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    frequency: Frequency = "daily"


class HabitUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    frequency: Optional[Frequency] = None


class HabitResponse(BaseModel):
    id: int
    name: str
    description: str
    frequency: str
    streak: int
    total_days: int
    today_checked: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class HabitOverview(BaseModel):
    habits: List[HabitResponse]
    badges: List[BadgeResponse]
    total_habits: int
    done_today: int
    max_streak: int
    unlocked_badges: int
    total_badges: int


class CheckinRecord(BaseModel):
    id: int
    habit_id: int
    checked_in_at: datetime

    class Config:
        from_attributes = True


# checked_in is False when the habit was already checked in today;
# the counters are then the unchanged current values.
class CheckinResponse(BaseModel):
    habit_id: int
    checked_in: bool
    streak: int
    total_days: int
    unlocked_badges: List[BadgeResponse] = []
