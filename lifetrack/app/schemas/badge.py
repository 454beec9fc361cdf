# lifetrack/app/schemas/badge.py
from pydantic import BaseModel


class BadgeResponse(BaseModel):
    id: int
    name: str
    description: str
    icon: str
    condition_days: int
    unlocked: bool

    class Config:
        from_attributes = True
