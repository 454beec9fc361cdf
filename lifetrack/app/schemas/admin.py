# lifetrack/app/schemas/admin.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class AdminUserResponse(BaseModel):
    id: int
    username: str
    email: str
    is_active: bool
    created_at: Optional[datetime] = None
    habit_count: int = 0

    class Config:
        from_attributes = True


# Omitted fields are left unchanged
class AdminUserUpdate(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class SessionCleanupResponse(BaseModel):
    removed: int
