# lifetrack/app/schemas/user.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


# Registration request; validated by the user service
class UserCreate(BaseModel):
    username: str
    email: str
    password: str
    confirm_password: str


# Never includes the password hash
class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Identity behind the current session cookie
class SessionInfo(BaseModel):
    user_id: int
    display_name: str
    is_admin: bool
    expires_at: datetime

    class Config:
        from_attributes = True
