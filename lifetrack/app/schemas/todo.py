# lifetrack/app/schemas/todo.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

TodoStatus = Literal["pending", "completed"]


class TodoCreate(BaseModel):
    content: str = Field(..., max_length=2000)
    due_date: Optional[datetime] = None


class TodoResponse(BaseModel):
    id: int
    content: str
    status: TodoStatus
    due_date: Optional[datetime] = None
    checkin_count: int = 0
    last_checkin: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TodoOverview(BaseModel):
    todos: List[TodoResponse]
    total_count: int
    pending_count: int
    done_count: int
    total_checkins: int


class TodoCheckinRecord(BaseModel):
    id: int
    todo_id: int
    checked_in_at: datetime

    class Config:
        from_attributes = True
