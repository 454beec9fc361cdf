# lifetrack/app/models/todo.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from lifetrack.app.db.base import Base


class Todo(Base):
    __tablename__ = "todos"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)

    content = Column(Text, nullable=False)
    # "pending" or "completed"
    status = Column(String(20), nullable=False, default="pending")
    # Local wall-clock deadline (naive), optional
    due_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class TodoCheckin(Base):
    __tablename__ = "todo_checkins"

    id = Column(Integer, primary_key=True, index=True)
    todo_id = Column(Integer, ForeignKey("todos.id"), index=True, nullable=False)

    # No per-day limit, unlike habit check-ins
    checked_in_at = Column(DateTime, nullable=False, index=True)
