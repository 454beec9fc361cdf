# lifetrack/app/services/todos.py
"""
Todos: one-off tasks with an optional deadline and a free-form check-in log.

Unlike habits there is no daily limit on todo check-ins and no streak;
every check-in is simply recorded. Ownership works as for habits: a todo
belonging to someone else is reported as NotFound.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lifetrack.app.core.errors import InvalidTodo, NotFound
from lifetrack.app.models.todo import Todo, TodoCheckin
from lifetrack.app.services.habits import local_now, to_local

logger = logging.getLogger(__name__)

# A deadline closer than this is treated as a mistake
MIN_DUE_AHEAD = timedelta(minutes=1)
CHECKIN_HISTORY_LIMIT = 50


@dataclass
class TodoSummary:
    todo: Todo
    checkin_count: int
    last_checkin: Optional[datetime]


async def get_owned_todo(db: AsyncSession, todo_id: int, user_id: int) -> Todo:
    result = await db.execute(
        select(Todo).where(Todo.id == todo_id, Todo.user_id == user_id)
    )
    todo = result.scalars().first()
    if todo is None:
        raise NotFound("todo not found")
    return todo


async def create_todo(db: AsyncSession, user_id: int, content: str,
                      due_date: Optional[datetime] = None,
                      now: Optional[datetime] = None) -> Todo:
    """
    Raises:
        InvalidTodo: blank content, or a due date less than a minute ahead.
    """
    if not content.strip():
        raise InvalidTodo("Todo content cannot be empty")

    if due_date is not None:
        due_date = to_local(due_date)
        now = to_local(now or local_now())
        if due_date < now:
            raise InvalidTodo("Due date must be in the future")
        if due_date - now < MIN_DUE_AHEAD:
            raise InvalidTodo("Due date is too close, pick a later time")

    todo = Todo(user_id=user_id, content=content, status="pending", due_date=due_date)
    db.add(todo)
    await db.commit()
    await db.refresh(todo)
    return todo


async def list_todos(db: AsyncSession, user_id: int) -> List[TodoSummary]:
    """Pending todos first, then by due date (undated last)."""
    stats = (
        select(
            TodoCheckin.todo_id,
            func.count(TodoCheckin.id).label("checkin_count"),
            func.max(TodoCheckin.checked_in_at).label("last_checkin"),
        )
        .group_by(TodoCheckin.todo_id)
        .subquery()
    )
    result = await db.execute(
        select(Todo, func.coalesce(stats.c.checkin_count, 0), stats.c.last_checkin)
        .outerjoin(stats, stats.c.todo_id == Todo.id)
        .where(Todo.user_id == user_id)
        .order_by(
            (Todo.status == "completed"),
            Todo.due_date.is_(None),
            Todo.due_date,
            Todo.id,
        )
    )
    return [
        TodoSummary(todo=todo, checkin_count=count, last_checkin=last)
        for todo, count, last in result.all()
    ]


async def toggle_todo(db: AsyncSession, todo_id: int, user_id: int) -> Todo:
    """Flip between pending and completed."""
    todo = await get_owned_todo(db, todo_id, user_id)
    todo.status = "pending" if todo.status == "completed" else "completed"
    await db.commit()
    await db.refresh(todo)
    return todo


async def checkin_todo(db: AsyncSession, todo_id: int, user_id: int,
                       now: Optional[datetime] = None) -> TodoCheckin:
    await get_owned_todo(db, todo_id, user_id)
    checkin = TodoCheckin(todo_id=todo_id, checked_in_at=to_local(now or local_now()))
    db.add(checkin)
    await db.commit()
    await db.refresh(checkin)
    logger.info("Todo %s checked in", todo_id)
    return checkin


async def list_todo_checkins(db: AsyncSession, todo_id: int, user_id: int,
                             limit: int = CHECKIN_HISTORY_LIMIT) -> List[TodoCheckin]:
    await get_owned_todo(db, todo_id, user_id)
    result = await db.execute(
        select(TodoCheckin)
        .where(TodoCheckin.todo_id == todo_id)
        .order_by(TodoCheckin.checked_in_at.desc(), TodoCheckin.id.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def delete_todo(db: AsyncSession, todo_id: int, user_id: int) -> None:
    todo = await get_owned_todo(db, todo_id, user_id)
    await db.execute(delete(TodoCheckin).where(TodoCheckin.todo_id == todo.id))
    await db.delete(todo)
    await db.commit()
