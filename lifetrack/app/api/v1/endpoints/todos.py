# lifetrack/app/api/v1/endpoints/todos.py
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from lifetrack.app.api import deps
from lifetrack.app.core.errors import InvalidTodo, NotFound
from lifetrack.app.db.base import get_db
from lifetrack.app.models.user import User
from lifetrack.app.schemas.todo import (
    TodoCheckinRecord,
    TodoCreate,
    TodoOverview,
    TodoResponse,
)
from lifetrack.app.services import todos as todo_service

router = APIRouter()


def _todo_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo not found")


@router.get("/", response_model=TodoOverview)
async def read_todos(
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
):
    rows = await todo_service.list_todos(db, current_user.id)
    todos = [
        TodoResponse.model_validate(row.todo).model_copy(
            update={"checkin_count": row.checkin_count, "last_checkin": row.last_checkin}
        )
        for row in rows
    ]
    return TodoOverview(
        todos=todos,
        total_count=len(todos),
        pending_count=sum(1 for t in todos if t.status == "pending"),
        done_count=sum(1 for t in todos if t.status == "completed"),
        total_checkins=sum(t.checkin_count for t in todos),
    )


@router.post("/", response_model=TodoResponse, status_code=status.HTTP_201_CREATED)
async def create_todo(
        todo_in: TodoCreate,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
        now: datetime = Depends(deps.get_now),
):
    try:
        return await todo_service.create_todo(
            db, current_user.id, todo_in.content, due_date=todo_in.due_date, now=now
        )
    except InvalidTodo as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/{todo_id}/toggle", response_model=TodoResponse)
async def toggle_todo(
        todo_id: int,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
):
    try:
        return await todo_service.toggle_todo(db, todo_id, current_user.id)
    except NotFound:
        raise _todo_not_found()


@router.post("/{todo_id}/checkin", response_model=TodoCheckinRecord,
             status_code=status.HTTP_201_CREATED)
async def checkin_todo(
        todo_id: int,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
        now: datetime = Depends(deps.get_now),
):
    try:
        return await todo_service.checkin_todo(db, todo_id, current_user.id, now)
    except NotFound:
        raise _todo_not_found()


@router.get("/{todo_id}/checkins", response_model=List[TodoCheckinRecord])
async def read_todo_checkins(
        todo_id: int,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
):
    try:
        return await todo_service.list_todo_checkins(db, todo_id, current_user.id)
    except NotFound:
        raise _todo_not_found()


@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_todo(
        todo_id: int,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
):
    try:
        await todo_service.delete_todo(db, todo_id, current_user.id)
    except NotFound:
        raise _todo_not_found()
