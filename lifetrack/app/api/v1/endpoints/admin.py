# lifetrack/app/api/v1/endpoints/admin.py
"""
Back-office endpoints, available only to the configured admin account.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from lifetrack.app.api import deps
from lifetrack.app.core.errors import HashingError, NotFound, RegistrationError
from lifetrack.app.db.base import get_db
from lifetrack.app.schemas.admin import (
    AdminUserResponse,
    AdminUserUpdate,
    SessionCleanupResponse,
)
from lifetrack.app.security.sessions import SessionManager
from lifetrack.app.services import users as user_service

router = APIRouter(dependencies=[Depends(deps.require_admin)])


@router.get("/users", response_model=List[AdminUserResponse])
async def read_users(db: AsyncSession = Depends(get_db)):
    rows = await user_service.list_users(db)
    return [
        AdminUserResponse.model_validate(user).model_copy(update={"habit_count": count})
        for user, count in rows
    ]


@router.patch("/users/{user_id}", response_model=AdminUserResponse)
async def update_user(
        user_id: int,
        user_in: AdminUserUpdate,
        db: AsyncSession = Depends(get_db),
        manager: SessionManager = Depends(deps.get_session_manager),
):
    try:
        user = await user_service.update_user(
            db,
            user_id,
            username=user_in.username,
            email=user_in.email,
            password=user_in.password,
        )
    except NotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    except RegistrationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except HashingError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not update password",
        )

    if user_in.password is not None:
        # Sessions opened with the old password end with it
        manager.store.delete_for_user(user_id)

    habit_count = await user_service.count_habits(db, user.id)
    return AdminUserResponse.model_validate(user).model_copy(update={"habit_count": habit_count})


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
        user_id: int,
        db: AsyncSession = Depends(get_db),
        manager: SessionManager = Depends(deps.get_session_manager),
):
    try:
        await user_service.delete_user(db, user_id)
    except NotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    # Deleted users are logged out everywhere
    manager.store.delete_for_user(user_id)


@router.post("/sessions/cleanup", response_model=SessionCleanupResponse)
async def cleanup_sessions(manager: SessionManager = Depends(deps.get_session_manager)):
    return SessionCleanupResponse(removed=manager.cleanup_expired_sessions())
