# lifetrack/app/api/v1/endpoints/habits.py
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from lifetrack.app.api import deps
from lifetrack.app.core.errors import AlreadyCheckedIn, NotFound
from lifetrack.app.db.base import get_db
from lifetrack.app.models.user import User
from lifetrack.app.schemas.badge import BadgeResponse
from lifetrack.app.schemas.habit import (
    CheckinRecord,
    CheckinResponse,
    HabitCreate,
    HabitOverview,
    HabitResponse,
    HabitUpdate,
)
from lifetrack.app.services import badges as badge_service
from lifetrack.app.services import habits as habit_service

router = APIRouter()


def _habit_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Habit not found")


@router.get("/", response_model=HabitOverview)
async def read_habits(
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
        now: datetime = Depends(deps.get_now),
):
    rows = await habit_service.list_habits(db, current_user.id, now)
    badges = await badge_service.list_badges(db, current_user.id)

    habits = [
        HabitResponse.model_validate(habit).model_copy(update={"today_checked": checked})
        for habit, checked in rows
    ]
    return HabitOverview(
        habits=habits,
        badges=[BadgeResponse.model_validate(b) for b in badges],
        total_habits=len(habits),
        done_today=sum(1 for h in habits if h.today_checked),
        max_streak=max((h.streak for h in habits), default=0),
        unlocked_badges=sum(1 for b in badges if b.unlocked),
        total_badges=len(badges),
    )


@router.post("/", response_model=HabitResponse, status_code=status.HTTP_201_CREATED)
async def create_habit(
        habit_in: HabitCreate,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
):
    return await habit_service.create_habit(
        db,
        current_user.id,
        name=habit_in.name,
        description=habit_in.description,
        frequency=habit_in.frequency,
    )


@router.patch("/{habit_id}", response_model=HabitResponse)
async def update_habit(
        habit_id: int,
        habit_in: HabitUpdate,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
):
    try:
        return await habit_service.update_habit(
            db, habit_id, current_user.id, habit_in.model_dump(exclude_unset=True)
        )
    except NotFound:
        raise _habit_not_found()


@router.delete("/{habit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_habit(
        habit_id: int,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
):
    try:
        await habit_service.delete_habit(db, habit_id, current_user.id)
    except NotFound:
        raise _habit_not_found()


@router.post("/{habit_id}/checkin", response_model=CheckinResponse)
async def checkin_habit(
        habit_id: int,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
        now: datetime = Depends(deps.get_now),
):
    try:
        result = await habit_service.record_checkin(db, habit_id, current_user.id, now)
    except NotFound:
        raise _habit_not_found()
    except AlreadyCheckedIn:
        # Not an error for the client: report the unchanged counters
        habit = await habit_service.get_owned_habit(db, habit_id, current_user.id)
        return CheckinResponse(
            habit_id=habit.id,
            checked_in=False,
            streak=habit.streak,
            total_days=habit.total_days,
        )

    return CheckinResponse(
        habit_id=result.habit.id,
        checked_in=True,
        streak=result.streak,
        total_days=result.total_days,
        unlocked_badges=[BadgeResponse.model_validate(b) for b in result.unlocked_badges],
    )


@router.get("/{habit_id}/checkins", response_model=List[CheckinRecord])
async def read_checkins(
        habit_id: int,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
):
    try:
        return await habit_service.list_checkins(db, habit_id, current_user.id)
    except NotFound:
        raise _habit_not_found()
