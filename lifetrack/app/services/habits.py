# lifetrack/app/services/habits.py
"""
Habits and the daily check-in engine.

Streaks are counted in local calendar days. A check-in advances the
streak when the habit was also checked in yesterday and resets it to 1
otherwise; total_days counts every accepted check-in. Only the first
check-in of a day is accepted.

Every function takes the owner's user id and only touches that user's
rows; a habit owned by someone else is reported as NotFound.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Set, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lifetrack.app.core.errors import AlreadyCheckedIn, NotFound
from lifetrack.app.models.badge import Badge
from lifetrack.app.models.habit import Habit, HabitCheckin
from lifetrack.app.services.badges import evaluate_badges

logger = logging.getLogger(__name__)


@dataclass
class CheckinResult:
    habit: Habit
    streak: int
    total_days: int
    unlocked_badges: List[Badge] = field(default_factory=list)


def local_now() -> datetime:
    return datetime.now()


def to_local(moment: datetime) -> datetime:
    """Naive local wall-clock time for ``moment``."""
    if moment.tzinfo is not None:
        return moment.astimezone().replace(tzinfo=None)
    return moment


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


async def get_owned_habit(db: AsyncSession, habit_id: int, user_id: int) -> Habit:
    result = await db.execute(
        select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
    )
    habit = result.scalars().first()
    if habit is None:
        raise NotFound("habit not found")
    return habit


async def _count_checkins(db: AsyncSession, habit_id: int, since: datetime,
                          until: Optional[datetime] = None) -> int:
    query = select(func.count()).select_from(HabitCheckin).where(
        HabitCheckin.habit_id == habit_id,
        HabitCheckin.checked_in_at >= since,
    )
    if until is not None:
        query = query.where(HabitCheckin.checked_in_at < until)
    return await db.scalar(query)


async def record_checkin(db: AsyncSession, habit_id: int, user_id: int,
                         now: Optional[datetime] = None) -> CheckinResult:
    """
    Check a habit in for the calendar day of ``now``.

    Raises:
        NotFound: the habit does not exist or belongs to another user.
        AlreadyCheckedIn: the habit was already checked in that day.
    """
    now = to_local(now or local_now())
    habit = await get_owned_habit(db, habit_id, user_id)

    today = start_of_day(now)
    if await _count_checkins(db, habit_id, today) > 0:
        raise AlreadyCheckedIn("habit %s already checked in today" % habit_id)

    db.add(HabitCheckin(habit_id=habit_id, checked_in_at=now, checkin_day=today.date()))
    try:
        await db.flush()
    except IntegrityError as exc:
        # Lost the race against a concurrent check-in for the same day
        await db.rollback()
        raise AlreadyCheckedIn("habit %s already checked in today" % habit_id) from exc

    yesterday = today - timedelta(days=1)
    if await _count_checkins(db, habit_id, yesterday, today) > 0:
        streak = habit.streak + 1
    else:
        streak = 1
    total_days = habit.total_days + 1

    habit.streak = streak
    habit.total_days = total_days

    unlocked = await evaluate_badges(db, user_id, total_days, streak)

    try:
        await db.commit()
    except SQLAlchemyError:
        logger.exception("Failed to store check-in for habit %s", habit_id)
        raise

    logger.info("Habit %s checked in: streak=%d total_days=%d", habit_id, streak, total_days)
    return CheckinResult(habit=habit, streak=streak, total_days=total_days, unlocked_badges=unlocked)


async def list_habits(db: AsyncSession, user_id: int,
                      now: Optional[datetime] = None) -> List[Tuple[Habit, bool]]:
    """Return the user's habits, each paired with whether it is checked in today."""
    today = start_of_day(to_local(now or local_now()))

    result = await db.execute(
        select(Habit).where(Habit.user_id == user_id).order_by(Habit.id)
    )
    habits = list(result.scalars().all())

    checked = await db.execute(
        select(HabitCheckin.habit_id)
        .join(Habit, Habit.id == HabitCheckin.habit_id)
        .where(Habit.user_id == user_id, HabitCheckin.checked_in_at >= today)
        .distinct()
    )
    checked_ids: Set[int] = set(checked.scalars().all())

    return [(habit, habit.id in checked_ids) for habit in habits]


async def list_checkins(db: AsyncSession, habit_id: int, user_id: int) -> List[HabitCheckin]:
    await get_owned_habit(db, habit_id, user_id)
    result = await db.execute(
        select(HabitCheckin)
        .where(HabitCheckin.habit_id == habit_id)
        .order_by(HabitCheckin.checked_in_at.desc())
    )
    return list(result.scalars().all())


async def create_habit(db: AsyncSession, user_id: int, name: str,
                       description: str = "", frequency: str = "daily") -> Habit:
    habit = Habit(
        user_id=user_id,
        name=name,
        description=description,
        frequency=frequency,
        streak=0,
        total_days=0,
    )
    db.add(habit)
    await db.commit()
    await db.refresh(habit)
    return habit


async def update_habit(db: AsyncSession, habit_id: int, user_id: int, changes: dict) -> Habit:
    """Edit name, description or frequency. Streak counters are not editable."""
    habit = await get_owned_habit(db, habit_id, user_id)
    for key in ("name", "description", "frequency"):
        if key in changes and changes[key] is not None:
            setattr(habit, key, changes[key])
    await db.commit()
    await db.refresh(habit)
    return habit


async def delete_habit(db: AsyncSession, habit_id: int, user_id: int) -> None:
    habit = await get_owned_habit(db, habit_id, user_id)
    await db.execute(delete(HabitCheckin).where(HabitCheckin.habit_id == habit.id))
    await db.delete(habit)
    await db.commit()
