# lifetrack/app/services/badges.py
"""
Achievement badges.

Each user gets their own copy of DEFAULT_BADGES at registration. A badge
unlocks when either the streak or the total number of days of the habit
that was just checked in reaches its threshold. Unlocking is one-way.
"""
import logging
from typing import List, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lifetrack.app.models.badge import Badge

logger = logging.getLogger(__name__)

DEFAULT_BADGES = (
    {"name": "First Step", "description": "Complete your first check-in", "icon": "🌱", "condition_days": 1},
    {"name": "Persistence", "description": "Check in for 7 days", "icon": "🔥", "condition_days": 7},
    {"name": "Habit Formed", "description": "Check in for 21 days", "icon": "⭐", "condition_days": 21},
    {"name": "Self-Discipline Master", "description": "Check in for 100 days", "icon": "👑", "condition_days": 100},
)


async def seed_user_badges(db: AsyncSession, user_id: int,
                           badges: Sequence[dict] = DEFAULT_BADGES) -> List[Badge]:
    """Add the badge set for a user who has none yet. Caller commits."""
    existing = await db.scalar(select(func.count()).select_from(Badge).where(Badge.user_id == user_id))
    if existing:
        return []

    created = [Badge(user_id=user_id, unlocked=False, **fields) for fields in badges]
    db.add_all(created)
    await db.flush()
    return created


async def list_badges(db: AsyncSession, user_id: int) -> List[Badge]:
    result = await db.execute(
        select(Badge).where(Badge.user_id == user_id).order_by(Badge.condition_days, Badge.id)
    )
    return list(result.scalars().all())


async def evaluate_badges(db: AsyncSession, user_id: int, total_days: int, streak: int) -> List[Badge]:
    """
    Unlock every locked badge of ``user_id`` whose threshold is reached.

    Already unlocked badges are not looked at. Returns the badges unlocked
    by this call. Caller commits.
    """
    result = await db.execute(
        select(Badge).where(Badge.user_id == user_id, Badge.unlocked.is_(False))
    )

    unlocked = []
    for badge in result.scalars():
        if total_days >= badge.condition_days or streak >= badge.condition_days:
            badge.unlocked = True
            unlocked.append(badge)
            logger.info("User %s unlocked badge %r", user_id, badge.name)

    if unlocked:
        await db.flush()
    return unlocked
