# lifetrack/app/models/habit.py
from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.sql import func

from lifetrack.app.db.base import Base


class Habit(Base):
    __tablename__ = "habits"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    # "daily" or "weekly"
    frequency = Column(String(50), nullable=False, default="daily")

    # Only the check-in engine writes these two; streak <= total_days
    streak = Column(Integer, nullable=False, default=0)
    total_days = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class HabitCheckin(Base):
    __tablename__ = "habit_checkins"
    # One streak-advancing check-in per habit and local calendar day.
    # Concurrent check-ins race on this constraint; the loser's insert fails.
    __table_args__ = (
        UniqueConstraint("habit_id", "checkin_day", name="uq_habit_checkins_habit_day"),
    )

    id = Column(Integer, primary_key=True, index=True)
    habit_id = Column(Integer, ForeignKey("habits.id"), index=True, nullable=False)

    # Local wall-clock time of the check-in (naive)
    checked_in_at = Column(DateTime, nullable=False, index=True)
    checkin_day = Column(Date, nullable=False)
