# lifetrack/app/models/badge.py
from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text

from lifetrack.app.db.base import Base


class Badge(Base):
    __tablename__ = "badges"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    icon = Column(String(50), nullable=False, default="")

    # Unlocks once streak or total days reach this many days
    condition_days = Column(Integer, nullable=False)
    # One-way: False -> True, never back
    unlocked = Column(Boolean, nullable=False, default=False)
