from lifetrack.app.models.user import User
from lifetrack.app.models.habit import Habit, HabitCheckin
from lifetrack.app.models.badge import Badge
from lifetrack.app.models.todo import Todo, TodoCheckin

__all__ = ["User", "Habit", "HabitCheckin", "Badge", "Todo", "TodoCheckin"]
