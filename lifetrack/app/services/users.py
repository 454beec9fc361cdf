# lifetrack/app/services/users.py
"""
User accounts: registration, password login, edits and removal.
"""
import logging
import secrets
from typing import List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lifetrack.app.core.config import settings
from lifetrack.app.core.errors import DecodeError, NotFound, RegistrationError
from lifetrack.app.models.badge import Badge
from lifetrack.app.models.habit import Habit, HabitCheckin
from lifetrack.app.models.todo import Todo, TodoCheckin
from lifetrack.app.models.user import User
from lifetrack.app.security import hashing
from lifetrack.app.services.badges import seed_user_badges

logger = logging.getLogger(__name__)


async def get_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalars().first()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalars().first()


async def register_user(db: AsyncSession, username: str, email: str, password: str,
                        confirm_password: str) -> User:
    """
    Create a user together with their badge set.

    Raises:
        RegistrationError: missing fields, password mismatch or too short,
            username or email already taken.
        HashingError: the password could not be hashed.
    """
    username = username.strip()
    email = email.strip()

    if not username or not email or not password:
        raise RegistrationError("All fields are required")
    if "@" not in email:
        raise RegistrationError("Invalid email address")
    if password != confirm_password:
        raise RegistrationError("Passwords do not match")
    if len(password) < settings.MIN_PASSWORD_LENGTH:
        raise RegistrationError(
            "Password must be at least %d characters" % settings.MIN_PASSWORD_LENGTH
        )
    if settings.admin_enabled and username == settings.ADMIN_USERNAME:
        raise RegistrationError("Username already exists")
    if await get_user_by_username(db, username):
        raise RegistrationError("Username already exists")
    if await get_user_by_email(db, email):
        raise RegistrationError("Email already in use")

    user = User(
        username=username,
        email=email,
        hashed_password=hashing.hash_password(password),
        is_active=True,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as exc:
        # A concurrent registration took the username or email first
        await db.rollback()
        raise RegistrationError("Username or email already exists") from exc

    await seed_user_badges(db, user.id)
    await db.commit()
    await db.refresh(user)

    logger.info("Registered user %s (id=%s)", user.username, user.id)
    return user


async def authenticate_user(db: AsyncSession, username: str, password: str) -> Optional[User]:
    """Return the user when the credentials match, otherwise None."""
    user = await get_user_by_username(db, username)
    if user is None or not user.is_active:
        return None

    try:
        valid = hashing.verify_password(password, user.hashed_password)
    except DecodeError:
        logger.warning("Stored password hash for user id=%s is malformed", user.id)
        return None

    return user if valid else None


def is_admin_login(username: str, password: str) -> bool:
    """Check credentials against the admin account from configuration."""
    if not settings.admin_enabled:
        return False
    username_ok = secrets.compare_digest(
        hashing.encode_secret(username), hashing.encode_secret(settings.ADMIN_USERNAME)
    )
    password_ok = secrets.compare_digest(
        hashing.encode_secret(password), hashing.encode_secret(settings.ADMIN_PASSWORD)
    )
    return username_ok and password_ok


async def list_users(db: AsyncSession) -> List[Tuple[User, int]]:
    """All users with their habit counts, oldest first."""
    habit_counts = (
        select(Habit.user_id, func.count(Habit.id).label("habit_count"))
        .group_by(Habit.user_id)
        .subquery()
    )
    result = await db.execute(
        select(User, func.coalesce(habit_counts.c.habit_count, 0))
        .outerjoin(habit_counts, habit_counts.c.user_id == User.id)
        .order_by(User.id)
    )
    return [(user, count) for user, count in result.all()]


async def count_habits(db: AsyncSession, user_id: int) -> int:
    return await db.scalar(
        select(func.count()).select_from(Habit).where(Habit.user_id == user_id)
    )


async def delete_user(db: AsyncSession, user_id: int) -> None:
    """Remove a user and everything they own."""
    user = await db.get(User, user_id)
    if user is None:
        raise NotFound("user not found")

    habit_ids = select(Habit.id).where(Habit.user_id == user_id)
    await db.execute(delete(HabitCheckin).where(HabitCheckin.habit_id.in_(habit_ids)))
    await db.execute(delete(Habit).where(Habit.user_id == user_id))
    await db.execute(delete(Badge).where(Badge.user_id == user_id))
    todo_ids = select(Todo.id).where(Todo.user_id == user_id)
    await db.execute(delete(TodoCheckin).where(TodoCheckin.todo_id.in_(todo_ids)))
    await db.execute(delete(Todo).where(Todo.user_id == user_id))
    await db.delete(user)
    await db.commit()

    logger.info("Deleted user id=%s", user_id)


async def update_user(db: AsyncSession, user_id: int, username: Optional[str] = None,
                      email: Optional[str] = None, password: Optional[str] = None) -> User:
    """
    Edit a user's username, email or password (admin back-office).

    Fields left as None are unchanged. A new password is re-hashed; the
    old one stops working immediately.

    Raises:
        NotFound: no such user.
        RegistrationError: empty or invalid values, or username/email taken.
        HashingError: the new password could not be hashed.
    """
    user = await db.get(User, user_id)
    if user is None:
        raise NotFound("user not found")

    if username is not None:
        username = username.strip()
        if not username:
            raise RegistrationError("Username cannot be empty")
        if settings.admin_enabled and username == settings.ADMIN_USERNAME:
            raise RegistrationError("Username already exists")
        existing = await get_user_by_username(db, username)
        if existing is not None and existing.id != user.id:
            raise RegistrationError("Username already exists")

    if email is not None:
        email = email.strip()
        if "@" not in email:
            raise RegistrationError("Invalid email address")
        existing = await get_user_by_email(db, email)
        if existing is not None and existing.id != user.id:
            raise RegistrationError("Email already in use")

    if password is not None and len(password) < settings.MIN_PASSWORD_LENGTH:
        raise RegistrationError(
            "Password must be at least %d characters" % settings.MIN_PASSWORD_LENGTH
        )

    if username is not None:
        user.username = username
    if email is not None:
        user.email = email
    if password is not None:
        user.hashed_password = hashing.hash_password(password)

    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise RegistrationError("Username or email already exists") from exc

    await db.refresh(user)
    logger.info("Updated user id=%s%s", user_id, " (password changed)" if password is not None else "")
    return user
