# lifetrack/app/api/deps.py
from datetime import datetime

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from lifetrack.app.core.errors import NotAuthenticated, SessionExpired
from lifetrack.app.db.base import get_db
from lifetrack.app.models.user import User
from lifetrack.app.security.sessions import Session, SessionManager
from lifetrack.app.services.habits import local_now


def get_session_manager(request: Request) -> SessionManager:
    """The process-wide session manager, installed on app.state at startup."""
    return request.app.state.session_manager


def get_now() -> datetime:
    return local_now()


def get_session_token(request: Request, manager: SessionManager = Depends(get_session_manager)):
    return request.cookies.get(manager.cookie_name)


def get_current_session(
        token=Depends(get_session_token),
        manager: SessionManager = Depends(get_session_manager),
) -> Session:
    try:
        return manager.validate_session(token)
    except NotAuthenticated as exc:
        detail = "Session expired" if isinstance(exc, SessionExpired) else "Not authenticated"
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


async def get_current_user(
        db: AsyncSession = Depends(get_db),
        session: Session = Depends(get_current_session),
) -> User:
    user = await db.get(User, session.user_id)
    if user is None or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user


def require_admin(session: Session = Depends(get_current_session)) -> Session:
    if not session.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return session
