# lifetrack/app/api/v1/endpoints/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from lifetrack.app.api import deps
from lifetrack.app.core.errors import HashingError, RegistrationError
from lifetrack.app.db.base import get_db
from lifetrack.app.schemas.user import SessionInfo, UserCreate, UserResponse
from lifetrack.app.security.sessions import Session, SessionManager
from lifetrack.app.services import users as user_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
        user_in: UserCreate,
        response: Response,
        db: AsyncSession = Depends(get_db),
        manager: SessionManager = Depends(deps.get_session_manager),
):
    try:
        user = await user_service.register_user(
            db,
            username=user_in.username,
            email=user_in.email,
            password=user_in.password,
            confirm_password=user_in.confirm_password,
        )
    except RegistrationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except HashingError:
        logger.exception("Password hashing failed during registration")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create account, please try again",
        )

    # A new account is logged in straight away
    manager.create_session(response, user.id, user.username)
    return user


@router.post("/login", response_model=SessionInfo)
async def login(
        response: Response,
        form_data: OAuth2PasswordRequestForm = Depends(),
        db: AsyncSession = Depends(get_db),
        manager: SessionManager = Depends(deps.get_session_manager),
):
    if user_service.is_admin_login(form_data.username, form_data.password):
        logger.info("Admin login")
        return manager.create_session(response, 0, form_data.username, is_admin=True)

    user = await user_service.authenticate_user(db, form_data.username, form_data.password)
    if user is None:
        logger.warning("Failed login for %r", form_data.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
        )

    logger.info("User %s logged in", user.username)
    return manager.create_session(response, user.id, user.username)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
        response: Response,
        token=Depends(deps.get_session_token),
        manager: SessionManager = Depends(deps.get_session_manager),
):
    manager.clear_session(response, token)


@router.get("/me", response_model=SessionInfo)
async def read_current_session(session: Session = Depends(deps.get_current_session)):
    return session
