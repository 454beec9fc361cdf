# lifetrack/app/api/v1/endpoints/badges.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lifetrack.app.api import deps
from lifetrack.app.db.base import get_db
from lifetrack.app.models.user import User
from lifetrack.app.schemas.badge import BadgeResponse
from lifetrack.app.services import badges as badge_service

router = APIRouter()


@router.get("/", response_model=List[BadgeResponse])
async def read_badges(
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(deps.get_current_user),
):
    return await badge_service.list_badges(db, current_user.id)
