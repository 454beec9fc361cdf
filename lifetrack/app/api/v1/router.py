# lifetrack/app/api/v1/router.py
from fastapi import APIRouter

from lifetrack.app.api.v1.endpoints import admin, auth, badges, habits, todos

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(habits.router, prefix="/habits", tags=["habits"])
api_router.include_router(todos.router, prefix="/todos", tags=["todos"])
api_router.include_router(badges.router, prefix="/badges", tags=["badges"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
