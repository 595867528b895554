from fastapi import APIRouter

from tracker.api.routes.routes_auth import router as auth_router
from tracker.api.routes.routes_project import router as project_router
from tracker.api.routes.routes_users import router as users_router


api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(users_router, prefix="/users", tags=["users"])
api_router.include_router(project_router, prefix="/projects", tags=["projects"])
