from fastapi import APIRouter

from app.api.routes import dashboard, login, outreach, projects, reports, users, utils

api_router = APIRouter()
api_router.include_router(login.router, tags=["login"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(utils.router, tags=["utils"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(outreach.router, prefix="/outreach", tags=["outreach"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
