from fastapi import APIRouter

from pm_engine.api.routes import pm_schedules

api_router = APIRouter()
api_router.include_router(pm_schedules.router)
