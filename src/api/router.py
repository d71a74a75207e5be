from fastapi import APIRouter

from src.api.routes import health, stats

api_router = APIRouter()
api_router.include_router(stats.router)
api_router.include_router(health.router)
