"""Liveness/readiness probe."""

from __future__ import annotations

from fastapi import APIRouter

from src.api.schemas import HealthResponse
from src.core.database.service import DatabaseService

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health():
    database = await DatabaseService.health_check()
    return {"status": "ok" if database else "degraded", "database": database}
