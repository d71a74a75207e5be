"""FastAPI dependencies."""

from __future__ import annotations

from fastapi import Request

from src.modules.stats.service import PlayerStatsService


def get_stats_service(request: Request) -> PlayerStatsService:
    """The orchestrator built during application startup."""
    return request.app.state.stats_service
