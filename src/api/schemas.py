"""Response models for the public HTTP API."""

from __future__ import annotations

from pydantic import BaseModel


class PlayerStatsResponse(BaseModel):
    """Flat statistics snapshot, display-ready."""

    username: str
    rank: str
    rank_image: str
    playtime: str
    kills: int
    mob_kills: int
    deaths: int
    money: str
    blocks_mined: int
    blocks_placed: int
    member_since: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str  # "ok" | "degraded"
    database: bool
