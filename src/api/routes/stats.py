"""
Player statistics route.

The snapshot is computed in its own task so that a client hanging up can
cancel every in-flight resolver instead of letting them run to completion
for nobody.
"""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, Request, Response

from src.api.dependencies import get_stats_service
from src.api.schemas import ErrorResponse, PlayerStatsResponse
from src.core.logging.logger import get_logger
from src.modules.stats.service import PlayerStatsService

logger = get_logger(__name__)

router = APIRouter()

# Non-standard status for a request whose client went away
CLIENT_CLOSED_REQUEST = 499
DISCONNECT_POLL_SECONDS = 0.1


async def _wait_for_disconnect(request: Request) -> None:
    while not await request.is_disconnected():
        await asyncio.sleep(DISCONNECT_POLL_SECONDS)


@router.get(
    "/api/stats/{identifier}",
    response_model=PlayerStatsResponse,
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def get_player_stats(
    identifier: str,
    request: Request,
    service: PlayerStatsService = Depends(get_stats_service),
):
    stats_task = asyncio.create_task(service.get_player_stats(identifier))
    disconnect_task = asyncio.create_task(_wait_for_disconnect(request))

    try:
        await asyncio.wait(
            {stats_task, disconnect_task}, return_when=asyncio.FIRST_COMPLETED
        )
    except asyncio.CancelledError:
        stats_task.cancel()
        raise
    finally:
        disconnect_task.cancel()

    if not stats_task.done():
        stats_task.cancel()
        try:
            await stats_task
        except asyncio.CancelledError:
            pass
        logger.info(
            "Client disconnected; stats request cancelled",
            extra={"identifier": identifier},
        )
        return Response(status_code=CLIENT_CLOSED_REQUEST)

    # Re-raises PlayerNotFoundError / IdentityStoreError for the handlers
    return stats_task.result().to_dict()
