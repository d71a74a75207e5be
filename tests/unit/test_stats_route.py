"""
Unit tests for the stats route's client-disconnect handling.

The route function is called directly with a stand-in request so the
disconnect can be triggered deterministically.
"""

import asyncio

import pytest

from src.api.routes.stats import CLIENT_CLOSED_REQUEST, get_player_stats
from src.domain.models.stats import StatsSnapshot
from src.modules.shared.exceptions import PlayerNotFoundError

SNAPSHOT = StatsSnapshot(
    username="Steve",
    rank="Default",
    rank_image="user.png",
    playtime="1h 0m",
    kills=0,
    mob_kills=0,
    deaths=0,
    money="0",
    blocks_mined=0,
    blocks_placed=0,
    member_since="1/1/2024",
)


class StubRequest:
    def __init__(self, disconnect_after_polls=None):
        self.polls = 0
        self.disconnect_after_polls = disconnect_after_polls

    async def is_disconnected(self):
        self.polls += 1
        return (
            self.disconnect_after_polls is not None
            and self.polls > self.disconnect_after_polls
        )


@pytest.mark.asyncio
class TestStatsRoute:
    async def test_returns_snapshot_dict(self, mocker):
        service = mocker.Mock()
        service.get_player_stats = mocker.AsyncMock(return_value=SNAPSHOT)

        body = await get_player_stats("Steve", StubRequest(), service)

        assert body == SNAPSHOT.to_dict()

    async def test_errors_reach_exception_handlers(self, mocker):
        service = mocker.Mock()
        service.get_player_stats = mocker.AsyncMock(side_effect=PlayerNotFoundError("x"))

        with pytest.raises(PlayerNotFoundError):
            await get_player_stats("x", StubRequest(), service)

    async def test_client_disconnect_cancels_work(self, mocker):
        """A client hanging up cancels the in-flight snapshot."""
        cancelled = asyncio.Event()

        async def never_finishes(identifier):
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.set()
                raise

        service = mocker.Mock()
        service.get_player_stats = mocker.AsyncMock(side_effect=never_finishes)

        response = await asyncio.wait_for(
            get_player_stats("Steve", StubRequest(disconnect_after_polls=1), service),
            timeout=2.0,
        )

        assert response.status_code == CLIENT_CLOSED_REQUEST
        assert cancelled.is_set()
