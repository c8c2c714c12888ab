"""
Tests de la reconciliación de partidas en vivo y su caché
"""
import pytest

from komplexaci.core.cache import InMemoryCache
from komplexaci.core.errors import RiotAPIError, RiotErrorKind
from komplexaci.core.regions import Region
from komplexaci.services.live_game_service import (
    LiveGameCacheService,
    LiveGameService,
    get_queue_type_name,
    is_trackable_queue,
)

from tests.conftest import GAME_ID, PUUID, active_game, match_ids_path, spectator_path

EXPECTED_MATCH_ID = f"EUW1_{GAME_ID}"


@pytest.fixture
def live_games(riot_service, clock):
    return LiveGameService(riot_service, history_check_count=5, clock=clock)


@pytest.fixture
def live_cache(live_games, clock):
    return LiveGameCacheService(
        live_games,
        InMemoryCache(default_ttl=60, clock=clock, name="live_game"),
        ttl=60,
        rate_limit_ttl=300,
        clock=clock,
    )


class TestQueueNames:

    @pytest.mark.parametrize(
        "queue_id,name",
        [
            (420, "Ranked Solo/Duo"),
            (440, "Ranked Flex"),
            (450, "ARAM"),
            (1700, "Arena"),
            (1750, "Arena"),
            (1099, "Rotating Game Mode"),
            (870, "Co-op vs AI"),
            (2400, "Game Mode 2400"),
            (None, "Game Mode None"),
        ],
    )
    def test_queue_type_name(self, queue_id, name):
        assert get_queue_type_name(queue_id) == name

    def test_custom_games_are_not_trackable(self):
        assert not is_trackable_queue(0)
        assert is_trackable_queue(420)


class TestLiveGameCheck:

    async def test_ranked_game_not_in_history_is_live(self, live_games, riot_stub, clock):
        """Spectator reports a game that is not in the recent matches"""
        start_ms = int((clock() - 12 * 60) * 1000)
        riot_stub.add(spectator_path(), active_game(queue_id=420, start_ms=start_ms))
        riot_stub.add(match_ids_path(), ["EUW1_7000000001", "EUW1_7000000002"])

        result = await live_games.check(PUUID, Region.EUW1, "Zander")

        assert result.in_game is True
        assert result.game_info["queueTypeName"] == "Ranked Solo/Duo"
        assert result.game_info["gameDurationMinutes"] == 12
        assert result.game_info["gameId"] == GAME_ID
        assert len(result.game_info["participants"]) == 2

    async def test_finished_game_in_history_is_not_live(self, live_games, riot_stub):
        """Spectator data is stale: the game already shows up as completed"""
        riot_stub.add(spectator_path(), active_game(queue_id=420))
        riot_stub.add(match_ids_path(), [EXPECTED_MATCH_ID, "EUW1_7000000001"])

        result = await live_games.check(PUUID, Region.EUW1, "Zander")

        assert result.in_game is False
        assert result.game_info is None

    async def test_custom_game_skips_history(self, live_games, riot_stub):
        riot_stub.add(spectator_path(), active_game(queue_id=0))

        result = await live_games.check(PUUID, Region.EUW1)

        assert result.in_game is False
        assert riot_stub.calls("/lol/match/v5") == 0

    async def test_spectator_404_makes_no_further_calls(self, live_games, riot_stub):
        result = await live_games.check(PUUID, Region.EUW1)

        assert result.in_game is False
        assert len(riot_stub.requests) == 1

    async def test_history_failure_trusts_spectator(self, live_games, riot_stub):
        riot_stub.add(spectator_path(), active_game(queue_id=450))
        riot_stub.error(match_ids_path(), 500, "Internal server error")

        result = await live_games.check(PUUID, Region.EUW1)

        assert result.in_game is True
        assert result.game_info["queueTypeName"] == "ARAM"

    async def test_decryption_failure_trusts_spectator_and_is_remembered(
        self, live_games, riot_stub, failed_puuids
    ):
        riot_stub.add(spectator_path(), active_game(queue_id=420))
        riot_stub.error(match_ids_path(), 400, f"Bad Request - Exception decrypting {PUUID}")

        first = await live_games.check(PUUID, Region.EUW1)
        second = await live_games.check(PUUID, Region.EUW1)

        assert first.in_game is True
        assert second.in_game is True
        assert second.game_info["queueTypeName"] == "Ranked Solo/Duo"
        assert failed_puuids.is_failed(PUUID)
        assert riot_stub.calls("/spectator/") == 2
        assert riot_stub.calls("/ids") == 1

    async def test_history_is_checked_against_last_five(self, live_games, riot_stub):
        riot_stub.add(spectator_path(), active_game())
        riot_stub.add(match_ids_path(), [])

        await live_games.check(PUUID, Region.EUW1)

        history_request = [r for r in riot_stub.requests if r.url.path == match_ids_path()][0]
        assert history_request.url.params["count"] == "5"
        assert history_request.url.params["start"] == "0"

    async def test_region_prefixes_match_id(self, live_games, riot_stub):
        riot_stub.add(spectator_path(), active_game())
        riot_stub.add(match_ids_path(), [f"NA1_{GAME_ID}"])

        result = await live_games.check(PUUID, Region.NA1)

        assert result.in_game is False

    async def test_spectator_rate_limit_propagates(self, live_games, riot_stub):
        riot_stub.error(spectator_path(), 429, "Rate limit exceeded")

        with pytest.raises(RiotAPIError) as exc_info:
            await live_games.check(PUUID, Region.EUW1)

        assert exc_info.value.kind is RiotErrorKind.RATE_LIMITED

    def test_to_dict(self):
        from komplexaci.services.live_game_service import LiveGameCheck

        assert LiveGameCheck(True, {"gameId": 1}).to_dict() == {"inGame": True, "gameInfo": {"gameId": 1}}


class TestLiveGameCache:

    async def test_hit_within_ttl(self, live_cache, riot_stub, clock):
        riot_stub.add(spectator_path(), active_game())
        riot_stub.add(match_ids_path(), [])

        first = await live_cache.get_status(PUUID, Region.EUW1, "Zander")
        requests_after_first = len(riot_stub.requests)
        clock.advance(30)
        second = await live_cache.get_status(PUUID, Region.EUW1, "Zander")

        assert first.cache_hit is False
        assert second.cache_hit is True
        assert second.payload == first.payload
        assert first.payload["validated"] is True
        assert first.payload["memberName"] == "Zander"
        assert first.payload["timestamp"] == int(clock.now * 1000) - 30_000
        assert len(riot_stub.requests) == requests_after_first

    async def test_miss_after_ttl(self, live_cache, riot_stub, clock):
        await live_cache.get_status(PUUID, Region.EUW1)
        clock.advance(61)

        status = await live_cache.get_status(PUUID, Region.EUW1)

        assert status.cache_hit is False
        assert riot_stub.calls("/spectator/") == 2

    async def test_keyed_by_region(self, live_cache, riot_stub):
        await live_cache.get_status(PUUID, Region.EUW1)
        status = await live_cache.get_status(PUUID, Region.EUN1)

        assert status.cache_hit is False
        assert riot_stub.calls("/spectator/") == 2

    async def test_rate_limit_is_cached_five_times_longer(self, live_cache, riot_stub, clock):
        riot_stub.error(spectator_path(), 429, "Rate limit exceeded")

        first = await live_cache.get_status(PUUID, Region.EUW1, "Zander")
        assert first.payload["rateLimited"] is True
        assert first.payload["inGame"] is False
        assert first.payload["gameInfo"] is None

        clock.advance(299)
        assert (await live_cache.get_status(PUUID, Region.EUW1)).cache_hit is True
        assert riot_stub.calls("/spectator/") == 1

        clock.advance(2)
        assert (await live_cache.get_status(PUUID, Region.EUW1)).cache_hit is False
        assert riot_stub.calls("/spectator/") == 2

    async def test_other_errors_are_not_cached(self, live_cache, riot_stub):
        riot_stub.error(spectator_path(), 503, "Service unavailable")

        with pytest.raises(RiotAPIError):
            await live_cache.get_status(PUUID, Region.EUW1)

        assert len(live_cache.cache) == 0
