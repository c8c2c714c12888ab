"""
Pytest configuration and fixtures.
"""
import os

# Settings are read once, when the app module is first imported
os.environ["RIOT_API_KEY"] = "RGAPI-test-key"
os.environ["LOG_TO_FILE"] = "false"
os.environ["MIN_REQUEST_INTERVAL"] = "0"
os.environ["ACCOUNT_RETRY_DELAY"] = "0"

import httpx
import pytest

from komplexaci.core.cache import FailedPuuidCache, InMemoryCache
from komplexaci.services.riot_service import RequestPacer, RiotAPIService

PUUID = "puuid-komplexaci-member-0001"
GAME_ID = 7012345678


class FakeClock:
    """Manually advanced clock (seconds)."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RiotStub:
    """
    Upstream stand-in for Riot and Data Dragon, keyed by URL path.

    Unregistered paths answer 404 with Riot's error body.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, path, body=None, status=200):
        self.routes[path] = (status, body)

    def error(self, path, status, message="error"):
        self.add(path, {"status": {"message": message, "status_code": status}}, status)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path not in self.routes:
            return httpx.Response(404, json={"status": {"message": "Data not found", "status_code": 404}})
        status, body = self.routes[request.url.path]
        return httpx.Response(status, json=body)

    def calls(self, fragment: str) -> int:
        return sum(1 for r in self.requests if fragment in r.url.path)


def spectator_path(puuid=PUUID):
    return f"/lol/spectator/v5/active-games/by-summoner/{puuid}"


def match_ids_path(puuid=PUUID):
    return f"/lol/match/v5/matches/by-puuid/{puuid}/ids"


def active_game(queue_id=420, game_id=GAME_ID, start_ms=None, participants=None):
    return {
        "gameId": game_id,
        "gameQueueConfigId": queue_id,
        "gameStartTime": start_ms or 0,
        "platformId": "EUW1",
        "participants": participants or [
            {"puuid": PUUID, "riotId": "Zander#KMPX", "championId": 266, "teamId": 100},
            {"puuid": "puuid-enemy-0002", "riotId": "Enemy#EUW", "championId": 103, "teamId": 200},
        ],
    }


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def riot_stub():
    return RiotStub()


@pytest.fixture
def http_client(riot_stub):
    return httpx.AsyncClient(transport=httpx.MockTransport(riot_stub.handler))


@pytest.fixture
def failed_puuids(clock):
    return FailedPuuidCache(InMemoryCache(default_ttl=300, clock=clock, name="failed_puuid"), ttl=300)


@pytest.fixture
def riot_service(http_client, failed_puuids):
    return RiotAPIService(
        "RGAPI-test-key",
        http_client,
        failed_puuids=failed_puuids,
        pacer=RequestPacer(min_interval=0),
        account_retry_delay=0,
    )
